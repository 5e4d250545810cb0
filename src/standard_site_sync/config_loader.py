"""
Config file lookup for standard_site_sync.

One file is used per run: the first existing entry of
``config_search_path()``. Files are never merged. String values may
reference the environment as ``${VAR}`` or ``${VAR:-default}``, which is
how secrets stay out of the file.

Usage:
    from standard_site_sync.config_loader import load_unified_config

    unified = load_unified_config()
"""

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml

from .config_schema import UnifiedConfig, build_config

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "STANDARD_SITE_CONFIG"
PROJECT_CONFIG = Path(".standard_site") / "config.yml"

# ${VAR} or ${VAR:-default}
_ENV_REF = re.compile(r"\$\{(\w+)(?::-([^}]*))?\}")

_STARTER_CONFIG = """\
# standard-site-sync configuration
#
# Values may reference the environment: ${NAME} or ${NAME:-default}.
# CLI flags and STANDARD_SITE_* variables take precedence over this file.
#
# account:
#   handle: alice.bsky.social
#   app_password: ${STANDARD_SITE_APP_PASSWORD}
#   pds_url: https://bsky.social
#
# publication:
#   uri: at://did:plc:example/site.standard.publication/self
#   url: https://blog.example.com
#
# vault:
#   path: .
#   publish_root: blog
#   pull_folder: blog/imported
#
# logging:
#   level: INFO
#   file: /tmp/standard-site-sync.log
"""


def config_search_path() -> list[Path]:
    """Candidate config files, highest precedence first.

    ``$STANDARD_SITE_CONFIG``, then ``./.standard_site/config.yml``, then
    ``~/.config/standard_site/config.yml``.
    """
    candidates = []
    explicit = os.environ.get(CONFIG_ENV_VAR)
    if explicit:
        candidates.append(Path(explicit).expanduser())
    candidates.append(Path.cwd() / PROJECT_CONFIG)
    candidates.append(Path.home() / ".config" / "standard_site" / "config.yml")
    return candidates


def find_config_file() -> Path | None:
    return next((p for p in config_search_path() if p.is_file()), None)


def _expand_env(value: Any) -> Any:
    if isinstance(value, str):
        return _ENV_REF.sub(
            lambda m: os.environ.get(m.group(1)) or m.group(2) or "", value
        )
    if isinstance(value, dict):
        return {key: _expand_env(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_expand_env(item) for item in value]
    return value


def load_unified_config(path: Path | None = None) -> UnifiedConfig:
    """Read and validate a config file.

    Args:
        path: File to read. Defaults to ``find_config_file()``; with no
            file at all the zero-config ``UnifiedConfig()`` is returned.

    Raises:
        ValueError: The file is not valid YAML, its root is not a
            mapping, or a section has the wrong shape.
    """
    path = path or find_config_file()
    if path is None:
        logger.debug("No config file found, using defaults")
        return UnifiedConfig()

    logger.debug("Loading config: %s", path)
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc

    if raw is None:
        return UnifiedConfig()
    if not isinstance(raw, dict):
        raise ValueError(
            f"Config file {path} must contain a mapping, "
            f"not {type(raw).__name__}"
        )
    return build_config(_expand_env(raw))


def write_starter_config(target: Path | None = None) -> Path:
    """Create a commented starter config unless one is already in use.

    Returns:
        Path of the config file, existing or newly written.
    """
    path = target or find_config_file() or Path.cwd() / PROJECT_CONFIG
    if path.exists():
        return path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(_STARTER_CONFIG, encoding="utf-8")
    logger.info("Created starter config: %s", path)
    return path

"""Runtime configuration for the sync CLI.

Reads account, publication and vault settings from CLI args, environment
variables, .env files, and YAML config file fallbacks.

Precedence (highest to lowest):
    CLI args > Environment variables > .env file > YAML config > Built-in defaults

Environment variables:
    STANDARD_SITE_HANDLE: Account handle (required)
    STANDARD_SITE_APP_PASSWORD: App password (required)
    STANDARD_SITE_PDS_URL: PDS base URL (optional, default: https://bsky.social)
    STANDARD_SITE_PUBLICATION_URI: Publication AT-URI (optional, auto-selected)
    STANDARD_SITE_PUBLICATION_URL: Public site URL (optional)
    STANDARD_SITE_VAULT: Vault root directory (optional, default: .)
    STANDARD_SITE_PUBLISH_ROOT: Vault folder mapped to the site root (optional)
    STANDARD_SITE_PULL_FOLDER: Vault folder for pulled notes (optional)
    STANDARD_SITE_DEBUG: Enable debug logging (optional, default: false)
"""

import logging
import os
from dataclasses import dataclass
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

DEFAULT_PDS_URL = "https://bsky.social"


@dataclass
class Config:
    handle: str
    app_password: str
    pds_url: str = DEFAULT_PDS_URL
    publication_uri: str | None = None
    publication_url: str | None = None
    vault: str = "."
    publish_root: str = ""
    pull_folder: str = ""
    debug: bool = False


def validate_config(config: Config) -> None:
    """Validate configuration values and raise ValueError if invalid.

    Args:
        config: Config instance to validate.

    Raises:
        ValueError: If the PDS URL is malformed or credentials are empty.
    """
    config.pds_url = config.pds_url.strip()

    if not config.pds_url.startswith(("http://", "https://")):
        raise ValueError(
            f"Invalid PDS URL '{config.pds_url}': must start with http:// or https://"
        )

    parsed = urlparse(config.pds_url)
    if not parsed.hostname:
        raise ValueError(
            f"Invalid PDS URL '{config.pds_url}': URL must include a hostname"
        )

    config.pds_url = config.pds_url.removesuffix("/")

    if not config.handle.strip():
        raise ValueError(
            "Handle cannot be empty. Set STANDARD_SITE_HANDLE environment variable."
        )

    if not config.app_password.strip():
        raise ValueError(
            "App password cannot be empty. Set STANDARD_SITE_APP_PASSWORD environment variable."
        )

    if config.publication_uri and not config.publication_uri.startswith(
        "at://"
    ):
        raise ValueError(
            f"Invalid publication URI '{config.publication_uri}': must start with at://"
        )

    # Folder settings are vault-relative and compared without slashes
    config.publish_root = config.publish_root.strip().strip("/")
    config.pull_folder = config.pull_folder.strip().strip("/")


def load_config(
    handle: str | None = None,
    app_password: str | None = None,
    pds_url: str | None = None,
    vault: str | None = None,
    debug: bool = False,
    yaml_fallbacks: dict | None = None,
) -> Config:
    """Load configuration with unified precedence.

    Resolution order for each field (highest to lowest):
        CLI arg > env var / .env > yaml_fallbacks > built-in default

    The caller is responsible for calling ``load_dotenv()`` before this
    function so that .env values are available via ``os.getenv()``.

    Args:
        handle: Override account handle.
        app_password: Override app password.
        pds_url: Override PDS base URL.
        vault: Override vault root directory.
        debug: Enable debug logging (CLI flag).
        yaml_fallbacks: Flat dict of values from the YAML config file,
            as produced by ``to_fallbacks()``.

    Returns:
        Validated Config instance.

    Raises:
        ValueError: If the handle or app password is missing after
            checking all sources, or a value is invalid.
    """
    fb = yaml_fallbacks or {}

    def resolve(cli_value: str | None, env_key: str, fb_key: str):
        return cli_value or os.getenv(env_key) or fb.get(fb_key)

    # --- Required string fields: CLI > env > YAML > error ---

    final_handle = resolve(handle, "STANDARD_SITE_HANDLE", "handle")
    if not final_handle:
        raise ValueError(
            "Handle not found. Set STANDARD_SITE_HANDLE environment variable, "
            "pass --handle CLI argument, or add 'handle' to config.yml."
        )

    final_password = resolve(
        app_password, "STANDARD_SITE_APP_PASSWORD", "app_password"
    )
    if not final_password:
        raise ValueError(
            "App password not found. Set STANDARD_SITE_APP_PASSWORD environment variable, "
            "pass --app-password CLI argument, or add 'app_password' to config.yml."
        )

    # --- Optional string fields: CLI > env > YAML > default ---

    final_pds_url = (
        resolve(pds_url, "STANDARD_SITE_PDS_URL", "pds_url") or DEFAULT_PDS_URL
    )
    final_vault = resolve(vault, "STANDARD_SITE_VAULT", "vault") or "."

    # No CLI args for publication and folder settings
    publication_uri = resolve(
        None, "STANDARD_SITE_PUBLICATION_URI", "publication_uri"
    )
    publication_url = resolve(
        None, "STANDARD_SITE_PUBLICATION_URL", "publication_url"
    )
    publish_root = resolve(None, "STANDARD_SITE_PUBLISH_ROOT", "publish_root")
    pull_folder = resolve(None, "STANDARD_SITE_PULL_FOLDER", "pull_folder")

    # --- Boolean fields: CLI > env > YAML > default ---

    if debug:
        final_debug = True
    else:
        env_debug = os.getenv("STANDARD_SITE_DEBUG")
        if env_debug is not None:
            final_debug = env_debug.lower() in ("true", "1", "yes", "on")
        else:
            final_debug = bool(fb.get("debug", False))

    config = Config(
        handle=final_handle.strip(),
        app_password=final_password.strip(),
        pds_url=final_pds_url,
        publication_uri=publication_uri.strip() if publication_uri else None,
        publication_url=publication_url.strip() if publication_url else None,
        vault=final_vault,
        publish_root=publish_root or "",
        pull_folder=pull_folder or "",
        debug=final_debug,
    )

    validate_config(config)

    return config

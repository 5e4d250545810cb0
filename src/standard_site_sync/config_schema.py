"""Unified configuration schema for standard_site_sync.

Defines Pydantic models for the YAML config structure with dedicated
sections for the account, the publication, the vault and logging.
The ``logging`` section feeds ``setup_logging()``; the other sections are
flattened by ``to_fallbacks()`` for ``load_config()``.

Usage:
    from standard_site_sync.config_loader import load_unified_config
    from standard_site_sync.config_schema import to_fallbacks

    unified = load_unified_config()
    config = load_config(yaml_fallbacks=to_fallbacks(unified))
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Section models
# ---------------------------------------------------------------------------


class AccountConfig(BaseModel):
    """Account and PDS settings.

    All fields are optional to support zero-config: env vars and CLI args
    can supply them at runtime instead.
    """

    handle: str | None = Field(default=None, description="Account handle")
    app_password: str | None = Field(
        default=None, description="App password"
    )
    pds_url: str | None = Field(default=None, description="PDS base URL")
    debug: bool = Field(default=False, description="Enable debug mode")

    model_config = {"frozen": True}


class PublicationConfig(BaseModel):
    """Target publication."""

    uri: str | None = Field(
        default=None, description="Publication AT-URI"
    )
    url: str | None = Field(
        default=None, description="Public URL of the site"
    )

    model_config = {"frozen": True}


class VaultConfig(BaseModel):
    """Vault location and folder mapping.

    Attributes:
        path: Vault root directory.
        publish_root: Vault folder whose contents map to the site root.
        pull_folder: Vault folder that receives pulled notes.
    """

    path: str | None = Field(default=None, description="Vault root")
    publish_root: str | None = Field(
        default=None, description="Folder mapped to the site root"
    )
    pull_folder: str | None = Field(
        default=None, description="Folder for pulled notes"
    )

    model_config = {"frozen": True}


class LoggingConfig(BaseModel):
    """Logging configuration.

    Attributes:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            Unset means the mode default; ``LOG_LEVEL`` and ``--debug`` win.
        file: Extra log file; ``--log-file`` wins.
    """

    level: str | None = Field(default=None, description="Log level")
    file: str | None = Field(default=None, description="Log file path")

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# Top-level unified config
# ---------------------------------------------------------------------------


class UnifiedConfig(BaseModel):
    """Top-level unified configuration.

    Every section has defaults, so ``UnifiedConfig()`` (zero-config) is
    always valid.
    """

    account: AccountConfig = Field(default_factory=AccountConfig)
    publication: PublicationConfig = Field(
        default_factory=PublicationConfig
    )
    vault: VaultConfig = Field(default_factory=VaultConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# Factory function
# ---------------------------------------------------------------------------


def build_config(raw_data: dict) -> UnifiedConfig:
    """Construct a ``UnifiedConfig`` from the parsed config file mapping.

    Missing sections get defaults.

    Raises:
        pydantic.ValidationError: If a section has the wrong shape.
    """
    if not raw_data:
        return UnifiedConfig()

    return UnifiedConfig(**raw_data)


# ---------------------------------------------------------------------------
# Adapters
# ---------------------------------------------------------------------------


def to_fallbacks(unified: UnifiedConfig) -> dict[str, Any]:
    """Flatten the sections into the ``yaml_fallbacks`` dict of
    ``load_config()``, dropping unset values.
    """
    flat = {
        "handle": unified.account.handle,
        "app_password": unified.account.app_password,
        "pds_url": unified.account.pds_url,
        "debug": unified.account.debug,
        "publication_uri": unified.publication.uri,
        "publication_url": unified.publication.url,
        "vault": unified.vault.path,
        "publish_root": unified.vault.publish_root,
        "pull_folder": unified.vault.pull_folder,
    }
    return {k: v for k, v in flat.items() if v is not None}


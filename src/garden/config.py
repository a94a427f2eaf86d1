"""
Configuration for garden.

Uses pydantic-settings so every value can come from the environment.
Environment variables use the GARDEN_ prefix (e.g., GARDEN_VAULT_PATH).
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from garden.vault import Vault, VaultBuilder


class Settings(BaseSettings):
    """Settings with environment variable support.

    Environment variables:
    - GARDEN_VAULT_PATH: Directory holding the notes
    - GARDEN_TAGS: JSON list of tags; only notes carrying one are kept
    - GARDEN_LOG_LEVEL: Level for the ``garden`` logger
    """

    vault_path: Path = Path(".")
    tags: list[str] | None = None
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="GARDEN_")


def build_vault(settings: Settings | None = None) -> Vault:
    """Build the vault described by *settings* (read from the environment by default)."""
    if settings is None:
        settings = Settings()
    builder = VaultBuilder(settings.vault_path)
    if settings.tags is not None:
        builder.filter_tags(settings.tags)
    return builder.build()

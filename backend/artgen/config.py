# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ArtGen — Application Configuration
All settings are loaded from environment variables with defaults that
match the bundled asset layout. Override via backend/.env or environment.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ─── Bundled Assets ──────────────────────────────────────────────────────
    assets_dir: Path = Path("./assets")
    logo_filename: str = "thumbnails/SSRB_Logo.png"

    # ─── Asset Fetching ──────────────────────────────────────────────────────
    # Root-relative refs ("/covers/x.png") that are not files on disk are
    # fetched from this origin
    dev_server_origin: str = "http://localhost:1212"
    # None leaves fetches unbounded (httpx default timeout disabled)
    http_timeout_seconds: Optional[float] = None

    # ─── Storage ─────────────────────────────────────────────────────────────
    storage_root: Path = Path("./storage")

    # ─── Job Store ───────────────────────────────────────────────────────────
    job_store_backend: Literal["memory", "redis"] = "memory"
    redis_url: str = "redis://localhost:6379/0"
    job_ttl_seconds: int = 86400  # 24 hours

    # ─── Logging ─────────────────────────────────────────────────────────────
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # ─── Server ──────────────────────────────────────────────────────────────
    host: str = "0.0.0.0"
    port: int = 8000

    # ─── Derived helpers ─────────────────────────────────────────────────────
    @property
    def fonts_dir(self) -> Path:
        return self.assets_dir / "fonts"

    @property
    def logo_path(self) -> Path:
        return self.assets_dir / self.logo_filename


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached singleton Settings instance."""
    return Settings()

"""Centralised settings for the meshctl client.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

DEFAULT_API_URL = "http://localhost:8080/api/v1"


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Control-plane API
    # ------------------------------------------------------------------
    api_url: str = field(
        default_factory=lambda: os.environ.get("MESH_API_URL") or DEFAULT_API_URL
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("MESH_REQUEST_TIMEOUT", "10.0"))
    )

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------
    token_key: str = "authToken"
    login_path: str = "/login"

    # ------------------------------------------------------------------
    # CLI state / logging
    # ------------------------------------------------------------------
    config_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get("MESHCTL_CONFIG_DIR", Path.home() / ".meshctl")
        )
    )
    log_level: str = field(
        default_factory=lambda: os.environ.get("MESHCTL_LOG_LEVEL", "WARNING")
    )

    @property
    def credentials_path(self) -> Path:
        """Absolute path to the JSON file holding stored credentials."""
        return self.config_dir / "credentials.json"


# Module-level singleton, import this everywhere:
#   from meshctl.config import settings
settings = Settings()

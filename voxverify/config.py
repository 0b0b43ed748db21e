"""
Central application configuration.

Every tunable value lives here as a typed, documented field.
Any field can be overridden at runtime via an environment variable of the
same name (case-insensitive), e.g.:

    PORT=9000 python -m voxverify                 # local run on another port
    export GEMINI_MODEL=gemini-2.5-pro             # staging override

A `.env` file at the project root is loaded automatically.

The Gemini credential (`API_KEY`) is intentionally NOT a field: it is read
from the process environment on every analysis call so it can be rotated
without a restart. See `get_api_key()`.
"""

import os
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


API_KEY_ENV_VAR = "API_KEY"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,   # PORT == port
        extra="ignore",         # silently drop unknown env vars
    )

    # ------------------------------------------------------------------ #
    # Server                                                              #
    # ------------------------------------------------------------------ #
    service_name: str = Field(
        "VoxVerify", description="Name reported by the health endpoint"
    )
    host: str = Field(
        "0.0.0.0", description="Listen address (externally reachable by default)"
    )
    port: int = Field(
        8080, description="Listen port (Cloud Run convention)"
    )
    log_level: str = Field(
        "INFO", description="Root logging level"
    )
    static_dir: str = Field(
        os.path.join(os.path.dirname(__file__), "static"),
        description="Directory holding the single-page UI build",
    )
    spa_entry_document: str = Field(
        "index.html", description="Fallback document for unmatched GET paths"
    )

    # ------------------------------------------------------------------ #
    # Request Limits                                                      #
    # ------------------------------------------------------------------ #
    max_body_mb: int = Field(
        50, description="Max MB for JSON / URL-encoded request bodies"
    )

    # ------------------------------------------------------------------ #
    # CORS                                                                #
    # ------------------------------------------------------------------ #
    cors_allow_origins: list[str] = Field(
        default_factory=lambda: ["*"], description="Allowed origins"
    )
    cors_allow_methods: list[str] = Field(
        default_factory=lambda: ["GET", "POST", "OPTIONS"], description="Allowed methods"
    )
    cors_allow_headers: list[str] = Field(
        default_factory=lambda: ["Content-Type", "x-api-key", "Authorization"],
        description="Allowed request headers",
    )

    # ------------------------------------------------------------------ #
    # Gemini Client                                                       #
    # ------------------------------------------------------------------ #
    gemini_model: str = Field(
        "gemini-3-pro-preview", description="Model used for forensic classification"
    )
    gemini_thinking_budget: int = Field(
        32_768, description="Internal reasoning token budget per analysis"
    )
    gemini_audio_mime_type: str = Field(
        "audio/mp3", description="MIME type attached to the inline audio part"
    )

    # ------------------------------------------------------------------ #
    # Client Uploader                                                     #
    # ------------------------------------------------------------------ #
    bridge_url: str = Field(
        "http://localhost:8080/analyze", description="Analysis endpoint used by the uploader"
    )
    client_http_timeout_sec: int = Field(
        300, description="Uploader HTTP total timeout (model thinking can take a while)"
    )
    copy_ack_sec: float = Field(
        2.0, description="How long the 'copied' acknowledgment stays visible"
    )

    # ------------------------------------------------------------------ #
    # Derived byte-level properties (computed from MB fields)             #
    # ------------------------------------------------------------------ #
    @property
    def max_body_bytes(self) -> int:
        return self.max_body_mb * 1024 * 1024


def get_api_key() -> Optional[str]:
    """Read the Gemini credential fresh from the environment. Empty counts as missing."""
    return os.getenv(API_KEY_ENV_VAR) or None


# Single shared instance — import this everywhere.
settings = Settings()

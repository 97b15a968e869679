from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


# ──────────────────────────────────────────────
# Settings (from environment variables / .env)
# ──────────────────────────────────────────────
class Settings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    # Server settings
    port: int = 5000

    # Database settings
    mongodb_uri: str | None = None
    mongodb_fallback_uri: str = "mongodb://localhost:27017/fridge-fusion"
    mongodb_timeout_ms: int = 5000

    # Auth settings
    jwt_secret: str | None = None
    jwt_algorithm: str = "HS256"

    # CORS settings
    cors_origins: str = "*"
    cors_allow_credentials: bool = False
    cors_allow_methods: str = "*"
    cors_allow_headers: str = "*"

    # Upload settings
    upload_root: Path | None = None
    max_upload_size: int = 5 * 1024 * 1024  # 5 MB

    # Application settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def cors_methods_list(self) -> list[str]:
        """Parse CORS methods from comma-separated string."""
        if self.cors_allow_methods == "*":
            return ["*"]
        return [method.strip() for method in self.cors_allow_methods.split(",")]

    @property
    def cors_headers_list(self) -> list[str]:
        """Parse CORS headers from comma-separated string."""
        if self.cors_allow_headers == "*":
            return ["*"]
        return [header.strip() for header in self.cors_allow_headers.split(",")]


# Global settings instance
settings = Settings()

# ──────────────────────────────────────────────
# Paths
# ──────────────────────────────────────────────
BASE_DIR = Path(__file__).resolve().parent.parent          # src/
UPLOAD_DIR = settings.upload_root or BASE_DIR / "uploads"
PROFILE_UPLOAD_DIR = UPLOAD_DIR / "profiles"

# StaticFiles refuses to mount a missing directory
UPLOAD_DIR.mkdir(parents=True, exist_ok=True)

# ──────────────────────────────────────────────
# URL prefixes
# ──────────────────────────────────────────────
UPLOAD_URL_PREFIX = "/uploads"
PROFILE_URL_PREFIX = f"{UPLOAD_URL_PREFIX}/profiles"

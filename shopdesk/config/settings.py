from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    # ── Application ──────────────────────────────────────────────
    app_name: str = "Shopdesk Back Office"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"
    api_version: str = "v1"

    # ── Database ─────────────────────────────────────────────────
    mongodb_atlas_uri: Optional[str] = None
    database_name: str = "shopdesk_db"

    # ── JWT / Security ───────────────────────────────────────────
    secret_key: str = "change-me-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 1440  # 24 hours

    # ── CORS ─────────────────────────────────────────────────────
    cors_allowed_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
    cors_allow_credentials: bool = True
    cors_allowed_methods: list[str] = ["*"]
    cors_allowed_headers: list[str] = ["*"]

    # ── Management screens ───────────────────────────────────────
    page_size: int = 10
    search_debounce_ms: int = 500
    low_stock_threshold: int = 10
    session_file: str = "~/.shopdesk/session.json"

    # ── Image uploads ────────────────────────────────────────────
    upload_max_bytes: int = 5 * 1024 * 1024
    upload_allowed_extensions: list[str] = ["jpg", "jpeg", "png"]
    upload_bucket: str = "product_images"
    upload_public_base_url: Optional[str] = None

    class Config:
        env_file = ".env.local"
        extra = "ignore"


# ── Module-level singleton ──────────────────────────────────────
settings = Settings()

import os
import logging
from pydantic import BaseModel, Field
from typing import List
from dotenv import load_dotenv

load_dotenv()

class Config(BaseModel):
    app_name: str = "HRMS Platform"
    environment: str = os.getenv("APP_ENV", "development")
    api_prefix: str = "/api"

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./hrms.db")

    # Auth
    # HMAC key for access tokens; at least 32 bytes for HS256.
    secret_key: str = os.getenv("SECRET_KEY", "dev-only-insecure-secret-key-change-me-0123456789")
    jwt_algorithm: str = os.getenv("JWT_ALGORITHM", "HS256")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))

    version: str = "1.0.0"
    request_id_header: str = "X-Request-ID"
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # CORS - comma-separated origins loaded from env.
    cors_origins: List[str] = Field(
        default_factory=lambda: [
            o.strip()
            for o in os.getenv(
                "CORS_ORIGINS",
                "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000",
            ).split(",")
            if o.strip()
        ]
    )

    rate_limit_per_minute: int = int(os.getenv("RATE_LIMIT_PER_MINUTE", "60"))

    # Company logos
    upload_dir: str = os.getenv("UPLOAD_DIR", "./uploads")
    max_logo_size_bytes: int = int(os.getenv("MAX_LOGO_SIZE_BYTES", str(2 * 1024 * 1024)))

    # Reports render clock times in the tenant's zone, falling back to this one.
    default_timezone: str = os.getenv("DEFAULT_TIMEZONE", "Asia/Kolkata")

settings = Config()

# --- Startup Validation for Production ---
_INSECURE_SECRET = "dev-only-insecure-secret-key-change-me-0123456789"
_logger = logging.getLogger(__name__)
if settings.environment not in ("development", "testing"):
    if settings.secret_key == _INSECURE_SECRET:
        raise RuntimeError(
            "FATAL: SECRET_KEY must be set for non-development environments. "
            "Generate one with `openssl rand -hex 32`."
        )
else:
    if settings.secret_key == _INSECURE_SECRET:
        _logger.warning("Using insecure default SECRET_KEY, only acceptable in development.")

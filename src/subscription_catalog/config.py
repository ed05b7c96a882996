import logging
import os
from dataclasses import dataclass
from functools import lru_cache

import redis
from dotenv import load_dotenv

load_dotenv()

CACHE_BACKENDS = ("redis", "memory", "none")
EMAIL_PROVIDERS = ("log", "smtp")


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./subscriptions.db")
    database_echo: bool = _env_bool("DATABASE_ECHO", "false")

    # Redis
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")
    redis_socket_timeout: float = float(os.getenv("REDIS_SOCKET_TIMEOUT", "0.5"))

    # Cache
    cache_backend: str = os.getenv("CACHE_BACKEND", "redis").lower()
    cache_ttl: int = int(os.getenv("CACHE_TTL", "3600"))  # 1 hour default

    # Notifications
    admin_email: str | None = os.getenv("ADMIN_EMAIL")
    email_provider: str = os.getenv("EMAIL_PROVIDER", "log").lower()
    mail_from: str = os.getenv("MAIL_FROM", "noreply@example.com")
    smtp_host: str = os.getenv("SMTP_HOST", "localhost")
    smtp_port: int = int(os.getenv("SMTP_PORT", "587"))
    smtp_username: str | None = os.getenv("SMTP_USERNAME")
    smtp_password: str | None = os.getenv("SMTP_PASSWORD")
    smtp_use_tls: bool = _env_bool("SMTP_USE_TLS", "true")
    subject_created: str = os.getenv("EMAIL_SUBJECT_CREATED", "New subscription created")
    subject_updated: str = os.getenv("EMAIL_SUBJECT_UPDATED", "Subscription updated")
    subject_activated: str = os.getenv("EMAIL_SUBJECT_ACTIVATED", "Subscription activated")
    subject_deactivated: str = os.getenv("EMAIL_SUBJECT_DEACTIVATED", "Subscription deactivated")

    # Security
    jwt_secret: str = os.getenv("JWT_SECRET", "")
    jwt_algorithm: str = os.getenv("JWT_ALGORITHM", "HS256")
    allow_public_writes: bool = _env_bool("ALLOW_PUBLIC_WRITES", "false")

    # Catalog
    seed_on_startup: bool = _env_bool("SEED_ON_STARTUP", "true")
    default_page_size: int = int(os.getenv("DEFAULT_PAGE_SIZE", "10"))
    max_page_size: int = int(os.getenv("MAX_PAGE_SIZE", "100"))

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = _env_bool("API_RELOAD", "true")
    cors_origins: str = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:8080")
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def cors_origin_list(self) -> list[str]:
        """Split the comma separated CORS_ORIGINS value.

        Returns:
            List of allowed origins, empty entries removed
        """
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.cache_ttl <= 0:
            raise ValueError("CACHE_TTL must be a positive number of seconds")

        if self.cache_backend not in CACHE_BACKENDS:
            raise ValueError(f"CACHE_BACKEND must be one of {list(CACHE_BACKENDS)}, got {self.cache_backend!r}")

        if self.email_provider not in EMAIL_PROVIDERS:
            raise ValueError(f"EMAIL_PROVIDER must be one of {list(EMAIL_PROVIDERS)}, got {self.email_provider!r}")

        if not 1 <= self.default_page_size <= self.max_page_size:
            raise ValueError(
                f"DEFAULT_PAGE_SIZE must be between 1 and MAX_PAGE_SIZE ({self.max_page_size}), "
                f"got {self.default_page_size}"
            )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def get_redis_client(config: Settings | None = None) -> redis.Redis:
    """Create a Redis client instance.

    Short socket timeouts keep a stalled Redis from holding up requests;
    callers treat timeouts as cache misses.
    """
    config = config or settings
    return redis.from_url(
        config.redis_url,
        password=config.redis_password,
        socket_timeout=config.redis_socket_timeout,
        socket_connect_timeout=config.redis_socket_timeout,
        decode_responses=False,
    )


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for the service."""
    logging.basicConfig(
        level=(level or settings.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    secret_key: str
    env: str
    database_url: str
    log_level: str
    default_media_type: str


def _getenv(name: str, default: str = "") -> str:
    return (os.environ.get(name) or default).strip()


def load_settings() -> Settings:
    return Settings(
        secret_key=_getenv("SECRET_KEY", "change-me"),
        env=_getenv("ENV", "development"),
        database_url=_getenv("DATABASE_URL", "sqlite:///customers.db"),
        log_level=_getenv("LOG_LEVEL", "INFO").upper(),
        default_media_type=_getenv("DEFAULT_MEDIA_TYPE", "application/json").lower(),
    )


def load_config() -> dict:
    s = load_settings()
    return {
        "SECRET_KEY": s.secret_key,
        "ENV": s.env,
        "DATABASE_URL": s.database_url,
        "LOG_LEVEL": s.log_level,
        # used when the Accept header expresses no preference
        "DEFAULT_MEDIA_TYPE": s.default_media_type,
        # request bodies are small JSON/XML documents
        "MAX_CONTENT_LENGTH": 1 * 1024 * 1024,
    }

from dataclasses import dataclass, field
from typing import Optional
from dotenv import load_dotenv
import logging
import os

logger = logging.getLogger(__name__)

DEFAULT_APP_NAME = "device-manager"


class ConfigError(ValueError):
    pass


def _get_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigError(f"{key} must be an integer, got {value!r}")


@dataclass(frozen=True)
class Settings:
    app_name: str = DEFAULT_APP_NAME
    server_host: str = "0.0.0.0"
    server_port: int = 8080
    http_timeout: int = 10  # seconds, also bounds each database call
    log_level: str = "INFO"

    db_driver: str = "mysql+pymysql"
    db_user: str = "root"
    db_password: str = field(default="", repr=False)
    db_host: str = "127.0.0.1"
    db_port: str = "3306"
    db_name: str = "device_manager"
    # Full URL, takes precedence over the parts above
    db_url: Optional[str] = field(default=None, repr=False)

    @property
    def database_url(self) -> str:
        if self.db_url:
            return self.db_url
        return f"{self.db_driver}://{self.db_user}:{self.db_password}@{self.db_host}:{self.db_port}/{self.db_name}"

    def validate(self) -> None:
        if self.server_port <= 0:
            raise ConfigError("server port is required")
        if self.http_timeout <= 0:
            raise ConfigError("http timeout must be greater than 0 seconds")
        if self.db_url:
            return
        if not self.db_host:
            raise ConfigError("database host is required")
        if not self.db_port:
            raise ConfigError("database port is required")
        if not self.db_user:
            raise ConfigError("database user is required")
        if not self.db_password:
            raise ConfigError("database password is required")
        if not self.db_name:
            raise ConfigError("database name is required")


def load_settings() -> Settings:
    # Load environment variables from a .env file
    if not load_dotenv():
        logger.debug("No .env file found, falling back to system env")

    return Settings(
        app_name=os.getenv("APP_NAME", DEFAULT_APP_NAME),
        server_host=os.getenv("SERVER_HOST", "0.0.0.0"),
        server_port=_get_int("SERVER_PORT", 8080),
        http_timeout=_get_int("HTTP_TIMEOUT_IN_SECONDS", 10),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        db_driver=os.getenv("DB_DRIVER", "mysql+pymysql"),
        db_user=os.getenv("DB_USERNAME", "root"),
        db_password=os.getenv("DB_PASSWORD", ""),
        db_host=os.getenv("DB_HOST", "127.0.0.1"),
        db_port=os.getenv("DB_PORT", "3306"),
        db_name=os.getenv("DB_NAME", "device_manager"),
        db_url=os.getenv("DATABASE_URL") or None,
    )

from unittest.mock import patch

import pytest

from device_manager.config import ConfigError, Settings, load_settings
from device_manager.database import create_db_engine
from device_manager.main import create_app

ENV_KEYS = [
    "APP_NAME",
    "SERVER_HOST",
    "SERVER_PORT",
    "HTTP_TIMEOUT_IN_SECONDS",
    "LOG_LEVEL",
    "DB_DRIVER",
    "DB_USERNAME",
    "DB_PASSWORD",
    "DB_HOST",
    "DB_PORT",
    "DB_NAME",
    "DATABASE_URL",
]


@pytest.fixture
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    settings = load_settings()

    assert settings.app_name == "device-manager"
    assert settings.server_port == 8080
    assert settings.http_timeout == 10
    assert settings.database_url == "mysql+pymysql://root:@127.0.0.1:3306/device_manager"


def test_reads_environment(clean_env):
    clean_env.setenv("SERVER_PORT", "9000")
    clean_env.setenv("HTTP_TIMEOUT_IN_SECONDS", "3")
    clean_env.setenv("LOG_LEVEL", "debug")
    clean_env.setenv("DB_USERNAME", "devices")
    clean_env.setenv("DB_PASSWORD", "secret")
    clean_env.setenv("DB_HOST", "db")
    clean_env.setenv("DB_NAME", "inventory")

    settings = load_settings()

    assert settings.server_port == 9000
    assert settings.http_timeout == 3
    assert settings.log_level == "DEBUG"
    assert settings.database_url == "mysql+pymysql://devices:secret@db:3306/inventory"
    settings.validate()


def test_database_url_overrides_parts(clean_env):
    clean_env.setenv("DATABASE_URL", "sqlite:///devices.db")
    clean_env.setenv("DB_HOST", "ignored")

    settings = load_settings()

    assert settings.database_url == "sqlite:///devices.db"
    settings.validate()


def test_invalid_integer(clean_env):
    clean_env.setenv("SERVER_PORT", "eighty")

    with pytest.raises(ConfigError, match="SERVER_PORT"):
        load_settings()


def test_missing_password_is_invalid():
    with pytest.raises(ConfigError, match="database password is required"):
        Settings(db_password="").validate()


def test_password_not_in_repr():
    assert "secret" not in repr(Settings(db_password="secret"))


def test_sqlite_engine(tmp_path):
    engine = create_db_engine(Settings(db_url=f"sqlite:///{tmp_path / 'devices.db'}"))
    try:
        assert engine.url.get_backend_name() == "sqlite"
    finally:
        engine.dispose()


def test_mysql_engine_bounds_every_call_by_timeout():
    engine = create_db_engine(Settings(db_password="x", http_timeout=3))
    try:
        assert engine.url.get_backend_name() == "mysql"
        assert engine.pool._timeout == 3
        assert engine.pool._pre_ping is True
    finally:
        engine.dispose()


def test_mysql_driver_gets_connect_read_and_write_timeouts():
    with patch("device_manager.database.create_engine") as create_engine:
        create_db_engine(Settings(db_password="x", http_timeout=3))

    kwargs = create_engine.call_args.kwargs
    assert kwargs["connect_args"] == {
        "connect_timeout": 3,
        "read_timeout": 3,
        "write_timeout": 3,
    }
    assert kwargs["pool_timeout"] == 3
    assert kwargs["pool_pre_ping"] is True


def test_sqlite_engine_gets_no_driver_timeouts():
    with patch("device_manager.database.create_engine") as create_engine:
        create_db_engine(Settings(db_url="sqlite://"))

    assert "connect_args" not in create_engine.call_args.kwargs
    assert "pool_timeout" not in create_engine.call_args.kwargs


def test_app_from_environment_validates_settings(clean_env):
    with pytest.raises(ConfigError, match="database password is required"):
        create_app()


def test_app_from_environment(clean_env):
    clean_env.setenv("DATABASE_URL", "sqlite://")
    clean_env.setenv("APP_NAME", "inventory")

    app = create_app()
    try:
        assert app.state.settings.app_name == "inventory"
    finally:
        app.state.engine.dispose()

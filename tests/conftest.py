import os

# Keep the module-level app in device_manager.main off any real database
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from device_manager.config import Settings
from device_manager.main import create_app
from device_manager.models.device import Device, DeviceState
from device_manager.repositories.sql_device_repository import SqlDeviceRepository


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def repository(session):
    return SqlDeviceRepository(session)


@pytest.fixture
def settings():
    return Settings(app_name="device-manager-test", db_url="sqlite://", log_level="DEBUG")


@pytest.fixture
def client(settings, engine):
    app = create_app(settings, engine=engine)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def make_device(repository):
    def _make_device(name="Galaxy S23 FE", brand="Samsung", state=DeviceState.AVAILABLE) -> Device:
        return repository.create_device(Device(name=name, brand=brand, state=state))

    return _make_device

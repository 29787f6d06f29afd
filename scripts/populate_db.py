import sys
import os

# Add the project root directory to Python path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import logging
from sqlmodel import Session

from device_manager.config import load_settings
from device_manager.database import create_db_and_tables, create_db_engine
from device_manager.logging_config import setup_logging
from device_manager.models.device import Device, DeviceState
from device_manager.repositories.sql_device_repository import SqlDeviceRepository

logger = logging.getLogger("populate_db")

# Test data
test_devices = [
    {"name": "Galaxy S23 FE", "brand": "Samsung", "state": DeviceState.AVAILABLE},
    {"name": "Galaxy Tab S9", "brand": "Samsung", "state": DeviceState.IN_USE},
    {"name": "iPhone 15", "brand": "Apple", "state": DeviceState.IN_USE},
    {"name": "iPad Air", "brand": "Apple", "state": DeviceState.AVAILABLE},
    {"name": "MacBook Pro 14", "brand": "Apple", "state": DeviceState.INACTIVE},
    {"name": "Pixel 8", "brand": "Google", "state": DeviceState.AVAILABLE},
    {"name": "ThinkPad X1 Carbon", "brand": "Lenovo", "state": DeviceState.INACTIVE},
    {"name": "XPS 13", "brand": "Dell", "state": DeviceState.IN_USE},
]

def create_devices(repository: SqlDeviceRepository) -> list[Device]:
    devices = []
    for device_data in test_devices:
        device = repository.create_device(Device(**device_data))
        logger.info("Created %s %s (%s) with id %s", device.brand, device.name, device.state, device.id)
        devices.append(device)
    return devices

def main():
    settings = load_settings()
    setup_logging(settings.log_level)
    settings.validate()

    engine = create_db_engine(settings)
    create_db_and_tables(engine)

    with Session(engine) as session:
        devices = create_devices(SqlDeviceRepository(session))

    logger.info("Populated database with %d devices", len(devices))

if __name__ == "__main__":
    main()

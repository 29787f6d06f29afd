from .device_repository import DeviceRepository
from .sql_device_repository import SqlDeviceRepository

__all__ = ["DeviceRepository", "SqlDeviceRepository"]

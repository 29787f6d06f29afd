from fastapi import Depends
from sqlmodel import Session

from .database import get_session
from .repositories.device_repository import DeviceRepository
from .repositories.sql_device_repository import SqlDeviceRepository
from .services.device_service import DeviceService


# Built per request on the request's session; tests override these
def get_device_repository(session: Session = Depends(get_session)) -> DeviceRepository:
    return SqlDeviceRepository(session)


def get_device_service(
    repository: DeviceRepository = Depends(get_device_repository),
) -> DeviceService:
    return DeviceService(device_repository=repository)

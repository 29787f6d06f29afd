import logging
from datetime import datetime, timezone
from typing import List, Optional
import uuid

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from ..errors import DeviceNotFoundError, NoRowsAffectedError
from ..models.device import Device, DeviceFilter, DeviceState
from .device_repository import DeviceRepository

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class SqlDeviceRepository(DeviceRepository):
    """Device persistence on a SQLModel session.

    Every write is a single UPDATE whose WHERE clause carries the lifecycle
    condition, so the check and the write happen in one statement.
    """

    def __init__(self, session: Session):
        self.session = session

    def create_device(self, device: Device) -> Device:
        db_device = Device(name=device.name, brand=device.brand, state=device.state)
        try:
            self.session.add(db_device)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        self.session.refresh(db_device)
        return db_device

    def get_device_by_id(self, device_id: uuid.UUID) -> Device:
        device = self._find_live(device_id)
        if not device:
            raise DeviceNotFoundError(f"device {device_id} not found")
        return device

    def fully_update_device(
        self, device: Device, expected_state: Optional[DeviceState] = None
    ) -> Device:
        statement = self._live_update(device.id, expected_state).values(
            name=device.name,
            brand=device.brand,
            state=device.state,
            updated_at=_now(),
        )
        self._write(statement, device.id)
        return self.get_device_by_id(device.id)

    def update_device_state(
        self,
        device_id: uuid.UUID,
        state: DeviceState,
        expected_state: Optional[DeviceState] = None,
    ) -> Device:
        statement = self._live_update(device_id, expected_state).values(
            state=state,
            updated_at=_now(),
        )
        self._write(statement, device_id)
        return self.get_device_by_id(device_id)

    def delete_device(self, device_id: uuid.UUID) -> None:
        statement = (
            update(Device)
            .where(
                (Device.id == device_id) &
                (Device.deleted_at.is_(None)) &
                (Device.state != DeviceState.IN_USE)
            )
            .values(deleted_at=_now())
        )
        self._write(statement, device_id)

    def list_devices(self, filters: Optional[DeviceFilter] = None) -> List[Device]:
        statement = select(Device).where(Device.deleted_at.is_(None))

        if filters is not None:
            if filters.brand is not None:
                statement = statement.where(Device.brand == filters.brand)
            if filters.state is not None:
                statement = statement.where(Device.state == filters.state)

        statement = statement.order_by(Device.name).execution_options(populate_existing=True)
        return list(self.session.exec(statement).all())

    def _find_live(self, device_id: uuid.UUID) -> Optional[Device]:
        statement = (
            select(Device)
            .where((Device.id == device_id) & (Device.deleted_at.is_(None)))
            .execution_options(populate_existing=True)
        )
        return self.session.exec(statement).first()

    def _live_update(self, device_id: uuid.UUID, expected_state: Optional[DeviceState]):
        condition = (Device.id == device_id) & (Device.deleted_at.is_(None))
        if expected_state is not None:
            condition = condition & (Device.state == expected_state)
        return update(Device).where(condition)

    def _write(self, statement, device_id: uuid.UUID) -> None:
        try:
            result = self.session.connection().execute(statement)
            affected = result.rowcount
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise

        if affected == 0:
            logger.debug("Conditioned write on device %s matched no rows", device_id)
            raise NoRowsAffectedError(f"no rows affected for device {device_id}")

import threading
from datetime import datetime, timezone
from typing import Dict, List, Optional
import uuid

from device_manager.errors import DeviceNotFoundError, NoRowsAffectedError
from device_manager.models.device import Device, DeviceFilter, DeviceState
from device_manager.repositories.device_repository import DeviceRepository
from device_manager.services.lifecycle import can_delete


def copy_device(device: Device) -> Device:
    return Device(
        id=device.id,
        name=device.name,
        brand=device.brand,
        state=device.state,
        created_at=device.created_at,
        updated_at=device.updated_at,
        deleted_at=device.deleted_at,
    )


class InMemoryDeviceRepository(DeviceRepository):
    """Dict-backed repository with the same conditioned-write semantics as SQL.

    Each write checks its condition and applies under one lock, like a single
    UPDATE statement. Callers always get copies.
    """

    def __init__(self, devices: Optional[List[Device]] = None):
        self.devices: Dict[uuid.UUID, Device] = {}
        self.writes: List[str] = []
        self._lock = threading.Lock()
        for device in devices or []:
            self.devices[device.id] = copy_device(device)

    def create_device(self, device: Device) -> Device:
        stored = Device(name=device.name, brand=device.brand, state=device.state)
        with self._lock:
            self.devices[stored.id] = stored
            self.writes.append("create_device")
        return copy_device(stored)

    def get_device_by_id(self, device_id: uuid.UUID) -> Device:
        with self._lock:
            stored = self._live(device_id)
            if stored is None:
                raise DeviceNotFoundError(f"device {device_id} not found")
            return copy_device(stored)

    def fully_update_device(
        self, device: Device, expected_state: Optional[DeviceState] = None
    ) -> Device:
        with self._lock:
            stored = self._matching(device.id, expected_state)
            stored.name = device.name
            stored.brand = device.brand
            stored.state = device.state
            stored.updated_at = datetime.now(timezone.utc)
            self.writes.append("fully_update_device")
            return copy_device(stored)

    def update_device_state(
        self,
        device_id: uuid.UUID,
        state: DeviceState,
        expected_state: Optional[DeviceState] = None,
    ) -> Device:
        with self._lock:
            stored = self._matching(device_id, expected_state)
            stored.state = state
            stored.updated_at = datetime.now(timezone.utc)
            self.writes.append("update_device_state")
            return copy_device(stored)

    def delete_device(self, device_id: uuid.UUID) -> None:
        with self._lock:
            stored = self._live(device_id)
            if stored is None or not can_delete(stored):
                raise NoRowsAffectedError(f"no rows affected for device {device_id}")
            stored.deleted_at = datetime.now(timezone.utc)
            self.writes.append("delete_device")

    def list_devices(self, filters: Optional[DeviceFilter] = None) -> List[Device]:
        filters = filters or DeviceFilter()
        with self._lock:
            devices = [
                copy_device(device)
                for device in self.devices.values()
                if device.deleted_at is None
                and (filters.brand is None or device.brand == filters.brand)
                and (filters.state is None or device.state == filters.state)
            ]
        return sorted(devices, key=lambda device: device.name)

    def _live(self, device_id: uuid.UUID) -> Optional[Device]:
        device = self.devices.get(device_id)
        if device is None or device.deleted_at is not None:
            return None
        return device

    def _matching(self, device_id: uuid.UUID, expected_state: Optional[DeviceState]) -> Device:
        stored = self._live(device_id)
        if stored is None or (expected_state is not None and stored.state != expected_state):
            raise NoRowsAffectedError(f"no rows affected for device {device_id}")
        return stored

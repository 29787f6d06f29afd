"""
Device Repository Interface
===========================

Abstract interface for device persistence.
The SQL implementation lives in ``sql_device_repository``; tests use an
in-memory implementation of the same contract.
"""
from abc import ABC, abstractmethod
from typing import List, Optional
import uuid

from ..models.device import Device, DeviceFilter, DeviceState


class DeviceRepository(ABC):
    """
    Contract the device service relies on.

    Soft-deleted rows are invisible to every method. Failures other than
    the two documented exceptions propagate as the storage library raises
    them.
    """

    @abstractmethod
    def create_device(self, device: Device) -> Device:
        """
        Insert a device.

        Returns:
            The stored device with ``id`` and ``created_at`` assigned
        """

    @abstractmethod
    def get_device_by_id(self, device_id: uuid.UUID) -> Device:
        """
        Raises:
            DeviceNotFoundError: no live device has this id
        """

    @abstractmethod
    def fully_update_device(
        self, device: Device, expected_state: Optional[DeviceState] = None
    ) -> Device:
        """
        Rewrite name, brand and state of ``device.id`` and stamp ``updated_at``.

        When ``expected_state`` is given the write only applies if the
        persisted state still equals it.

        Raises:
            NoRowsAffectedError: the conditioned write matched nothing
        """

    @abstractmethod
    def update_device_state(
        self,
        device_id: uuid.UUID,
        state: DeviceState,
        expected_state: Optional[DeviceState] = None,
    ) -> Device:
        """
        Rewrite only the state of a device and stamp ``updated_at``.

        Raises:
            NoRowsAffectedError: the conditioned write matched nothing
        """

    @abstractmethod
    def delete_device(self, device_id: uuid.UUID) -> None:
        """
        Soft delete a device that is not in use.

        Raises:
            NoRowsAffectedError: no live device with this id that is not in use
        """

    @abstractmethod
    def list_devices(self, filters: Optional[DeviceFilter] = None) -> List[Device]:
        """
        Live devices matching every given filter, ordered by name.
        """

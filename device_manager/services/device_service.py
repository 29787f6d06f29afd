import logging
from typing import List, Optional
import uuid

from ..errors import DeviceError, DeviceErrorType, DeviceNotFoundError, NoRowsAffectedError
from ..models.device import Device, DeviceFilter
from ..repositories.device_repository import DeviceRepository
from .lifecycle import Decision, can_delete, decide

logger = logging.getLogger(__name__)


class DeviceService:
    """Device use cases on top of an injected repository.

    Every failure leaves this class as a ``DeviceError``; raw storage
    errors are logged here and kept only as the error's ``cause``.
    """

    def __init__(self, device_repository: DeviceRepository):
        self.repository = device_repository

    def list_devices(self, filters: Optional[DeviceFilter] = None) -> List[Device]:
        try:
            return self.repository.list_devices(filters)
        except Exception as e:
            logger.error("Error listing devices: %s", e)
            raise DeviceError(
                DeviceErrorType.INTERNAL, "something went wrong while listing devices", e
            ) from e

    def get_device(self, device_id: uuid.UUID) -> Device:
        try:
            return self.repository.get_device_by_id(device_id)
        except DeviceNotFoundError as e:
            logger.info("Device not found: %s", device_id)
            raise DeviceError(DeviceErrorType.NOT_FOUND, "device not found", e) from e
        except Exception as e:
            logger.error("Error searching device %s by id: %s", device_id, e)
            raise DeviceError(
                DeviceErrorType.INTERNAL, "something went wrong while retrieving device", e
            ) from e

    def create_device(self, device: Device) -> Device:
        try:
            created = self.repository.create_device(device)
        except Exception as e:
            logger.error("Error creating device: %s", e)
            raise DeviceError(
                DeviceErrorType.INTERNAL, "something went wrong while create device", e
            ) from e

        logger.info("Created device %s (%s)", created.id, created.state)
        return created

    def update_device(self, device: Device) -> Device:
        """
        Apply ``device`` over the stored record according to the lifecycle rules.

        The write is conditioned on the state read here. When another request
        changes the state in between, the write matches no row and the update
        is rejected instead of being applied on top of a decision that no
        longer holds.
        """
        try:
            current = self.repository.get_device_by_id(device.id)
        except DeviceNotFoundError as e:
            logger.info("Device not found for update: %s", device.id)
            raise DeviceError(DeviceErrorType.NOT_FOUND, "device not found", e) from e
        except Exception as e:
            # A failed lookup is reported as not found too
            logger.error("Error getting device %s by id: %s", device.id, e)
            raise DeviceError(
                DeviceErrorType.NOT_FOUND, "something went wrong while retrieving device", e
            ) from e

        decision = decide(current, device)
        previous_state = current.state

        if decision == Decision.REJECTED:
            raise DeviceError(
                DeviceErrorType.INVALID,
                "device is in use and cannot be updated",
                ValueError(f"device state is the same: {current.state}"),
            )

        try:
            if decision == Decision.STATE_ONLY_UPDATE:
                failure_message = "something went wrong while update device state"
                updated = self.repository.update_device_state(
                    device.id, device.state, expected_state=previous_state
                )
            else:
                failure_message = "something went wrong while fully update device"
                updated = self.repository.fully_update_device(device, expected_state=previous_state)
        except NoRowsAffectedError as e:
            raise self._concurrent_update_error(device.id, e) from e
        except DeviceNotFoundError as e:
            raise DeviceError(DeviceErrorType.NOT_FOUND, "device not found", e) from e
        except Exception as e:
            logger.error("Error on %s of device %s: %s", decision.value, device.id, e)
            raise DeviceError(DeviceErrorType.INTERNAL, failure_message, e) from e

        logger.info(
            "Updated device %s (%s): %s -> %s", device.id, decision.value, previous_state, updated.state
        )
        return updated

    def delete_device(self, device_id: uuid.UUID) -> None:
        try:
            self.repository.delete_device(device_id)
        except NoRowsAffectedError as e:
            raise self._delete_refused_error(device_id, e) from e
        except Exception as e:
            logger.error("Error deleting device %s: %s", device_id, e)
            raise DeviceError(
                DeviceErrorType.INTERNAL, "something went wrong while delete device", e
            ) from e

        logger.info("Deleted device %s", device_id)

    def _concurrent_update_error(self, device_id: uuid.UUID, cause: Exception) -> DeviceError:
        try:
            self.repository.get_device_by_id(device_id)
        except DeviceNotFoundError:
            return DeviceError(DeviceErrorType.NOT_FOUND, "device not found", cause)
        except Exception as e:
            logger.error("Error re-reading device %s after a refused update: %s", device_id, e)
            return DeviceError(
                DeviceErrorType.INTERNAL, "something went wrong while retrieving device", e
            )

        logger.warning("Device %s changed state while being updated", device_id)
        return DeviceError(
            DeviceErrorType.INVALID, "device was modified concurrently, retry the update", cause
        )

    def _delete_refused_error(self, device_id: uuid.UUID, cause: Exception) -> DeviceError:
        # The delete itself is atomic; this read only explains why it matched nothing
        try:
            current = self.repository.get_device_by_id(device_id)
        except DeviceNotFoundError:
            logger.info("Device not found for delete: %s", device_id)
            return DeviceError(DeviceErrorType.NOT_FOUND, "device not found", cause)
        except Exception as e:
            logger.error("Error re-reading device %s after a refused delete: %s", device_id, e)
            return DeviceError(DeviceErrorType.NOT_FOUND, "device not found", cause)

        if not can_delete(current):
            logger.info("Refused to delete device %s while in use", device_id)
            return DeviceError(
                DeviceErrorType.NOT_FOUND, "device is in use and cannot be deleted", cause
            )

        return DeviceError(DeviceErrorType.NOT_FOUND, "device not found", cause)

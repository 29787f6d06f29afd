"""
Device lifecycle rules.

A device that is in use is locked: its name and brand cannot change and it
cannot be deleted. Its state can always move to a different value, otherwise
a device could never be returned.
"""
from enum import Enum

from ..models.device import Device, DeviceState


class Decision(str, Enum):
    FULL_UPDATE = "full_update"
    STATE_ONLY_UPDATE = "state_only_update"
    REJECTED = "rejected"


def decide(current: Device, requested: Device) -> Decision:
    """Pick the kind of write allowed when ``current`` is changed into ``requested``."""
    if current.state != DeviceState.IN_USE:
        return Decision.FULL_UPDATE

    # Re-submitting "in-use" for a locked device is not a real transition
    if requested.state == current.state:
        return Decision.REJECTED

    return Decision.STATE_ONLY_UPDATE


def can_delete(current: Device) -> bool:
    return current.state != DeviceState.IN_USE

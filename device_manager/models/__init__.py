from .device import (
    Device,
    DeviceBase,
    DeviceCreate,
    DeviceFilter,
    DevicePublic,
    DeviceState,
    DeviceUpdate,
)

__all__ = [
    "Device",
    "DeviceBase",
    "DeviceCreate",
    "DeviceFilter",
    "DevicePublic",
    "DeviceState",
    "DeviceUpdate",
]

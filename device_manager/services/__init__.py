from .device_service import DeviceService
from .lifecycle import Decision, can_delete, decide

__all__ = ["DeviceService", "Decision", "can_delete", "decide"]

from enum import Enum
from typing import Optional


class DeviceErrorType(str, Enum):
    NOT_FOUND = "not_found"
    INVALID = "invalid"
    INTERNAL = "internal"


class DeviceError(Exception):
    """Error surfaced by the device service.

    ``message`` is safe to show to API clients. ``cause`` keeps the
    underlying exception for logging and is never serialized.
    """

    def __init__(self, kind: DeviceErrorType, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message

    def __repr__(self) -> str:
        return f"DeviceError(kind={self.kind.value!r}, message={self.message!r})"


class DeviceNotFoundError(LookupError):
    """Raised by a repository when no live device matches the id."""


class NoRowsAffectedError(Exception):
    """Raised by a repository when a conditioned write matched no row."""

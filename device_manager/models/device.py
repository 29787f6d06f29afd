from sqlmodel import SQLModel, Field
from sqlalchemy import Enum as SAEnum, String
from sqlalchemy.dialects import mysql
from typing import Optional
from datetime import datetime, timezone
from enum import Enum
import uuid

class DeviceState(str, Enum):
    AVAILABLE = "available"
    IN_USE = "in-use"
    INACTIVE = "inactive"

    def __str__(self) -> str:
        return self.value

# Stored by value ("in-use"), not by member name
device_state_type = SAEnum(
    DeviceState,
    name="device_state",
    values_callable=lambda states: [state.value for state in states],
    validate_strings=True,
)

def binary_string(length: int) -> String:
    # Compare bytes on MySQL, whose default collation ignores case and accents
    return String(length).with_variant(mysql.VARCHAR(length, collation="utf8mb4_bin"), "mysql")

class DeviceBase(SQLModel):
    name: str = Field(min_length=1, max_length=100, sa_type=binary_string(100), index=True)
    brand: str = Field(min_length=1, max_length=50, sa_type=binary_string(50), index=True)
    state: DeviceState = Field(sa_type=device_state_type, nullable=False, index=True)

class Device(DeviceBase, table=True):
    __tablename__ = "devices"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: Optional[datetime] = Field(default=None)
    deleted_at: Optional[datetime] = Field(default=None, index=True)

class DeviceCreate(DeviceBase):
    pass

class DeviceUpdate(DeviceBase):
    pass

class DevicePublic(DeviceBase):
    id: uuid.UUID
    created_at: datetime
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None

class DeviceFilter(SQLModel):
    brand: Optional[str] = None
    state: Optional[DeviceState] = None

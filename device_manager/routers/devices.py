from fastapi import APIRouter, Depends, HTTPException, Request
from typing import List
import re
import uuid

from ..dependencies import get_device_service
from ..models.device import (
    Device,
    DeviceCreate,
    DeviceFilter,
    DevicePublic,
    DeviceState,
    DeviceUpdate,
)
from ..services.device_service import DeviceService

router = APIRouter(
    prefix="/devices",
    tags=["Devices"]
)

ALLOWED_FILTERS = ("brand", "state")
BRAND_FILTER_PATTERN = re.compile(r"[a-zA-Z0-9]+")
VALID_STATES = ", ".join(state.value for state in DeviceState)

def parse_device_id(device_id: str) -> uuid.UUID:
    if not device_id:
        raise HTTPException(status_code=400, detail="you must inform the device id")
    try:
        return uuid.UUID(device_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="invalid device id format, must be an uuid")

def parse_list_filters(request: Request) -> DeviceFilter:
    for param in request.query_params.keys():
        if param not in ALLOWED_FILTERS:
            raise HTTPException(status_code=400, detail=f"invalid parameter: {param}")

    brand = request.query_params.get("brand")
    state = request.query_params.get("state")

    if brand is not None and not BRAND_FILTER_PATTERN.fullmatch(brand):
        raise HTTPException(status_code=400, detail="invalid brand filter")

    # An empty state means no state filter
    if state:
        try:
            state = DeviceState(state)
        except ValueError:
            raise HTTPException(
                status_code=400,
                detail=f"invalid state filter, must be one of: {VALID_STATES}"
            )

    return DeviceFilter(brand=brand, state=state or None)

@router.get("", response_model=List[DevicePublic])
def list_devices(
    filters: DeviceFilter = Depends(parse_list_filters),
    service: DeviceService = Depends(get_device_service)
):
    return service.list_devices(filters)

@router.get("/{device_id}", response_model=DevicePublic)
def read_device(
    device_id: str,
    service: DeviceService = Depends(get_device_service)
):
    return service.get_device(parse_device_id(device_id))

@router.post("", response_model=DevicePublic, status_code=201)
def create_device(
    device: DeviceCreate,
    service: DeviceService = Depends(get_device_service)
):
    new_device = Device(
        name=device.name,
        brand=device.brand,
        state=device.state
    )
    return service.create_device(new_device)

@router.put("/{device_id}", response_model=DevicePublic)
def update_device(
    device_id: str,
    device: DeviceUpdate,
    service: DeviceService = Depends(get_device_service)
):
    requested = Device(
        id=parse_device_id(device_id),
        name=device.name,
        brand=device.brand,
        state=device.state
    )
    return service.update_device(requested)

@router.delete("/{device_id}", status_code=204)
def delete_device(
    device_id: str,
    service: DeviceService = Depends(get_device_service)
):
    service.delete_device(parse_device_id(device_id))

# sanam/routers/location.py
import threading

from fastapi import APIRouter, Depends

from ..deps import get_cancel_token, get_location_store, require_admin
from ..errors import ValidationError
from ..location import LocationSettingsStore
from ..models import DayHoursPatch, LocationSettings, LocationSettingsUpdate

router = APIRouter(prefix="/location", tags=["location"])


@router.get("", response_model=LocationSettings)
def get_location(
    store: LocationSettingsStore = Depends(get_location_store),
    cancel: threading.Event = Depends(get_cancel_token),
):
    return store.get(cancel)


@router.put("", response_model=LocationSettings, dependencies=[Depends(require_admin)])
def update_location(
    payload: LocationSettingsUpdate,
    store: LocationSettingsStore = Depends(get_location_store),
    cancel: threading.Event = Depends(get_cancel_token),
):
    return store.update(payload, cancel)


@router.patch("/hours/{day}", response_model=LocationSettings, dependencies=[Depends(require_admin)])
def update_day_hours(
    day: str,
    payload: DayHoursPatch,
    store: LocationSettingsStore = Depends(get_location_store),
    cancel: threading.Event = Depends(get_cancel_token),
):
    if payload.open is None and payload.close is None:
        raise ValidationError("Give open, close, or both")
    return store.set_day_hours(day, open_time=payload.open, close_time=payload.close, cancel=cancel)

# sanam/location.py
import logging
import threading
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional, Union

from .errors import NotFoundError, ValidationError
from .models import WEEKDAYS, DayHours, LocationSettings, LocationSettingsUpdate
from .store import BaseStore

log = logging.getLogger("uvicorn.error")

UPDATABLE_FIELDS = {"address", "city", "state", "zip", "phone", "email", "hours", "map_url"}

HoursMap = Mapping[str, Union[DayHours, Dict[str, Any]]]


def merge_day_hours(
    hours: HoursMap,
    day: str,
    open_time: Optional[str] = None,
    close_time: Optional[str] = None,
) -> Dict[str, DayHours]:
    """
    Return a new hours map where only ``day`` differs from ``hours``.

    The settings row is always written whole, so a single-day edit has to carry
    the other six days along unchanged.
    """
    day = day.lower()
    if day not in WEEKDAYS:
        raise ValidationError(f"Unknown weekday: {day}")

    merged = {d: DayHours.model_validate(h if isinstance(h, dict) else h.model_dump()) for d, h in hours.items()}
    current = merged.get(day)
    if current is None:
        if open_time is None or close_time is None:
            raise ValidationError(f"No hours stored for {day}; both open and close are required")
        merged[day] = DayHours(open=open_time, close=close_time)
        return merged

    merged[day] = DayHours(
        open=open_time if open_time is not None else current.open,
        close=close_time if close_time is not None else current.close,
    )
    return merged


class LocationSettingsStore(BaseStore):
    """The shop's single address/contact/hours row. It is never created from here."""

    table = "location_settings"

    def get(self, cancel: Optional[threading.Event] = None) -> LocationSettings:
        rows = self._execute(self._query().select("*").limit(2), cancel)
        if not rows:
            raise NotFoundError("No location settings found.")
        if len(rows) > 1:
            raise NotFoundError("More than one location settings row found.")
        return LocationSettings(**rows[0])

    def update(
        self,
        record: Union[LocationSettings, LocationSettingsUpdate],
        cancel: Optional[threading.Event] = None,
    ) -> LocationSettings:
        payload = record.model_dump(mode="json", include=UPDATABLE_FIELDS)
        payload["updated_at"] = datetime.now(timezone.utc).isoformat()

        rows = self._execute(self._query().update(payload).eq("id", str(record.id)), cancel)
        if not rows:
            raise NotFoundError(f"No location settings with id {record.id}")
        log.info(f"Updated location settings {record.id}")
        return LocationSettings(**rows[0])

    def set_day_hours(
        self,
        day: str,
        open_time: Optional[str] = None,
        close_time: Optional[str] = None,
        cancel: Optional[threading.Event] = None,
    ) -> LocationSettings:
        current = self.get(cancel)
        hours = merge_day_hours(current.hours, day, open_time, close_time)
        return self.update(current.model_copy(update={"hours": hours}), cancel)

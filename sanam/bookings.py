# sanam/bookings.py
import datetime as dt
import logging
import threading
from typing import Any, Dict, Iterable, List, Optional
from uuid import UUID

from .errors import BackendError, require_fields
from .models import Appointment, AppointmentView, Service
from .store import BaseStore

log = logging.getLogger("uvicorn.error")

APPOINTMENT_FIELDS = ("service_id", "name", "email", "phone", "date", "time")


def _row_to_appointment(row: Dict[str, Any]) -> Appointment:
    return Appointment(
        id=row["id"],
        service_id=str(row["service_id"]),
        name=row["name"],
        email=row["email"],
        phone=row["phone"],
        date=row["date"],
        time=row["time"],
        created_at=row.get("created_at"),
    )


class BookingIntake(BaseStore):
    """
    Appends appointment requests. There is no slot bookkeeping: the same
    date/time can be booked any number of times, and so can the same request.
    """

    table = "appointments"

    def submit(
        self,
        service_id: str,
        name: str,
        email: str,
        phone: str,
        date: dt.date | str,
        time: str,
        cancel: Optional[threading.Event] = None,
    ) -> Appointment:
        fields = {
            "service_id": service_id,
            "name": name,
            "email": email,
            "phone": phone,
            "date": date.isoformat() if isinstance(date, dt.date) else date,
            "time": time,
        }
        require_fields(fields, APPOINTMENT_FIELDS)

        rows = self._execute(self._query().insert(fields), cancel)
        if not rows:
            raise BackendError("appointments insert returned no row")
        appointment = _row_to_appointment(rows[0])
        log.info(f"Booked appointment {appointment.id} for service {appointment.service_id} on {appointment.date} {appointment.time}")
        return appointment

    def list(self, cancel: Optional[threading.Event] = None) -> List[Appointment]:
        rows = self._execute(self._query().select("*").order("date", desc=False), cancel)
        return [_row_to_appointment(r) for r in rows]

    def remove(self, appointment_id: UUID | str, cancel: Optional[threading.Event] = None) -> List[Appointment]:
        self._execute(self._query().delete().eq("id", str(appointment_id)), cancel)
        log.info(f"Deleted appointment {appointment_id}")
        return self.list(cancel)


def with_service_titles(appointments: Iterable[Appointment], services: Iterable[Service]) -> List[AppointmentView]:
    # service_id is not a live foreign key; deleted services just lose their title
    titles = {str(s.id): s.title for s in services}
    return [
        AppointmentView(**a.model_dump(), service_title=titles.get(a.service_id))
        for a in appointments
    ]

# sanam/routers/appointments.py
import threading
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query

from ..bookings import BookingIntake, with_service_titles
from ..catalog import CatalogStore
from ..deps import get_booking_intake, get_cancel_token, get_catalog, require_admin
from ..models import Appointment, AppointmentIn, AppointmentView

router = APIRouter(prefix="/appointments", tags=["appointments"])


# ──────────────────────────────────────────────────────────────────────────────
# Public booking form
# ──────────────────────────────────────────────────────────────────────────────
@router.post("", response_model=Appointment, status_code=201)
def book_appointment(
    payload: AppointmentIn,
    intake: BookingIntake = Depends(get_booking_intake),
    cancel: threading.Event = Depends(get_cancel_token),
):
    return intake.submit(
        service_id=payload.service_id,
        name=payload.name,
        email=payload.email,
        phone=payload.phone,
        date=payload.date,
        time=payload.time,
        cancel=cancel,
    )


# ──────────────────────────────────────────────────────────────────────────────
# Admin table
# ──────────────────────────────────────────────────────────────────────────────
@router.get("", response_model=List[AppointmentView], dependencies=[Depends(require_admin)])
def list_appointments(
    intake: BookingIntake = Depends(get_booking_intake),
    catalog: CatalogStore = Depends(get_catalog),
    cancel: threading.Event = Depends(get_cancel_token),
):
    return with_service_titles(intake.list(cancel), catalog.list(cancel))


@router.delete("/{appointment_id}", response_model=List[Appointment], dependencies=[Depends(require_admin)])
def delete_appointment(
    appointment_id: UUID,
    confirm: bool = Query(default=False, description="Must be true; deleting cannot be undone"),
    intake: BookingIntake = Depends(get_booking_intake),
    cancel: threading.Event = Depends(get_cancel_token),
):
    if not confirm:
        raise HTTPException(status_code=400, detail="Are you sure you want to delete this appointment? Pass confirm=true")
    return intake.remove(appointment_id, cancel)

# sanam/models.py
import datetime as dt
from typing import Dict, Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

TIME_PATTERN = r"^\d{2}:\d{2}(:\d{2})?$"


# ──────────────────────────────────────────────────────────────────────────────
# Services
# ──────────────────────────────────────────────────────────────────────────────
class Service(BaseModel):
    id: UUID
    title: str
    price: float
    duration: str
    description: str
    is_favorite: bool = False
    image_url: Optional[str] = None
    created_at: Optional[dt.datetime] = None


class ServiceCreate(BaseModel):
    title: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    duration: str = Field(..., min_length=1)  # free text, e.g. "30 min"
    description: str = Field(..., min_length=1)
    image_url: Optional[str] = None


class ServiceUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    price: Optional[float] = Field(default=None, ge=0)
    duration: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = Field(default=None, min_length=1)
    image_url: Optional[str] = None
    is_favorite: Optional[bool] = None

    @field_validator("title", "price", "duration", "description", "is_favorite", mode="before")
    @classmethod
    def not_null(cls, value):
        # omit a field to keep it; only image_url can be cleared
        if value is None:
            raise ValueError("cannot be null")
        return value


class FavoriteIn(BaseModel):
    is_favorite: bool


# ──────────────────────────────────────────────────────────────────────────────
# Appointments
# ──────────────────────────────────────────────────────────────────────────────
class Appointment(BaseModel):
    id: UUID
    service_id: str
    name: str
    email: str
    phone: str
    date: dt.date
    time: str
    created_at: Optional[dt.datetime] = None


class AppointmentView(Appointment):
    service_title: Optional[str] = None


class AppointmentIn(BaseModel):
    """Booking form. Email shape and the date floor are form rules, not store rules."""

    service_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    email: EmailStr
    phone: str = Field(..., min_length=1)
    date: dt.date
    time: str = Field(..., pattern=TIME_PATTERN)

    @field_validator("date")
    @classmethod
    def not_in_past(cls, value: dt.date) -> dt.date:
        if value < dt.date.today():
            raise ValueError("date cannot be in the past")
        return value


# ──────────────────────────────────────────────────────────────────────────────
# Location settings
# ──────────────────────────────────────────────────────────────────────────────
class DayHours(BaseModel):
    open: str
    close: str


class _LocationFields(BaseModel):
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    hours: Dict[str, DayHours]
    map_url: Optional[str] = None


class LocationSettingsIn(_LocationFields):
    @field_validator("hours")
    @classmethod
    def all_seven_days(cls, value: Dict[str, DayHours]) -> Dict[str, DayHours]:
        missing = [d for d in WEEKDAYS if d not in value]
        unknown = sorted(set(value) - set(WEEKDAYS))
        if missing or unknown:
            raise ValueError(f"hours must cover exactly {', '.join(WEEKDAYS)} (missing={missing}, unknown={unknown})")
        return value


class LocationSettings(_LocationFields):
    id: UUID
    updated_at: Optional[dt.datetime] = None


class LocationSettingsUpdate(LocationSettingsIn):
    """Full overwrite, keyed by the id the admin read."""

    id: UUID


class DayHoursPatch(BaseModel):
    open: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    close: Optional[str] = Field(default=None, pattern=TIME_PATTERN)


# ──────────────────────────────────────────────────────────────────────────────
# Admin
# ──────────────────────────────────────────────────────────────────────────────
class LoginIn(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class TokenOut(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    expires_in: Optional[int] = None


class GateOut(BaseModel):
    state: str
    action: str
    redirect: Optional[str] = None

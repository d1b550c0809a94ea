# sanam/deps.py
import threading
from typing import Iterator, Optional

from fastapi import Depends, Header, HTTPException
from supabase import Client, create_client

from .auth import SupabaseSessionSource
from .bookings import BookingIntake
from .catalog import CatalogStore
from .config import get_settings
from .location import LocationSettingsStore
from .session import SessionGate

_sb: Optional[Client] = None


def get_supabase() -> Client:
    """Service-role client (bypasses RLS); built on first use and shared."""
    global _sb
    if _sb is None:
        settings = get_settings()
        if not settings.supabase_url or not settings.service_role_key:
            raise RuntimeError("Missing SUPABASE_URL or SUPABASE_SERVICE_ROLE")
        _sb = create_client(settings.supabase_url, settings.service_role_key)
    return _sb


def get_catalog(sb: Client = Depends(get_supabase)) -> CatalogStore:
    return CatalogStore(sb)


def get_booking_intake(sb: Client = Depends(get_supabase)) -> BookingIntake:
    return BookingIntake(sb)


def get_location_store(sb: Client = Depends(get_supabase)) -> LocationSettingsStore:
    return LocationSettingsStore(sb)


def get_cancel_token() -> Iterator[threading.Event]:
    """Per-request token; set once the request is finished so late store results are dropped."""
    cancel = threading.Event()
    try:
        yield cancel
    finally:
        cancel.set()


def _bearer(authorization: Optional[str]) -> Optional[str]:
    if not authorization or not authorization.lower().startswith("bearer "):
        return None
    return authorization.split(" ", 1)[1].strip() or None


def get_session_gate(
    authorization: Optional[str] = Header(default=None),
    sb: Client = Depends(get_supabase),
) -> Iterator[SessionGate]:
    # the gate unsubscribes when the request is done, however it ends
    with SessionGate(SupabaseSessionSource(sb, _bearer(authorization))) as gate:
        yield gate


def require_admin(gate: SessionGate = Depends(get_session_gate)) -> SessionGate:
    decision = gate.route()
    if decision.action != "allow":
        raise HTTPException(
            status_code=401,
            detail="Not authenticated",
            headers={"Location": gate.login_path, "WWW-Authenticate": "Bearer"},
        )
    return gate

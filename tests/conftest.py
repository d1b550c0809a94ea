"""Shared fixtures: a fake Supabase client wired into the app and admin tokens."""
import os

os.environ["SUPABASE_URL"] = "https://testref.supabase.co"
os.environ["SUPABASE_SERVICE_ROLE"] = "service-role-key"
os.environ["SUPABASE_ANON_KEY"] = "anon-key"
os.environ["SUPABASE_JWT_SECRET"] = "test-jwt-secret"

import pytest
from fastapi.testclient import TestClient

from sanam.config import get_settings
from sanam.deps import get_supabase

from .fakes import FakeSupabase
from .helpers import make_token, week_hours

get_settings.cache_clear()


@pytest.fixture
def fake_sb():
    return FakeSupabase()


@pytest.fixture
def client(fake_sb):
    from sanam.main import app

    app.dependency_overrides[get_supabase] = lambda: fake_sb
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture
def location_row(fake_sb):
    hours = week_hours()
    hours["sunday"] = {"open": "10:00", "close": "14:00"}
    row = {
        "id": "6f1c1d2e-0000-4000-8000-000000000001",
        "address": "123 Barber Street",
        "city": "New York",
        "state": "NY",
        "zip": "10001",
        "phone": "(555) 123-4567",
        "email": "contact@sanam.example",
        "hours": hours,
        "map_url": "https://www.google.com/maps/embed?pb=abc",
    }
    fake_sb.tables["location_settings"] = [row]
    return row

import time

from jose import jwt

from sanam.config import get_settings
from sanam.models import WEEKDAYS


def make_token(sub="admin-1", secret=None, issuer=None, **claims):
    settings = get_settings()
    payload = {
        "sub": sub,
        "iss": issuer or settings.auth_url,
        "exp": int(time.time()) + 3600,
        "role": "authenticated",
        **claims,
    }
    if sub is None:
        payload.pop("sub")
    return jwt.encode(payload, secret or settings.jwt_secret, algorithm="HS256")


def week_hours(open_time="09:00", close_time="18:00"):
    return {day: {"open": open_time, "close": close_time} for day in WEEKDAYS}

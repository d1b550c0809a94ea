# sanam/auth.py
import logging
import time
from typing import Any, Dict, Optional

import requests
from fastapi import HTTPException
from jose import JWTError, jwt
from supabase import Client, create_client

from .config import Settings, get_settings
from .session import AuthCallback

log = logging.getLogger("uvicorn.error")

_cache: Dict[str, Any] = {"jwks": None, "fetched_at": 0}
JWKS_TTL = 600


def _get_jwks(settings: Settings) -> Dict[str, Any]:
    now = time.time()
    if not _cache["jwks"] or now - _cache["fetched_at"] > JWKS_TTL:
        headers = {}
        if settings.anon_key:
            headers = {"apikey": settings.anon_key, "Authorization": f"Bearer {settings.anon_key}"}
        resp = requests.get(f"{settings.auth_url}/.well-known/jwks.json", headers=headers, timeout=10)
        resp.raise_for_status()
        _cache["jwks"] = resp.json()
        _cache["fetched_at"] = now
    return _cache["jwks"]


def _fetch_user_id_from_supabase(token: str, settings: Settings) -> str:
    """Fallback: ask Supabase who this token belongs to."""
    headers = {
        "Authorization": f"Bearer {token}",
        "apikey": settings.anon_key or "",
    }
    r = requests.get(f"{settings.auth_url}/user", headers=headers, timeout=10)
    if r.status_code != 200:
        raise HTTPException(status_code=401, detail="Could not verify token with Supabase")
    data = r.json() or {}
    uid = data.get("id") or (data.get("user") or {}).get("id")
    if not uid:
        raise HTTPException(status_code=401, detail="User id not found from Supabase")
    return uid


def _subject(claims: Dict[str, Any]) -> str:
    sub = claims.get("sub")
    if not sub:
        raise HTTPException(status_code=401, detail="Token missing subject (sub)")
    return sub


def verify_and_get_user_id(token: str, settings: Optional[Settings] = None) -> str:
    """
    Accepts Supabase access tokens signed with:
      - HS256 (JWT secret)  -> verify with SUPABASE_JWT_SECRET
      - RS256 (JWKS)        -> verify with the project JWKS
    Falls back to /auth/v1/user if needed.
    """
    settings = settings or get_settings()
    issuer = settings.auth_url

    try:
        unverified_header = jwt.get_unverified_header(token)
        alg = (unverified_header.get("alg") or "").upper()
    except JWTError:
        return _fetch_user_id_from_supabase(token, settings)

    if alg == "HS256":
        if not settings.jwt_secret:
            return _fetch_user_id_from_supabase(token, settings)
        try:
            claims = jwt.decode(
                token,
                settings.jwt_secret,
                algorithms=["HS256"],
                options={"verify_aud": False},
                issuer=issuer,
            )
        except JWTError as e:
            raise HTTPException(status_code=401, detail=f"Invalid token (HS256): {e}")
        return _subject(claims)

    if alg == "RS256":
        jwks = _get_jwks(settings)
        kid = unverified_header.get("kid")
        key = next((k for k in jwks.get("keys", []) if k.get("kid") == kid), None)
        if not key:
            raise HTTPException(status_code=401, detail="Signing key not found")
        try:
            claims = jwt.decode(
                token,
                key,
                algorithms=["RS256"],
                options={"verify_aud": False},
                issuer=issuer,
            )
        except JWTError as e:
            raise HTTPException(status_code=401, detail=f"Invalid token (RS256): {e}")
        return _subject(claims)

    return _fetch_user_id_from_supabase(token, settings)


class SupabaseSessionSource:
    """
    Session source for one admin request: the bearer token it carried, checked
    against Supabase, plus the service client's auth events.
    """

    def __init__(self, client: Client, token: Optional[str], settings: Optional[Settings] = None):
        self.client = client
        self.token = token
        self.settings = settings

    def get_session(self) -> Optional[Dict[str, str]]:
        if not self.token:
            return None
        user_id = verify_and_get_user_id(self.token, self.settings)
        return {"user_id": user_id, "access_token": self.token}

    def sign_out(self) -> None:
        if self.token:
            self.client.auth.admin.sign_out(self.token)

    def on_auth_state_change(self, callback: AuthCallback):
        # Only the shared service client's own auth events arrive here. Nothing is
        # emitted for the admin's bearer token, so the gate's state for a request
        # comes from get_session(). gotrue's emitter is not locked against
        # concurrent subscribe/emit from the threadpool.
        return self.client.auth.on_auth_state_change(callback)


def sign_in(email: str, password: str, settings: Optional[Settings] = None) -> Dict[str, Any]:
    """Password sign-in on a throwaway anon client so the service client keeps its own key."""
    settings = settings or get_settings()
    if not settings.supabase_url or not settings.anon_key:
        raise RuntimeError("Missing SUPABASE_URL or SUPABASE_ANON_KEY")
    client = create_client(settings.supabase_url, settings.anon_key)
    try:
        resp = client.auth.sign_in_with_password({"email": email, "password": password})
    except Exception as e:
        log.warning(f"Admin sign-in failed for {email}: {e}")
        raise HTTPException(status_code=401, detail="Invalid login credentials")
    if not resp.session:
        raise HTTPException(status_code=401, detail="Invalid login credentials")
    return {
        "access_token": resp.session.access_token,
        "refresh_token": resp.session.refresh_token,
        "expires_in": resp.session.expires_in,
    }

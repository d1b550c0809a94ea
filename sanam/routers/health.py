# sanam/routers/health.py
from fastapi import APIRouter, HTTPException

from .. import db
from ..config import get_settings
from ..deps import get_supabase

router = APIRouter(tags=["health"])

TABLE_CHECKS = {
    "services": "id,title,price,duration,description,is_favorite,image_url,created_at",
    "appointments": "id,service_id,name,email,phone,date,time,created_at",
    "location_settings": "id,address,city,state,zip,phone,email,hours,map_url",
}


@router.get("/health")
def health():
    return {"ok": True}


@router.get("/health/db")
async def health_db():
    """Ping Postgres directly (set SUPABASE_DB_URL, e.g. postgresql+asyncpg://...)."""
    try:
        value = await db.ping()
    except Exception as e:
        raise HTTPException(status_code=503, detail=f"DB check failed: {e}")
    return {"ok": True, "db": value}


@router.get("/diag")
def diag():
    """Config flags plus one select per table, to explain 500s quickly."""
    settings = get_settings()
    out = {
        "supabase_url_set": bool(settings.supabase_url),
        "service_role_set": bool(settings.service_role_key),
        "anon_key_set": bool(settings.anon_key),
        "jwt_secret_set": bool(settings.jwt_secret),
        "errors": [],
    }
    try:
        client = get_supabase()
    except Exception as e:
        out["errors"].append(f"supabase init: {e}")
        return out

    for table, cols in TABLE_CHECKS.items():
        try:
            client.table(table).select(cols).limit(1).execute()
        except Exception as e:
            out["errors"].append(f"{table} select exception: {e}")

    return out

# sanam/config.py
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import List, Optional
from urllib.parse import urlparse

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    supabase_url: Optional[str]
    service_role_key: Optional[str]
    anon_key: str
    jwt_secret: str  # <- HS256 secret
    db_url: Optional[str]
    cors_origins: List[str]
    log_level: str = "INFO"

    @property
    def project_ref(self) -> Optional[str]:
        # https://lrxyfyzgrkvnoezjfycv.supabase.co -> lrxyfyzgrkvnoezjfycv
        if not self.supabase_url:
            return None
        host = urlparse(self.supabase_url).hostname or ""
        return host.split(".", 1)[0] or None

    @property
    def auth_url(self) -> str:
        if not self.supabase_url:
            raise RuntimeError("SUPABASE_URL not set")
        return f"{self.supabase_url.rstrip('/')}/auth/v1"


def _split_origins(raw: str) -> List[str]:
    return [o.strip() for o in raw.split(",") if o.strip()] or ["*"]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings(
        supabase_url=os.environ.get("SUPABASE_URL"),
        service_role_key=os.environ.get("SUPABASE_SERVICE_ROLE"),
        anon_key=os.environ.get("SUPABASE_ANON_KEY", ""),
        jwt_secret=os.environ.get("SUPABASE_JWT_SECRET", ""),
        db_url=os.environ.get("SUPABASE_DB_URL"),
        cors_origins=_split_origins(os.environ.get("CORS_ORIGINS", "*")),
        log_level=os.environ.get("LOG_LEVEL", "INFO"),
    )

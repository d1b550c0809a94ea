# sanam/store.py
import logging
import threading
from typing import Any, Dict, List, Optional

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from .errors import BackendError, RequestCancelled

log = logging.getLogger("uvicorn.error")


class BaseStore:
    """One Supabase table. Every call goes straight to the backend; nothing is cached."""

    table: str = ""

    def __init__(self, client: Client):
        self.client = client

    def _query(self):
        return self.client.table(self.table)

    def _check_cancel(self, cancel: Optional[threading.Event]) -> None:
        if cancel is not None and cancel.is_set():
            raise RequestCancelled(f"{self.table} request cancelled")

    def _execute(self, query, cancel: Optional[threading.Event] = None) -> List[Dict[str, Any]]:
        self._check_cancel(cancel)
        try:
            resp = query.execute()
        except APIError as e:
            raise BackendError(e.message or str(e)) from e
        except httpx.HTTPError as e:
            raise BackendError(f"{self.table} request failed: {e}") from e
        # the caller went away while we waited; drop the late response
        self._check_cancel(cancel)
        return resp.data or []

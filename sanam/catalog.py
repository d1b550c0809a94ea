# sanam/catalog.py
import logging
import threading
from typing import Any, Dict, List, Optional
from uuid import UUID

from .errors import BackendError, ValidationError, require_fields
from .models import Service
from .store import BaseStore

log = logging.getLogger("uvicorn.error")

SERVICE_COLUMNS = "id,title,price,duration,description,is_favorite,image_url,created_at"
REQUIRED_FIELDS = ("title", "price", "duration", "description")
MUTABLE_FIELDS = ("title", "price", "duration", "description", "image_url", "is_favorite")


def _row_to_service(row: Dict[str, Any]) -> Service:
    return Service(
        id=row["id"],
        title=row["title"],
        price=row["price"],
        duration=row["duration"],
        description=row.get("description") or "",
        is_favorite=bool(row.get("is_favorite")),
        image_url=row.get("image_url"),
        created_at=row.get("created_at"),
    )


class CatalogStore(BaseStore):
    table = "services"

    def list(self, cancel: Optional[threading.Event] = None) -> List[Service]:
        """Featured services first, then oldest first."""
        rows = self._execute(
            self._query()
            .select(SERVICE_COLUMNS)
            .order("is_favorite", desc=True)
            .order("created_at", desc=False),
            cancel,
        )
        return [_row_to_service(r) for r in rows]

    def create(self, fields: Dict[str, Any], cancel: Optional[threading.Event] = None) -> Service:
        require_fields(fields, REQUIRED_FIELDS)
        payload = {name: fields[name] for name in REQUIRED_FIELDS}
        if fields.get("image_url"):
            payload["image_url"] = fields["image_url"]
        # new services are never featured, whatever the caller sent
        payload["is_favorite"] = False

        rows = self._execute(self._query().insert(payload), cancel)
        if not rows:
            raise BackendError("services insert returned no row")
        service = _row_to_service(rows[0])
        log.info(f"Created service {service.id} ({service.title})")
        return service

    def update(
        self,
        service_id: UUID | str,
        fields: Dict[str, Any],
        cancel: Optional[threading.Event] = None,
    ) -> Optional[Service]:
        """
        Overwrite the given mutable fields. Returns None when no row has this id;
        the backend reports that as success, so it is not an error here either.
        """
        changes = {k: v for k, v in fields.items() if k in MUTABLE_FIELDS}
        if not changes:
            raise ValidationError(f"Nothing to update; allowed fields: {', '.join(MUTABLE_FIELDS)}")

        rows = self._execute(self._query().update(changes).eq("id", str(service_id)), cancel)
        if not rows:
            log.warning(f"services update matched no row for id {service_id}")
            return None
        return _row_to_service(rows[0])

    def toggle_favorite(
        self, service_id: UUID | str, value: bool, cancel: Optional[threading.Event] = None
    ) -> Optional[Service]:
        return self.update(service_id, {"is_favorite": value}, cancel)

    def remove(self, service_id: UUID | str, cancel: Optional[threading.Event] = None) -> List[Service]:
        self._execute(self._query().delete().eq("id", str(service_id)), cancel)
        log.info(f"Deleted service {service_id}")
        return self.list(cancel)

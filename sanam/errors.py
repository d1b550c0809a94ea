# sanam/errors.py
from typing import Any, Dict, Iterable


class StoreError(Exception):
    """Base class for failures surfaced to the caller verbatim."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(StoreError):
    status_code = 422


class NotFoundError(StoreError):
    status_code = 404


class BackendError(StoreError):
    status_code = 500


class RequestCancelled(BackendError):
    # nginx-style "client closed request"
    status_code = 499


def require_fields(fields: Dict[str, Any], names: Iterable[str]) -> None:
    """Raise ValidationError naming every required field that is missing or blank."""
    missing = []
    for name in names:
        value = fields.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(name)
    if missing:
        raise ValidationError(f"Missing required field(s): {', '.join(missing)}")

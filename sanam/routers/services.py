# sanam/routers/services.py
import threading
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query

from ..catalog import CatalogStore
from ..deps import get_cancel_token, get_catalog, require_admin
from ..models import FavoriteIn, Service, ServiceCreate, ServiceUpdate

router = APIRouter(prefix="/services", tags=["services"])


@router.get("", response_model=List[Service])
def list_services(
    catalog: CatalogStore = Depends(get_catalog),
    cancel: threading.Event = Depends(get_cancel_token),
):
    return catalog.list(cancel)


@router.post("", response_model=Service, status_code=201, dependencies=[Depends(require_admin)])
def create_service(
    payload: ServiceCreate,
    catalog: CatalogStore = Depends(get_catalog),
    cancel: threading.Event = Depends(get_cancel_token),
):
    return catalog.create(payload.model_dump(), cancel)


@router.put("/{service_id}", response_model=Service, dependencies=[Depends(require_admin)])
def update_service(
    service_id: UUID,
    payload: ServiceUpdate,
    catalog: CatalogStore = Depends(get_catalog),
    cancel: threading.Event = Depends(get_cancel_token),
):
    service = catalog.update(service_id, payload.model_dump(exclude_unset=True), cancel)
    if service is None:
        raise HTTPException(status_code=404, detail="Service not found")
    return service


@router.patch("/{service_id}/favorite", response_model=Service, dependencies=[Depends(require_admin)])
def toggle_favorite(
    service_id: UUID,
    payload: FavoriteIn,
    catalog: CatalogStore = Depends(get_catalog),
    cancel: threading.Event = Depends(get_cancel_token),
):
    service = catalog.toggle_favorite(service_id, payload.is_favorite, cancel)
    if service is None:
        raise HTTPException(status_code=404, detail="Service not found")
    return service


@router.delete("/{service_id}", response_model=List[Service], dependencies=[Depends(require_admin)])
def delete_service(
    service_id: UUID,
    confirm: bool = Query(default=False, description="Must be true; deleting cannot be undone"),
    catalog: CatalogStore = Depends(get_catalog),
    cancel: threading.Event = Depends(get_cancel_token),
):
    if not confirm:
        raise HTTPException(status_code=400, detail="Are you sure you want to delete this service? Pass confirm=true")
    return catalog.remove(service_id, cancel)

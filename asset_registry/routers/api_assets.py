"""HTTP endpoints over ``AssetService``.

Each handler calls exactly one service operation. Absent records become 404s;
``StorageError`` is rendered by the application's exception handler.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from ..deps import get_asset_service
from ..schemas.asset import AssetCreate, AssetOut, AssetStatusUpdate, AssetUpdate, DuplicateCheckOut
from ..services.assets import AssetService

router = APIRouter(prefix="/api/v1/assets", tags=["assets"])


@router.get("", response_model=list[AssetOut])
def api_list(service: AssetService = Depends(get_asset_service)):
    return service.list_active()


@router.get("/all", response_model=list[AssetOut])
def api_list_all(service: AssetService = Depends(get_asset_service)):
    return service.list_all()


@router.post("/check-duplicates", response_model=DuplicateCheckOut)
def api_check_duplicates(payload: AssetCreate, service: AssetService = Depends(get_asset_service)):
    # Unset fields dump as None and so compare equal to stored NULLs.
    result = service.check_duplicates(payload.model_dump())
    return DuplicateCheckOut.model_validate(result, from_attributes=True)


@router.get("/{asset_id}", response_model=AssetOut)
def api_get(asset_id: str, service: AssetService = Depends(get_asset_service)):
    asset = service.get(asset_id)
    if not asset:
        raise HTTPException(404, "Not found")
    return asset


@router.post("", response_model=AssetOut, status_code=201)
def api_create(payload: AssetCreate, service: AssetService = Depends(get_asset_service)):
    return service.insert(payload.model_dump())


@router.put("/{asset_id}", response_model=AssetOut)
def api_update(asset_id: str, payload: AssetUpdate, service: AssetService = Depends(get_asset_service)):
    asset = service.update(asset_id, payload.model_dump(exclude_unset=True))
    if not asset:
        raise HTTPException(404, "Not found")
    return asset


@router.patch("/{asset_id}/status", response_model=AssetOut)
def api_update_status(
    asset_id: str,
    payload: AssetStatusUpdate,
    service: AssetService = Depends(get_asset_service),
):
    asset = service.update_status(asset_id, payload.status)
    if not asset:
        raise HTTPException(404, "Not found")
    return asset


@router.delete("/{asset_id}")
def api_delete(asset_id: str, service: AssetService = Depends(get_asset_service)):
    if not service.soft_delete(asset_id):
        raise HTTPException(404, "Not found")
    return {"status": "deleted"}

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class AssetBase(BaseModel):
    serial_number: Optional[str] = None
    mac_address: Optional[str] = None
    pc_name: Optional[str] = None
    employee_number: Optional[str] = None
    username: Optional[str] = None
    asset_type: Optional[str] = None
    brand: Optional[str] = None
    model: Optional[str] = None
    employee_name: Optional[str] = None
    department: Optional[str] = None
    location: Optional[str] = None
    remarks: Optional[str] = None
    buyback_status: Optional[str] = None

    model_config = ConfigDict(protected_namespaces=())


class AssetCreate(AssetBase):
    pass


class AssetUpdate(AssetBase):
    pass


class AssetStatusUpdate(BaseModel):
    status: str


class AssetOut(AssetBase):
    id: str
    is_deleted: bool
    status_log: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True, protected_namespaces=())


class DuplicateCheckOut(BaseModel):
    is_duplicate: bool
    duplicate_fields: list[str]
    existing_assets: list[AssetOut]

    model_config = ConfigDict(from_attributes=True)

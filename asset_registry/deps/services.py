from __future__ import annotations

from fastapi import Request

from ..services.assets import AssetService


def get_asset_service(request: Request) -> AssetService:
    """Hand out the service built by ``create_app`` for this application."""

    return request.app.state.asset_service

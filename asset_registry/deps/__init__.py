from .services import get_asset_service

__all__ = ["get_asset_service"]

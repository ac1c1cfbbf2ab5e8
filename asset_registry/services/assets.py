"""Asset lifecycle service.

``AssetService`` is the contract the HTTP layer (or any other caller) talks
to. It is built explicitly with a session factory and a duplicate strategy;
each call opens its own session and re-reads from the store.

``check_duplicates`` is advisory. Calling it and then ``insert`` is two
separate transactions, so two concurrent inserts carrying the same serial
number can both pass the check and both be stored. ``insert_if_unique`` takes
the table write lock, then checks and inserts in that one transaction, so
concurrent callers of it are serialised.
"""

from __future__ import annotations

import logging
from typing import Mapping

from sqlalchemy.orm import Session, sessionmaker

from ..crud.assets import (
    create_asset,
    get_asset,
    list_active_assets,
    list_all_assets,
    lock_assets_for_write,
    soft_delete_asset,
    storage_errors,
    update_asset,
    update_asset_status,
)
from ..models.asset import Asset
from .duplicates import DuplicateCheck, DuplicateStrategy, LinearScanStrategy

logger = logging.getLogger(__name__)


class AssetService:
    def __init__(
        self,
        session_factory: sessionmaker[Session],
        strategy: DuplicateStrategy | None = None,
    ) -> None:
        self.session_factory = session_factory
        self.strategy = strategy or LinearScanStrategy()

    def list_active(self) -> list[Asset]:
        with self.session_factory() as db:
            return list_active_assets(db)

    def list_all(self) -> list[Asset]:
        """Every record, soft-deleted ones included (used for full exports)."""
        with self.session_factory() as db:
            return list_all_assets(db)

    def get(self, asset_id: str) -> Asset | None:
        with self.session_factory() as db:
            return get_asset(db, asset_id)

    def insert(self, payload: Mapping[str, object]) -> Asset:
        with self.session_factory() as db:
            return create_asset(db, payload)

    def update(self, asset_id: str, payload: Mapping[str, object]) -> Asset | None:
        with self.session_factory() as db:
            return update_asset(db, asset_id, payload)

    def update_status(self, asset_id: str, status: str) -> Asset | None:
        with self.session_factory() as db:
            return update_asset_status(db, asset_id, status)

    def soft_delete(self, asset_id: str) -> bool:
        with self.session_factory() as db:
            return soft_delete_asset(db, asset_id)

    def check_duplicates(self, candidate: Mapping[str, object]) -> DuplicateCheck:
        with self.session_factory() as db:
            result = self.strategy.find_duplicates(db, candidate)
        if result.is_duplicate:
            logger.info(
                "asset.duplicate_detected",
                extra={
                    "extra_data": {
                        "strategy": self.strategy.name,
                        "fields": result.duplicate_fields,
                        "matches": len(result.existing_assets),
                    }
                },
            )
        return result

    def insert_if_unique(self, payload: Mapping[str, object]) -> tuple[DuplicateCheck, Asset | None]:
        """Check and insert under the assets write lock.

        Returns the check result and the new asset, or ``None`` in its place
        when a duplicate was found and nothing was written. A second caller
        blocks until this one commits; if it waits past the backend's lock
        timeout it gets ``StorageError`` and nothing is written for it.
        """

        with self.session_factory() as db:
            lock_assets_for_write(db)
            result = self.strategy.find_duplicates(db, payload)
            asset = None
            if not result.is_duplicate:
                asset = create_asset(db, payload, commit=False)
            # Committing an empty transaction keeps the matched rows loaded.
            with storage_errors(db, "insert_if_unique"):
                db.commit()
        if asset is not None:
            logger.info("asset.created", extra={"extra_data": {"asset_id": asset.id}})
        else:
            logger.info(
                "asset.insert_refused",
                extra={"extra_data": {"fields": result.duplicate_fields}},
            )
        return result, asset

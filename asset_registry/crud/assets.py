"""Record store for asset rows.

Every function takes an open session and commits before returning. Missing
ids are reported as ``None``/``False``; driver failures surface as
``StorageError``.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from typing import Iterator, Mapping

from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import StorageError
from ..models.asset import MUTABLE_FIELDS, Asset

logger = logging.getLogger(__name__)

STATUS_CREATED = "Created"
STATUS_UPDATED = "Updated"
STATUS_DELETED = "Deleted"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


@contextmanager
def storage_errors(db: Session, action: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning(
            "asset.storage_error",
            extra={"extra_data": {"action": action, "error": exc.__class__.__name__}},
        )
        raise StorageError(f"{action} failed: {exc}") from exc


def _writable(payload: Mapping[str, object]) -> dict[str, object]:
    # Unknown keys are ignored so older clients with stale fields do not break.
    return {key: value for key, value in payload.items() if key in MUTABLE_FIELDS}


def _touch(asset: Asset, label: str) -> None:
    now = _utcnow()
    # Keep updated_at strictly increasing even if the clock has not moved.
    if asset.updated_at is not None and now <= asset.updated_at:
        now = asset.updated_at + timedelta(microseconds=1)
    asset.updated_at = now
    asset.status_log = label


def list_active_assets(db: Session) -> list[Asset]:
    """Return every asset that has not been soft-deleted, in store order."""

    stmt = select(Asset).where(Asset.is_deleted.is_(False))
    with storage_errors(db, "list_active"):
        return list(db.execute(stmt).scalars().all())


def list_all_assets(db: Session) -> list[Asset]:
    """Return every asset including soft-deleted rows, in store order."""

    with storage_errors(db, "list_all"):
        return list(db.execute(select(Asset)).scalars().all())


def get_asset(db: Session, asset_id: str) -> Asset | None:
    with storage_errors(db, "get"):
        return db.get(Asset, asset_id)


def create_asset(db: Session, payload: Mapping[str, object], *, commit: bool = True) -> Asset:
    """Persist a new asset.

    The caller is expected to have run a duplicate check first; this layer
    writes whatever it is given. With ``commit=False`` the row is only flushed
    so it can join a larger transaction; the caller commits and logs it.
    """

    now = _utcnow()
    asset = Asset(
        **_writable(payload),
        is_deleted=False,
        status_log=STATUS_CREATED,
        created_at=now,
        updated_at=now,
    )
    with storage_errors(db, "insert"):
        db.add(asset)
        if not commit:
            db.flush()
            return asset
        db.commit()
    logger.info("asset.created", extra={"extra_data": {"asset_id": asset.id}})
    return asset


def update_asset(db: Session, asset_id: str, payload: Mapping[str, object]) -> Asset | None:
    """Overwrite the mutable fields present in ``payload``."""

    asset = get_asset(db, asset_id)
    if asset is None:
        return None
    for key, value in _writable(payload).items():
        setattr(asset, key, value)
    _touch(asset, STATUS_UPDATED)
    with storage_errors(db, "update"):
        db.commit()
    logger.info("asset.updated", extra={"extra_data": {"asset_id": asset.id}})
    return asset


def update_asset_status(db: Session, asset_id: str, status: str) -> Asset | None:
    asset = get_asset(db, asset_id)
    if asset is None:
        return None
    asset.buyback_status = status
    _touch(asset, STATUS_UPDATED)
    with storage_errors(db, "update_status"):
        db.commit()
    logger.info(
        "asset.status_updated",
        extra={"extra_data": {"asset_id": asset.id, "buyback_status": status}},
    )
    return asset


def soft_delete_asset(db: Session, asset_id: str) -> bool:
    """Flag the asset as deleted. Returns ``False`` when the id is unknown."""

    asset = get_asset(db, asset_id)
    if asset is None:
        return False
    asset.is_deleted = True
    _touch(asset, STATUS_DELETED)
    with storage_errors(db, "soft_delete"):
        db.commit()
    logger.info("asset.deleted", extra={"extra_data": {"asset_id": asset.id}})
    return True


def lock_assets_for_write(db: Session) -> None:
    """Hold the write lock on the assets table until the transaction ends.

    Must be the first statement of the transaction. Other writers wait (or
    time out with ``StorageError``) until this session commits or rolls back.
    """

    dialect = db.get_bind().dialect.name
    with storage_errors(db, "lock"):
        if dialect == "sqlite":
            # pysqlite only opens a transaction on the first write, so start
            # the write transaction explicitly before any read.
            db.execute(text("BEGIN IMMEDIATE"))
        elif dialect == "postgresql":
            db.execute(text(f"LOCK TABLE {Asset.__tablename__} IN SHARE ROW EXCLUSIVE MODE"))
        else:
            db.execute(select(Asset.id).with_for_update()).all()

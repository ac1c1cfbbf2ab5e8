from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Boolean, Column, DateTime, Index, String, Text

from ..db.session import Base


def _new_id() -> str:
    return str(uuid4())


class Asset(Base):
    """A physical or IT asset tracked by the registry.

    Rows are never removed; ``is_deleted`` hides them from the default listing.
    """

    __tablename__ = "assets"

    id = Column(String(36), primary_key=True, default=_new_id)

    # Identity-bearing fields compared by the duplicate check.
    serial_number = Column(Text, nullable=True)
    mac_address = Column(Text, nullable=True)
    pc_name = Column(Text, nullable=True)
    employee_number = Column(Text, nullable=True)
    username = Column(Text, nullable=True)

    asset_type = Column(Text, nullable=True)
    brand = Column(Text, nullable=True)
    model = Column(Text, nullable=True)
    employee_name = Column(Text, nullable=True)
    department = Column(Text, nullable=True)
    location = Column(Text, nullable=True)
    remarks = Column(Text, nullable=True)
    buyback_status = Column(Text, nullable=True)

    is_deleted = Column(Boolean, nullable=False, default=False, index=True)
    status_log = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    __table_args__ = (
        Index("ix_assets_serial_number", "serial_number"),
        Index("ix_assets_mac_address", "mac_address"),
        Index("ix_assets_pc_name", "pc_name"),
        Index("ix_assets_employee_number", "employee_number"),
        Index("ix_assets_username", "username"),
    )

    def __repr__(self) -> str:
        return f"<Asset id={self.id!r} serial_number={self.serial_number!r} is_deleted={self.is_deleted!r}>"


# Columns a caller may write through insert/update. Lifecycle metadata is
# owned by the store.
IDENTITY_FIELDS = ("serial_number", "mac_address", "pc_name", "employee_number", "username")
MUTABLE_FIELDS = IDENTITY_FIELDS + (
    "asset_type",
    "brand",
    "model",
    "employee_name",
    "department",
    "location",
    "remarks",
    "buyback_status",
)

__all__ = ["Asset", "IDENTITY_FIELDS", "MUTABLE_FIELDS"]

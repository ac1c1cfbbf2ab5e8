"""Duplicate detection across the identity-bearing asset fields.

Two lookups share the same matching rules:

* ``LinearScanStrategy`` reads every row (soft-deleted ones included) and
  compares in Python. This is the default.
* ``IndexedLookupStrategy`` asks the database for rows sharing at least one
  identity value, using the per-column indexes, and then applies the same
  rules to that subset.

Matching is exact and case-sensitive. A field left empty on both sides counts
as a match: ``None == None`` is reported under that field's label just like a
shared serial number would be.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping, Protocol

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from ..crud.assets import list_all_assets, storage_errors
from ..models.asset import Asset

# Order matters: labels are reported in the order fields are compared.
FIELD_LABELS: tuple[tuple[str, str], ...] = (
    ("serial_number", "Serial Number"),
    ("mac_address", "MAC Address"),
    ("pc_name", "PC Name"),
    ("employee_number", "Employee Number"),
    ("username", "Username"),
)


@dataclass(frozen=True)
class DuplicateCheck:
    is_duplicate: bool
    duplicate_fields: list[str] = field(default_factory=list)
    existing_assets: list[Asset] = field(default_factory=list)


def matching_fields(candidate: Mapping[str, object], existing: Asset) -> list[str]:
    """Labels of the identity fields where ``existing`` equals ``candidate``."""

    return [
        label
        for attr, label in FIELD_LABELS
        if getattr(existing, attr) == candidate.get(attr)
    ]


def collect_duplicates(candidate: Mapping[str, object], assets: Iterable[Asset]) -> DuplicateCheck:
    duplicate_fields: list[str] = []
    existing_assets: list[Asset] = []
    seen_ids: set[str] = set()

    for existing in assets:
        matches = matching_fields(candidate, existing)
        if not matches:
            continue
        for label in matches:
            if label not in duplicate_fields:
                duplicate_fields.append(label)
        if existing.id not in seen_ids:
            seen_ids.add(existing.id)
            existing_assets.append(existing)

    return DuplicateCheck(
        is_duplicate=bool(duplicate_fields),
        duplicate_fields=duplicate_fields,
        existing_assets=existing_assets,
    )


class DuplicateStrategy(Protocol):
    name: str

    def find_duplicates(self, db: Session, candidate: Mapping[str, object]) -> DuplicateCheck:
        ...


class LinearScanStrategy:
    """Compare the candidate against every stored asset. O(n) per check."""

    name = "scan"

    def find_duplicates(self, db: Session, candidate: Mapping[str, object]) -> DuplicateCheck:
        return collect_duplicates(candidate, list_all_assets(db))


class IndexedLookupStrategy:
    """Let the database narrow the rows down before comparing them."""

    name = "indexed"

    def find_duplicates(self, db: Session, candidate: Mapping[str, object]) -> DuplicateCheck:
        conditions = []
        for attr, _label in FIELD_LABELS:
            column = getattr(Asset, attr)
            value = candidate.get(attr)
            # SQL NULL never equals NULL, so absent values need IS NULL.
            conditions.append(column.is_(None) if value is None else column == value)
        stmt = select(Asset).where(or_(*conditions))
        with storage_errors(db, "check_duplicates"):
            hits = db.execute(stmt).scalars().all()
        return collect_duplicates(candidate, hits)


STRATEGIES: dict[str, type] = {
    LinearScanStrategy.name: LinearScanStrategy,
    IndexedLookupStrategy.name: IndexedLookupStrategy,
}


def strategy_for(name: str) -> DuplicateStrategy:
    try:
        return STRATEGIES[name]()
    except KeyError:
        raise ValueError(f"unknown duplicate strategy: {name!r}") from None


__all__ = [
    "DuplicateCheck",
    "DuplicateStrategy",
    "FIELD_LABELS",
    "IndexedLookupStrategy",
    "LinearScanStrategy",
    "collect_duplicates",
    "matching_fields",
    "strategy_for",
]

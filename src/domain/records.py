from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, NamedTuple


class EntitlementKey(NamedTuple):
    """Identity of a company entitlement within one company."""
    entitlement_id: str
    level_id: str


@dataclass(frozen=True)
class Entitlement:
    id: str
    name: str
    description: str | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Entitlement":
        return cls(id=str(row["id"]), name=row.get("name") or "", description=row.get("description"))


@dataclass(frozen=True)
class SupportLevel:
    id: str
    name: str
    level: int | None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "SupportLevel":
        return cls(id=str(row["id"]), name=row.get("name") or "", level=row.get("level"))


@dataclass
class CompanyEntitlement:
    company_id: str
    entitlement_id: str | None
    support_level_id: str | None
    date: date | None = None
    duration: int | None = None
    id: str | None = None

    @property
    def key(self) -> EntitlementKey | None:
        if self.entitlement_id is None or self.support_level_id is None:
            return None
        return EntitlementKey(self.entitlement_id, self.support_level_id)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "CompanyEntitlement":
        raw_date = row.get("date")
        if isinstance(raw_date, str):
            raw_date = date.fromisoformat(raw_date[:10])
        entitlement_id = row.get("entitlement_id")
        level_id = row.get("support_level_id")
        return cls(
            id=str(row["id"]) if row.get("id") is not None else None,
            company_id=str(row["company_id"]),
            entitlement_id=str(entitlement_id) if entitlement_id is not None else None,
            support_level_id=str(level_id) if level_id is not None else None,
            date=raw_date,
            duration=row.get("duration"),
        )

    def to_row(self) -> dict[str, Any]:
        return {
            "company_id": self.company_id,
            "entitlement_id": self.entitlement_id,
            "support_level_id": self.support_level_id,
            "date": self.date.isoformat() if self.date else None,
            "duration": int(self.duration) if self.duration is not None else None,
        }

"""
Company entitlement assignment and reconciliation.

A company contract is edited by resubmitting the full set of desired
(entitlement, support level, start date, duration) selections. Each selected
level fans out to every higher level, existing rows are upserted by their
(entitlement, level) key, and on update the caller retires rows that are no
longer selected unless a ticket still references them.

Concurrent saves of the same company are not coordinated here; the database
transaction is the only protection and a lost update between two saves is
possible.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from src.domain.expiration import Duration, parse_duration, parse_entitlement_date
from src.domain.levels import expand_level
from src.domain.records import CompanyEntitlement, EntitlementKey, SupportLevel
from src.domain.store import EntitlementStore
from src.observability import incr_metric, log_event


@dataclass(frozen=True)
class EntitlementSelection:
    """One submitted row of the entitlement form, before validation."""
    entitlement_id: str | None
    level_id: str | None
    date: Any = None
    duration: Any = None


@dataclass
class ReconcileResult:
    upserted: list[CompanyEntitlement] = field(default_factory=list)
    retained_keys: set[EntitlementKey] = field(default_factory=set)


def selections_from_form(
    entitlement_ids: Sequence[Any] | None,
    level_ids: Sequence[Any] | None,
    entitlement_dates: Sequence[Any] | None = None,
    entitlement_durations: Sequence[Any] | None = None,
) -> list[EntitlementSelection]:
    """Zip the parallel form fields into selections.

    Rows beyond the shorter of ``entitlement_ids`` and ``level_ids`` are
    dropped without error. Missing date or duration positions become None.
    """
    if entitlement_ids is None or level_ids is None:
        return []
    dates = list(entitlement_dates or [])
    durations = list(entitlement_durations or [])
    selections = []
    for index in range(min(len(entitlement_ids), len(level_ids))):
        selections.append(
            EntitlementSelection(
                entitlement_id=_as_id(entitlement_ids[index]),
                level_id=_as_id(level_ids[index]),
                date=dates[index] if index < len(dates) else None,
                duration=durations[index] if index < len(durations) else None,
            )
        )
    return selections


def _as_id(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def validate_selections(
    selections: Sequence[EntitlementSelection], today: date
) -> list[tuple[EntitlementSelection, date, Duration]]:
    """Parse every date and duration, raising ValidationError on the first bad one."""
    return [
        (selection, parse_entitlement_date(selection.date, today), parse_duration(selection.duration))
        for selection in selections
    ]


class EntitlementReconciler:
    def __init__(self, store: EntitlementStore):
        self.store = store

    def apply(
        self,
        company_id: str,
        existing_rows: Iterable[CompanyEntitlement],
        selections: Sequence[EntitlementSelection],
        today: date,
        *,
        request_id: str | None = None,
    ) -> ReconcileResult:
        """Upsert one row per selected (entitlement, level) pair.

        Dates and durations are validated for every selection before any row
        is written. Unknown or missing ids skip their selection. The first
        selection that reaches a key decides its date and duration.
        """
        parsed = validate_selections(selections, today)

        by_key: dict[EntitlementKey, CompanyEntitlement] = {}
        for row in existing_rows:
            if row.key is not None:
                by_key[row.key] = row

        result = ReconcileResult()
        catalog: list[SupportLevel] | None = None
        for selection, start, duration in parsed:
            if selection.entitlement_id is None or selection.level_id is None:
                continue
            entitlement = self.store.find_entitlement(selection.entitlement_id)
            level = self.store.find_level(selection.level_id)
            if entitlement is None or level is None:
                log_event(
                    "entitlement_selection_skipped",
                    level=logging.DEBUG,
                    request_id=request_id,
                    company_id=company_id,
                    entitlement_id=selection.entitlement_id,
                    level_id=selection.level_id,
                )
                continue
            if catalog is None:
                catalog = self.store.list_levels()
            for granted in expand_level(level, catalog):
                key = EntitlementKey(entitlement.id, granted.id)
                if key in result.retained_keys:
                    continue
                result.retained_keys.add(key)
                row = by_key.get(key)
                if row is None:
                    row = CompanyEntitlement(company_id=company_id, entitlement_id=None, support_level_id=None)
                row.entitlement_id = entitlement.id
                row.support_level_id = granted.id
                row.date = start
                row.duration = duration
                row = self.store.upsert(row)
                by_key[key] = row
                result.upserted.append(row)

        incr_metric("company_entitlements_upserted", len(result.upserted))
        log_event(
            "entitlements_reconciled",
            request_id=request_id,
            company_id=company_id,
            selections=len(selections),
            upserted=len(result.upserted),
        )
        return result

    def retire_unselected(
        self,
        existing_rows: Iterable[CompanyEntitlement],
        retained_keys: set[EntitlementKey],
        *,
        request_id: str | None = None,
    ) -> list[CompanyEntitlement]:
        """Delete deselected rows that no ticket references. Returns the deleted rows."""
        deleted = []
        for row in existing_rows:
            if row.key is None or row.key in retained_keys:
                continue
            if self.store.count_tickets_referencing(row) > 0:
                incr_metric("company_entitlements_protected")
                log_event(
                    "company_entitlement_protected",
                    request_id=request_id,
                    company_entitlement_id=row.id,
                    company_id=row.company_id,
                )
                continue
            self.store.delete(row)
            deleted.append(row)
            incr_metric("company_entitlements_retired")
            log_event(
                "company_entitlement_retired",
                request_id=request_id,
                company_entitlement_id=row.id,
                company_id=row.company_id,
            )
        return deleted

from __future__ import annotations

from typing import Protocol

from src.domain.records import CompanyEntitlement, Entitlement, SupportLevel


class EntitlementStore(Protocol):
    def find_entitlement(self, entitlement_id: str) -> Entitlement | None: ...

    def find_level(self, level_id: str) -> SupportLevel | None: ...

    def list_levels(self) -> list[SupportLevel]:
        """All support levels, ascending by ``level``."""
        ...

    def find_company_entitlements(self, company_id: str) -> list[CompanyEntitlement]: ...

    def upsert(self, row: CompanyEntitlement) -> CompanyEntitlement: ...

    def delete(self, row: CompanyEntitlement) -> None: ...

    def count_tickets_referencing(self, row: CompanyEntitlement) -> int: ...

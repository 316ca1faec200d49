from __future__ import annotations

from typing import Any

from src.domain.records import CompanyEntitlement, Entitlement, SupportLevel


class SupabaseEntitlementStore:
    """Entitlement persistence over the Supabase tables.

    Errors from the client propagate unchanged.
    """

    def __init__(self, client: Any):
        self.client = client

    def find_entitlement(self, entitlement_id: str) -> Entitlement | None:
        result = self.client.table("entitlements").select("id, name, description").eq(
            "id", entitlement_id
        ).execute()
        if not result.data:
            return None
        return Entitlement.from_row(result.data[0])

    def find_level(self, level_id: str) -> SupportLevel | None:
        result = self.client.table("support_levels").select("id, name, level").eq(
            "id", level_id
        ).execute()
        if not result.data:
            return None
        return SupportLevel.from_row(result.data[0])

    def list_levels(self) -> list[SupportLevel]:
        result = self.client.table("support_levels").select("id, name, level").order("level").execute()
        levels = [SupportLevel.from_row(row) for row in result.data or []]
        return sorted(levels, key=lambda level: (level.level is None, level.level or 0))

    def find_company_entitlements(self, company_id: str) -> list[CompanyEntitlement]:
        result = self.client.table("company_entitlements").select("*").eq(
            "company_id", company_id
        ).execute()
        return [CompanyEntitlement.from_row(row) for row in result.data or []]

    def upsert(self, row: CompanyEntitlement) -> CompanyEntitlement:
        payload = row.to_row()
        if row.id is None:
            result = self.client.table("company_entitlements").insert(payload).execute()
        else:
            result = self.client.table("company_entitlements").update(payload).eq("id", row.id).execute()
        if result.data:
            row.id = str(result.data[0]["id"])
        return row

    def delete(self, row: CompanyEntitlement) -> None:
        if row.id is None:
            return
        self.client.table("company_entitlements").delete().eq("id", row.id).execute()

    def count_tickets_referencing(self, row: CompanyEntitlement) -> int:
        if row.id is None:
            return 0
        result = self.client.table("tickets").select("id").eq(
            "company_entitlement_id", row.id
        ).execute()
        return len(result.data or [])

from src.stores.company_entitlements import SupabaseEntitlementStore

__all__ = ["SupabaseEntitlementStore"]

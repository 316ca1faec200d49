from datetime import date, datetime, timezone
import bcrypt
from fastapi import APIRouter, Depends, HTTPException, Request, status
from src.auth import AuthContext, require_admin, require_permission
from src.auth.permissions import COMPANIES_READ
from src.db import supabase
from src.domain.entitlements import EntitlementReconciler, selections_from_form, validate_selections
from src.domain.errors import NotFound, ValidationError
from src.domain.expiration import Duration, end_date, is_expired
from src.models.companies import (
    CompanyCreate,
    CompanyDetailResponse,
    CompanyResponse,
    CompanyUpdate,
    PrimaryContactCreate,
    CompanyWrite,
)
from src.observability import incr_metric, log_event
from src.stores import SupabaseEntitlementStore

router = APIRouter(prefix="/api/companies", tags=["companies"])

MEMBER_TYPES = ("user", "tam")


def _today() -> date:
    return datetime.now(timezone.utc).date()


def _reconciler() -> EntitlementReconciler:
    return EntitlementReconciler(SupabaseEntitlementStore(supabase))


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


def _blank_to_none(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value


def _require_name(name: str | None) -> None:
    if not name or not name.strip():
        raise ValidationError("Name is required")


def _validate_primary_contact(contact: PrimaryContactCreate) -> None:
    if not contact.username:
        raise ValidationError("Primary Contact username is required")
    if not contact.email:
        raise ValidationError("Primary Contact email is required")
    if not contact.password:
        raise ValidationError("Primary Contact password is required")


def _hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def _create_primary_contact(contact: PrimaryContactCreate) -> dict:
    insert_data = {
        "name": contact.username,
        "email": contact.email,
        "password_hash": _hash_password(contact.password),
        "full_name": _blank_to_none(contact.full_name),
        "phone_number": _blank_to_none(contact.phone_number),
        "phone_extension": _blank_to_none(contact.phone_extension),
        "social": _blank_to_none(contact.social),
        "country_id": contact.country_id,
        "timezone_id": contact.timezone_id,
        "type": "user",
    }
    result = supabase.table("users").insert(insert_data).execute()
    return result.data[0]


def _company_fields(data: CompanyWrite) -> dict:
    return {
        "name": data.name,
        "address1": data.address1,
        "address2": data.address2,
        "city": data.city,
        "state": data.state,
        "zip": data.zip,
        "country_id": data.country_id,
        "timezone_id": data.timezone_id,
        "phone_number": data.phone_number,
    }


def _get_company_or_404(company_id: str) -> dict:
    result = supabase.table("companies").select("*").eq(
        "id", company_id
    ).is_("deleted_at", "null").execute()
    if not result.data:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Company not found")
    return result.data[0]


def _resolve_member_ids(user_ids: list[str], tam_ids: list[str]) -> list[str]:
    """Keep only ids of live users and TAMs, in submission order."""
    ids = list(dict.fromkeys([*user_ids, *tam_ids]))
    if not ids:
        return []
    result = supabase.table("users").select("id, type").in_("id", ids).is_("deleted_at", "null").execute()
    allowed = {row["id"] for row in result.data or [] if row.get("type") in MEMBER_TYPES}
    return [user_id for user_id in ids if user_id in allowed]


def _replace_members(company_id: str, member_ids: list[str]) -> None:
    supabase.table("company_users").delete().eq("company_id", company_id).execute()
    if member_ids:
        supabase.table("company_users").insert(
            [{"company_id": company_id, "user_id": user_id} for user_id in member_ids]
        ).execute()


def _names_by_id(table: str, ids: set[str]) -> dict[str, str]:
    if not ids:
        return {}
    result = supabase.table(table).select("id, name").in_("id", sorted(ids)).execute()
    return {str(row["id"]): row.get("name") for row in result.data or []}


def _company_detail(company: dict, today: date) -> dict:
    company_id = company["id"]

    membership = supabase.table("company_users").select("user_id").eq("company_id", company_id).execute()
    member_ids = [row["user_id"] for row in membership.data or []]
    members = []
    if member_ids:
        users = supabase.table("users").select("id, name, full_name, email, type").in_("id", member_ids).execute()
        members = sorted(users.data or [], key=lambda user: user.get("name") or "")

    rows = [row for row in SupabaseEntitlementStore(supabase).find_company_entitlements(company_id) if row.key]
    entitlement_names = _names_by_id("entitlements", {row.entitlement_id for row in rows})
    level_names = _names_by_id("support_levels", {row.support_level_id for row in rows})

    entries = []
    expired_ids = []
    for row in rows:
        expired = is_expired(row.date, row.duration, today)
        if expired:
            expired_ids.append(row.id)
        known_duration = row.duration in (Duration.MONTHLY, Duration.YEARLY)
        entries.append({
            "id": row.id,
            "entitlement_id": row.entitlement_id,
            "entitlement_name": entitlement_names.get(row.entitlement_id),
            "support_level_id": row.support_level_id,
            "support_level_name": level_names.get(row.support_level_id),
            "start_date": row.date,
            "duration": row.duration,
            "end_date": end_date(row.date, row.duration) if row.date and known_duration else None,
            "expired": expired,
        })
    entries.sort(key=lambda entry: (entry["entitlement_name"] or "", entry["support_level_name"] or ""))

    return {
        **company,
        "users": [member for member in members if member.get("type") == "user"],
        "tams": [member for member in members if member.get("type") == "tam"],
        "entitlements": entries,
        "expired_entitlement_ids": expired_ids,
    }


@router.get("/", response_model=list[CompanyResponse])
async def list_companies(auth: AuthContext = Depends(require_permission(COMPANIES_READ))):
    """List all companies."""
    result = supabase.table("companies").select("*").is_("deleted_at", "null").order("name").execute()
    return result.data


@router.post("/", response_model=CompanyDetailResponse, status_code=status.HTTP_201_CREATED)
async def create_company(data: CompanyCreate, request: Request, auth: AuthContext = Depends(require_admin)):
    """Create a company, its primary contact and its entitlement grants."""
    _require_name(data.name)
    _validate_primary_contact(data.primary_contact)
    today = _today()
    selections = selections_from_form(
        data.entitlement_ids, data.level_ids, data.entitlement_dates, data.entitlement_durations
    )
    validate_selections(selections, today)

    primary_contact = _create_primary_contact(data.primary_contact)

    insert_data = _company_fields(data)
    insert_data["primary_contact_id"] = primary_contact["id"]
    result = supabase.table("companies").insert(insert_data).execute()
    company = result.data[0]

    _replace_members(company["id"], _resolve_member_ids([*data.user_ids, primary_contact["id"]], data.tam_ids))
    _reconciler().apply(company["id"], [], selections, today, request_id=_request_id(request))

    incr_metric("companies_created")
    log_event("company_created", request_id=_request_id(request), company_id=company["id"], user_id=auth.user_id)
    return _company_detail(company, today)


@router.get("/{company_id}", response_model=CompanyDetailResponse)
async def get_company(company_id: str, auth: AuthContext = Depends(require_permission(COMPANIES_READ))):
    """Get a company with its members and entitlement grants, flagging expired grants."""
    company = _get_company_or_404(company_id)
    return _company_detail(company, _today())


@router.put("/{company_id}", response_model=CompanyDetailResponse)
async def update_company(
    company_id: str,
    data: CompanyUpdate,
    request: Request,
    auth: AuthContext = Depends(require_admin),
):
    """Update a company and reconcile its entitlement grants against the submitted set."""
    company = _get_company_or_404(company_id)
    _require_name(data.name)
    if not company.get("primary_contact_id"):
        raise NotFound("Primary contact not found")
    if not data.primary_contact_id:
        raise ValidationError("Primary contact id is required")

    user_ids = list(data.user_ids)
    primary_contact_id = company["primary_contact_id"]
    if data.primary_contact_id != primary_contact_id:
        contact = supabase.table("users").select("id").eq(
            "id", data.primary_contact_id
        ).is_("deleted_at", "null").execute()
        if not contact.data:
            raise NotFound("Primary contact not found")
        primary_contact_id = data.primary_contact_id
        user_ids.append(primary_contact_id)

    today = _today()
    selections = selections_from_form(
        data.entitlement_ids, data.level_ids, data.entitlement_dates, data.entitlement_durations
    )
    validate_selections(selections, today)

    update_data = _company_fields(data)
    update_data["primary_contact_id"] = primary_contact_id
    update_data["updated_at"] = datetime.now(timezone.utc).isoformat()
    result = supabase.table("companies").update(update_data).eq("id", company_id).execute()
    if not result.data:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Company not found")

    _replace_members(company_id, _resolve_member_ids(user_ids, data.tam_ids))

    reconciler = _reconciler()
    existing = reconciler.store.find_company_entitlements(company_id)
    outcome = reconciler.apply(company_id, existing, selections, today, request_id=_request_id(request))
    reconciler.retire_unselected(existing, outcome.retained_keys, request_id=_request_id(request))

    log_event("company_updated", request_id=_request_id(request), company_id=company_id, user_id=auth.user_id)
    return _company_detail(result.data[0], today)


@router.delete("/{company_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_company(company_id: str, auth: AuthContext = Depends(require_admin)):
    """Soft delete a company. Its grants stay in place for the tickets that reference them."""
    result = supabase.table("companies").update({
        "deleted_at": datetime.now(timezone.utc).isoformat()
    }).eq("id", company_id).is_("deleted_at", "null").execute()

    if not result.data:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Company not found")

    return None

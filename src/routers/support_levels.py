from datetime import datetime, timezone
from fastapi import APIRouter, Depends, HTTPException, status
from src.auth import AuthContext, require_admin
from src.config import settings
from src.db import supabase
from src.domain.errors import ValidationError
from src.domain.schedule import (
    DEFAULT_FROM_DAY,
    DEFAULT_FROM_TIME,
    DEFAULT_TO_DAY,
    DEFAULT_TO_TIME,
    first_line_plain_text,
    format_day_time,
    is_valid_day,
    is_valid_hour,
)
from src.models.support_levels import SupportLevelResponse, SupportLevelSummary, SupportLevelWrite

router = APIRouter(prefix="/api/support-levels", tags=["support-levels"])


def _validate(data: SupportLevelWrite, from_day: int, from_time: int, to_day: int, to_time: int) -> None:
    if not data.name or not data.name.strip():
        raise ValidationError("Name is required")
    if not data.description or not data.description.strip():
        raise ValidationError("Description is required")
    if data.level is None or data.level < 0:
        raise ValidationError("Level must be zero or more")
    if not data.color or not data.color.strip():
        raise ValidationError("Color is required")
    if not is_valid_day(from_day):
        raise ValidationError("From day is required")
    if not is_valid_day(to_day):
        raise ValidationError("To day is required")
    if not is_valid_hour(from_time):
        raise ValidationError("From time is required")
    if not is_valid_hour(to_time):
        raise ValidationError("To time is required")


def _default_country_id() -> str | None:
    result = supabase.table("countries").select("id").eq("code", settings.default_country_code).execute()
    return result.data[0]["id"] if result.data else None


def _default_timezone_id() -> str | None:
    result = supabase.table("timezones").select("id").eq("name", settings.default_timezone_name).execute()
    return result.data[0]["id"] if result.data else None


def _build_payload(data: SupportLevelWrite, defaults: dict) -> dict:
    from_day = data.from_day if data.from_day is not None else defaults["from_day"]
    from_time = data.from_time if data.from_time is not None else defaults["from_time"]
    to_day = data.to_day if data.to_day is not None else defaults["to_day"]
    to_time = data.to_time if data.to_time is not None else defaults["to_time"]
    _validate(data, from_day, from_time, to_day, to_time)
    return {
        "name": data.name.strip(),
        "description": data.description.strip(),
        "level": data.level,
        "color": data.color.strip(),
        "from_day": from_day,
        "from_time": from_time,
        "to_day": to_day,
        "to_time": to_time,
        "country_id": data.country_id or _default_country_id(),
        "timezone_id": data.timezone_id or _default_timezone_id(),
    }


def _get_level_or_404(level_id: str) -> dict:
    result = supabase.table("support_levels").select("*").eq("id", level_id).execute()
    if not result.data:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Support level not found")
    return result.data[0]


@router.get("/", response_model=list[SupportLevelSummary])
async def list_support_levels(auth: AuthContext = Depends(require_admin)):
    """List support levels by name, with a description preview and schedule labels."""
    result = supabase.table("support_levels").select("*").order("name").execute()
    summaries = []
    for row in result.data or []:
        summaries.append({
            **row,
            "description_preview": first_line_plain_text(row.get("description")),
            "from_label": format_day_time(row.get("from_day"), row.get("from_time")),
            "to_label": format_day_time(row.get("to_day"), row.get("to_time")),
        })
    return summaries


@router.post("/", response_model=SupportLevelResponse, status_code=status.HTTP_201_CREATED)
async def create_support_level(data: SupportLevelWrite, auth: AuthContext = Depends(require_admin)):
    """Create a support level. Schedule defaults to Monday 00:00 through Sunday 23:00."""
    payload = _build_payload(
        data,
        {
            "from_day": int(DEFAULT_FROM_DAY),
            "from_time": DEFAULT_FROM_TIME,
            "to_day": int(DEFAULT_TO_DAY),
            "to_time": DEFAULT_TO_TIME,
        },
    )
    result = supabase.table("support_levels").insert(payload).execute()
    return result.data[0]


@router.get("/{level_id}", response_model=SupportLevelResponse)
async def get_support_level(level_id: str, auth: AuthContext = Depends(require_admin)):
    """Get a support level by ID."""
    return _get_level_or_404(level_id)


@router.put("/{level_id}", response_model=SupportLevelResponse)
async def update_support_level(
    level_id: str,
    data: SupportLevelWrite,
    auth: AuthContext = Depends(require_admin),
):
    """Update a support level. Omitted schedule fields keep their stored values."""
    existing = _get_level_or_404(level_id)
    payload = _build_payload(
        data,
        {
            "from_day": existing.get("from_day") if existing.get("from_day") is not None else int(DEFAULT_FROM_DAY),
            "from_time": existing.get("from_time") if existing.get("from_time") is not None else DEFAULT_FROM_TIME,
            "to_day": existing.get("to_day") if existing.get("to_day") is not None else int(DEFAULT_TO_DAY),
            "to_time": existing.get("to_time") if existing.get("to_time") is not None else DEFAULT_TO_TIME,
        },
    )
    payload["updated_at"] = datetime.now(timezone.utc).isoformat()

    result = supabase.table("support_levels").update(payload).eq("id", level_id).execute()

    if not result.data:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Support level not found")

    return result.data[0]


@router.delete("/{level_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_support_level(level_id: str, auth: AuthContext = Depends(require_admin)):
    """Delete a support level."""
    result = supabase.table("support_levels").delete().eq("id", level_id).execute()

    if not result.data:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Support level not found")

    return None

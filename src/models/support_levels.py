from pydantic import BaseModel
from datetime import datetime


class SupportLevelWrite(BaseModel):
    name: str | None = None
    description: str | None = None
    level: int | None = None
    color: str | None = None
    from_day: int | None = None
    from_time: int | None = None
    to_day: int | None = None
    to_time: int | None = None
    country_id: str | None = None
    timezone_id: str | None = None


class SupportLevelResponse(BaseModel):
    id: str
    name: str
    description: str
    level: int
    color: str
    from_day: int
    from_time: int
    to_day: int
    to_time: int
    country_id: str | None = None
    timezone_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class SupportLevelSummary(SupportLevelResponse):
    description_preview: str
    from_label: str
    to_label: str

from pydantic import BaseModel
from datetime import datetime


class EntitlementCreate(BaseModel):
    name: str | None = None
    description: str | None = None


class EntitlementUpdate(BaseModel):
    name: str | None = None
    description: str | None = None


class EntitlementResponse(BaseModel):
    id: str
    name: str
    description: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

from pydantic import BaseModel, ConfigDict, Field
from datetime import date, datetime


class PrimaryContactCreate(BaseModel):
    username: str | None = None
    email: str | None = None
    password: str | None = None
    full_name: str | None = None
    phone_number: str | None = None
    phone_extension: str | None = None
    social: str | None = None
    country_id: str | None = None
    timezone_id: str | None = None


class CompanyWrite(BaseModel):
    """Fields shared by the company create and edit forms.

    The entitlement selections arrive as four index-aligned arrays, under
    the same names the admin form posts.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None
    address1: str | None = None
    address2: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    country_id: str | None = None
    timezone_id: str | None = None
    phone_number: str | None = None
    user_ids: list[str] = Field(default_factory=list, alias="userIds")
    tam_ids: list[str] = Field(default_factory=list, alias="tamIds")
    entitlement_ids: list[str | None] | None = Field(default=None, alias="entitlementIds")
    level_ids: list[str | None] | None = Field(default=None, alias="levelIds")
    entitlement_dates: list[str | None] | None = Field(default=None, alias="entitlementDates")
    entitlement_durations: list[int | None] | None = Field(default=None, alias="entitlementDurations")


class CompanyCreate(CompanyWrite):
    primary_contact: PrimaryContactCreate = Field(default_factory=PrimaryContactCreate)


class CompanyUpdate(CompanyWrite):
    primary_contact_id: str | None = None


class CompanyMember(BaseModel):
    id: str
    name: str | None = None
    full_name: str | None = None
    email: str | None = None
    type: str


class CompanyEntitlementResponse(BaseModel):
    id: str
    entitlement_id: str
    entitlement_name: str | None = None
    support_level_id: str
    support_level_name: str | None = None
    start_date: date | None = None
    duration: int | None = None
    end_date: date | None = None
    expired: bool = False


class CompanyResponse(BaseModel):
    id: str
    name: str
    address1: str | None = None
    address2: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    country_id: str | None = None
    timezone_id: str | None = None
    phone_number: str | None = None
    primary_contact_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CompanyDetailResponse(CompanyResponse):
    users: list[CompanyMember] = []
    tams: list[CompanyMember] = []
    entitlements: list[CompanyEntitlementResponse] = []
    expired_entitlement_ids: list[str] = []

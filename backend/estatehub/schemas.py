# backend/estatehub/schemas.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Any, List, Optional

from pydantic import (
    AfterValidator,
    AwareDatetime,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    EmailStr,
    Field,
    Strict,
    StrictBool,
    StrictStr,
    field_validator,
)
from pydantic.alias_generators import to_camel

from .enums import (
    ContractStatus,
    EventStatus,
    EventType,
    FamilyStatus,
    ParticipationStatus,
    PaymentFrequency,
    PaymentStatus,
    RequestStatus,
    ResourceType,
    Role,
    VerificationStatus,
)


class CamelModel(BaseModel):
    """Python attributes in snake_case, JSON keys in camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# -------------------- Field types --------------------

def _require_iso_string(v: Any) -> Any:
    if isinstance(v, datetime):
        return v
    if not isinstance(v, str) or "T" not in v:
        raise ValueError("Expected an ISO-8601 datetime string")
    return v


def _as_naive_utc(v: datetime) -> datetime:
    return v.astimezone(timezone.utc).replace(tzinfo=None)


# datetimes arrive with an offset (or "Z") and are stored as naive UTC
IsoDateTime = Annotated[AwareDatetime, BeforeValidator(_require_iso_string), AfterValidator(_as_naive_utc)]

# finite only: inf/nan cannot be rendered back as JSON
Number = Annotated[float, Strict(), Field(allow_inf_nan=False)]
Int = Annotated[int, Strict()]
Label = Annotated[StrictStr, Field(min_length=2)]


# -------------------- Shared summaries --------------------

class UserSummaryOut(CamelModel):
    id: str
    name: str
    email: str
    phone_number: Optional[str] = None


class ResourceRefOut(CamelModel):
    id: str
    label: str
    type: ResourceType


class ResourceSummaryOut(ResourceRefOut):
    address: Optional[str] = None


class ChildResourceOut(ResourceRefOut):
    is_active: bool


class OwnerRefOut(CamelModel):
    id: str
    name: str


# -------------------- Events --------------------

class EventCreate(CamelModel):
    label: Label
    type: EventType
    status: EventStatus
    resource_id: StrictStr
    start_date: IsoDateTime
    end_date: Optional[IsoDateTime] = None
    amount: Optional[Number] = None
    notes: Optional[StrictStr] = None


class EventUpdate(EventCreate):
    pass


class EventOut(CamelModel):
    id: str
    label: str
    type: EventType
    status: EventStatus
    resource_id: str
    start_date: datetime
    end_date: Optional[datetime] = None
    amount: Optional[float] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class ParticipantOut(CamelModel):
    id: str
    user_id: str
    role: Role
    status: ParticipationStatus
    notes: Optional[str] = None
    user: UserSummaryOut


class EventListOut(EventOut):
    resource: Optional[ResourceSummaryOut] = None


class EventDetailOut(EventListOut):
    participants: List[ParticipantOut] = Field(default_factory=list)


# -------------------- Properties --------------------

class ResourceCreate(CamelModel):
    label: Label
    type: ResourceType
    address: Optional[StrictStr] = None
    description: Optional[StrictStr] = None
    parent_id: Optional[StrictStr] = None
    bedroom_count: Optional[Int] = None
    bathroom_count: Optional[Number] = None
    square_footage: Optional[Number] = None
    rent_amount: Optional[Number] = None
    amenities: List[StrictStr] = Field(default_factory=list)
    is_active: StrictBool = True
    images: List[StrictStr] = Field(default_factory=list)


class ResourceUpdate(ResourceCreate):
    pass


class ResourceOut(CamelModel):
    id: str
    label: str
    type: ResourceType
    address: Optional[str] = None
    description: Optional[str] = None
    parent_id: Optional[str] = None
    bedroom_count: Optional[int] = None
    bathroom_count: Optional[float] = None
    square_footage: Optional[float] = None
    rent_amount: Optional[float] = None
    amenities: List[str] = Field(default_factory=list)
    is_active: bool
    images: List[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class ResourceDetailOut(ResourceOut):
    parent: Optional[ResourceRefOut] = None
    children: List[ChildResourceOut] = Field(default_factory=list)
    owners: List[OwnerRefOut] = Field(default_factory=list)
    organization_owners: List[OwnerRefOut] = Field(default_factory=list)


# -------------------- Users --------------------

def _lower_email(v: str) -> str:
    return v.strip().lower()


Email = Annotated[EmailStr, AfterValidator(_lower_email)]


class UserCreate(CamelModel):
    email: Email
    name: Label
    password: Annotated[StrictStr, Field(min_length=6)]
    role: Role
    phone_number: Optional[StrictStr] = None
    alternative_contact: Optional[StrictStr] = None
    identification_verified: StrictBool = False
    organization_id: Optional[StrictStr] = None


class UserUpdate(CamelModel):
    name: Optional[Label] = None
    email: Optional[Email] = None
    role: Optional[Role] = None
    phone_number: Optional[StrictStr] = None
    alternative_contact: Optional[StrictStr] = None
    identification_verified: Optional[StrictBool] = None
    organization_id: Optional[StrictStr] = None


class ProfileUpdate(CamelModel):
    name: Optional[Label] = None
    phone_number: Optional[StrictStr] = None
    alternative_contact: Optional[StrictStr] = None


class UserOut(CamelModel):
    id: str
    email: str
    name: str
    role: Role
    phone_number: Optional[str] = None
    alternative_contact: Optional[str] = None
    identification_verified: bool
    organization_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime


# -------------------- Rental contracts --------------------

class RentalContractCreate(CamelModel):
    contract_number: Annotated[StrictStr, Field(min_length=1)]
    resource_id: StrictStr
    tenant_id: Optional[StrictStr] = None
    status: ContractStatus = ContractStatus.DRAFT
    start_date: IsoDateTime
    end_date: Optional[IsoDateTime] = None
    is_open_ended: StrictBool = False
    base_rent_amount: Annotated[Number, Field(ge=0)]
    security_deposit: Optional[Annotated[Number, Field(ge=0)]] = None
    deposit_paid: StrictBool = False
    payment_frequency: PaymentFrequency = PaymentFrequency.MONTHLY
    payment_due_day: Annotated[Int, Field(ge=1, le=31)] = 1
    notes: Optional[StrictStr] = None


class RentalContractUpdate(RentalContractCreate):
    pass


class RentPaymentOut(CamelModel):
    id: str
    amount: float
    status: PaymentStatus
    due_date: datetime
    date_paid: Optional[datetime] = None
    payment_method: Optional[str] = None
    payment_reference: Optional[str] = None


class RentalContractOut(CamelModel):
    id: str
    contract_number: str
    resource_id: str
    tenant_id: Optional[str] = None
    status: ContractStatus
    start_date: datetime
    end_date: Optional[datetime] = None
    is_open_ended: bool
    base_rent_amount: float
    security_deposit: Optional[float] = None
    deposit_paid: bool
    payment_frequency: PaymentFrequency
    payment_due_day: int
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class RentalContractListOut(RentalContractOut):
    resource: Optional[ResourceSummaryOut] = None


class RentalContractDetailOut(RentalContractListOut):
    tenant: Optional[UserSummaryOut] = None
    rent_payments: List[RentPaymentOut] = Field(default_factory=list)


# -------------------- Join requests --------------------

class JoinRequestCreate(CamelModel):
    name: Annotated[StrictStr, Field(min_length=1)]
    email: Email
    role: Role
    message: Optional[StrictStr] = None

    @field_validator("role", mode="before")
    @classmethod
    def _upper_role(cls, v: Any) -> Any:
        return v.strip().upper() if isinstance(v, str) else v


class JoinRequestReview(CamelModel):
    status: RequestStatus
    reason: Optional[StrictStr] = None

    @field_validator("status")
    @classmethod
    def _decision_only(cls, v: RequestStatus) -> RequestStatus:
        if v == RequestStatus.PENDING:
            raise ValueError("Valid status (APPROVED or REJECTED) is required")
        return v


class JoinRequestOut(CamelModel):
    id: str
    email: str
    name: str
    role: Role
    message: Optional[str] = None
    status: RequestStatus
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


# -------------------- Families --------------------

class LocationOut(CamelModel):
    id: str
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None


class FamilyMemberOut(UserSummaryOut):
    role: Role
    is_head_of_family: bool


class FamilyOut(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    size: int
    income: Optional[float] = None
    credit_score: Optional[int] = None
    has_pets: bool
    pet_details: Optional[str] = None
    employment_details: Optional[str] = None
    references: Optional[str] = None
    move_in_date: Optional[datetime] = None
    preferred_rent: Optional[str] = None
    lease_length: Optional[int] = None
    preferred_location: Optional[str] = None
    preferred_contact_email: Optional[str] = None
    preferred_contact_phone: Optional[str] = None
    status: FamilyStatus
    verification_status: VerificationStatus
    location: Optional[LocationOut] = None
    members: List[FamilyMemberOut] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

# backend/estatehub/models.py
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Enum as SAEnum,
    Float,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .db import Base
from .enums import (
    ContractStatus,
    EventStatus,
    EventType,
    FamilyStatus,
    OrganizationType,
    ParticipationStatus,
    PaymentFrequency,
    PaymentStatus,
    RequestStatus,
    ResourceType,
    Role,
    VerificationStatus,
)


def utcnow() -> datetime:
    # stored naive, always UTC
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _new_id() -> str:
    return str(uuid.uuid4())


def _enum(enum_cls):
    return SAEnum(enum_cls, native_enum=False, length=32, validate_strings=True)


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)


resource_owners = Table(
    "resource_owners",
    Base.metadata,
    Column("resource_id", String(36), ForeignKey("resources.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)

resource_organization_owners = Table(
    "resource_organization_owners",
    Base.metadata,
    Column("resource_id", String(36), ForeignKey("resources.id", ondelete="CASCADE"), primary_key=True),
    Column("organization_id", String(36), ForeignKey("organizations.id", ondelete="CASCADE"), primary_key=True),
)


# -----------------------------
# Identity
# -----------------------------
class Organization(TimestampMixin, Base):
    __tablename__ = "organizations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(160), nullable=False)
    type: Mapped[OrganizationType] = mapped_column(_enum(OrganizationType), nullable=False, default=OrganizationType.COMPANY)
    contact_email: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)

    members: Mapped[List["User"]] = relationship(back_populates="organization")
    owned_resources: Mapped[List["Resource"]] = relationship(
        secondary=resource_organization_owners, back_populates="organization_owners"
    )


class User(TimestampMixin, Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    email: Mapped[str] = mapped_column(String(200), nullable=False, unique=True, index=True)
    name: Mapped[str] = mapped_column(String(160), nullable=False)
    role: Mapped[Role] = mapped_column(_enum(Role), nullable=False, default=Role.TENANT, index=True)

    phone_number: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)
    alternative_contact: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    identification_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    organization_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("organizations.id", ondelete="SET NULL"), nullable=True, index=True
    )

    family_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("families.id", ondelete="SET NULL"), nullable=True, index=True
    )
    is_head_of_family: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    organization: Mapped[Optional["Organization"]] = relationship(back_populates="members")
    family: Mapped[Optional["Family"]] = relationship(back_populates="members")
    owned_resources: Mapped[List["Resource"]] = relationship(secondary=resource_owners, back_populates="owners")
    event_assignments: Mapped[List["EventAssignment"]] = relationship(back_populates="user")
    rental_contracts: Mapped[List["RentalContract"]] = relationship(back_populates="tenant")


# -----------------------------
# Families (prospective tenants)
# -----------------------------
class Location(TimestampMixin, Base):
    __tablename__ = "locations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    address: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    state: Mapped[Optional[str]] = mapped_column(String(80), nullable=True)
    zip_code: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    country: Mapped[Optional[str]] = mapped_column(String(80), nullable=True)

    families: Mapped[List["Family"]] = relationship(back_populates="location")


class Family(TimestampMixin, Base):
    __tablename__ = "families"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(160), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    size: Mapped[int] = mapped_column(Integer, nullable=False, default=1, index=True)

    income: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    credit_score: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    has_pets: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    pet_details: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    employment_details: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    references: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    move_in_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    preferred_rent: Mapped[Optional[str]] = mapped_column(String(80), nullable=True)
    # months
    lease_length: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    preferred_location: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    preferred_contact_email: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    preferred_contact_phone: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)

    status: Mapped[FamilyStatus] = mapped_column(_enum(FamilyStatus), nullable=False, default=FamilyStatus.PENDING, index=True)
    verification_status: Mapped[VerificationStatus] = mapped_column(
        _enum(VerificationStatus), nullable=False, default=VerificationStatus.PENDING
    )

    location_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("locations.id", ondelete="SET NULL"), nullable=True
    )

    location: Mapped[Optional["Location"]] = relationship(back_populates="families")
    members: Mapped[List["User"]] = relationship(back_populates="family")


# -----------------------------
# Properties
# -----------------------------
class Resource(TimestampMixin, Base):
    __tablename__ = "resources"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    label: Mapped[str] = mapped_column(String(200), nullable=False)
    type: Mapped[ResourceType] = mapped_column(_enum(ResourceType), nullable=False, index=True)

    address: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    parent_id: Mapped[Optional[str]] = mapped_column(String(36), ForeignKey("resources.id"), nullable=True, index=True)

    bedroom_count: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    bathroom_count: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    square_footage: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    rent_amount: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    amenities: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    images: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    parent: Mapped[Optional["Resource"]] = relationship(back_populates="children", remote_side="Resource.id")
    children: Mapped[List["Resource"]] = relationship(back_populates="parent")

    owners: Mapped[List["User"]] = relationship(secondary=resource_owners, back_populates="owned_resources")
    organization_owners: Mapped[List["Organization"]] = relationship(
        secondary=resource_organization_owners, back_populates="owned_resources"
    )

    events: Mapped[List["Event"]] = relationship(back_populates="resource")
    rental_contracts: Mapped[List["RentalContract"]] = relationship(back_populates="resource")


# -----------------------------
# Events
# -----------------------------
class Event(TimestampMixin, Base):
    __tablename__ = "events"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    label: Mapped[str] = mapped_column(String(200), nullable=False)
    type: Mapped[EventType] = mapped_column(_enum(EventType), nullable=False, index=True)
    status: Mapped[EventStatus] = mapped_column(_enum(EventStatus), nullable=False, default=EventStatus.PENDING, index=True)

    resource_id: Mapped[str] = mapped_column(String(36), ForeignKey("resources.id"), nullable=False, index=True)

    start_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    end_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    amount: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    resource: Mapped["Resource"] = relationship(back_populates="events")
    participants: Mapped[List["EventAssignment"]] = relationship(back_populates="event", cascade="all, delete-orphan")


class EventAssignment(TimestampMixin, Base):
    __tablename__ = "event_assignments"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    event_id: Mapped[str] = mapped_column(String(36), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    role: Mapped[Role] = mapped_column(_enum(Role), nullable=False)
    status: Mapped[ParticipationStatus] = mapped_column(
        _enum(ParticipationStatus), nullable=False, default=ParticipationStatus.INVITED
    )
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    event: Mapped["Event"] = relationship(back_populates="participants")
    user: Mapped["User"] = relationship(back_populates="event_assignments")


# -----------------------------
# Leasing
# -----------------------------
class RentalContract(TimestampMixin, Base):
    __tablename__ = "rental_contracts"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    contract_number: Mapped[str] = mapped_column(String(80), nullable=False, unique=True, index=True)

    resource_id: Mapped[str] = mapped_column(String(36), ForeignKey("resources.id"), nullable=False, index=True)
    tenant_id: Mapped[Optional[str]] = mapped_column(String(36), ForeignKey("users.id"), nullable=True, index=True)

    status: Mapped[ContractStatus] = mapped_column(_enum(ContractStatus), nullable=False, default=ContractStatus.DRAFT, index=True)
    start_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    end_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    is_open_ended: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    base_rent_amount: Mapped[float] = mapped_column(Float, nullable=False)
    security_deposit: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    deposit_paid: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    payment_frequency: Mapped[PaymentFrequency] = mapped_column(
        _enum(PaymentFrequency), nullable=False, default=PaymentFrequency.MONTHLY
    )
    payment_due_day: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    resource: Mapped["Resource"] = relationship(back_populates="rental_contracts")
    tenant: Mapped[Optional["User"]] = relationship(back_populates="rental_contracts")
    rent_payments: Mapped[List["RentPayment"]] = relationship(back_populates="contract", cascade="all, delete-orphan")


class RentPayment(TimestampMixin, Base):
    __tablename__ = "rent_payments"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    contract_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("rental_contracts.id", ondelete="CASCADE"), nullable=False, index=True
    )

    amount: Mapped[float] = mapped_column(Float, nullable=False)
    due_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    date_paid: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    status: Mapped[PaymentStatus] = mapped_column(_enum(PaymentStatus), nullable=False, default=PaymentStatus.PENDING)
    payment_method: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)
    payment_reference: Mapped[Optional[str]] = mapped_column(String(80), nullable=True)

    contract: Mapped["RentalContract"] = relationship(back_populates="rent_payments")


# -----------------------------
# Signup + audit
# -----------------------------
class JoinRequest(TimestampMixin, Base):
    __tablename__ = "join_requests"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    email: Mapped[str] = mapped_column(String(200), nullable=False, unique=True, index=True)
    name: Mapped[str] = mapped_column(String(160), nullable=False)
    role: Mapped[Role] = mapped_column(_enum(Role), nullable=False)
    message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    status: Mapped[RequestStatus] = mapped_column(_enum(RequestStatus), nullable=False, default=RequestStatus.PENDING, index=True)
    reviewed_by: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    reviewed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)


class AuditEvent(Base):
    __tablename__ = "audit_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    # no FK: audit rows outlive the users they mention
    actor_user_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)

    action: Mapped[str] = mapped_column(String(80), nullable=False)
    entity_type: Mapped[str] = mapped_column(String(80), nullable=False)
    entity_id: Mapped[str] = mapped_column(String(80), nullable=False, index=True)

    before_json: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    after_json: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

# backend/estatehub/enums.py
from __future__ import annotations

import enum


class Role(str, enum.Enum):
    ADMIN = "ADMIN"
    PROPERTY_MANAGER = "PROPERTY_MANAGER"
    OWNER = "OWNER"
    TENANT = "TENANT"
    SERVICE_PROVIDER = "SERVICE_PROVIDER"


class OrganizationType(str, enum.Enum):
    COMPANY = "COMPANY"
    INDIVIDUAL = "INDIVIDUAL"
    GOVERNMENT = "GOVERNMENT"
    NON_PROFIT = "NON_PROFIT"


class ResourceType(str, enum.Enum):
    BUILDING = "BUILDING"
    UNIT = "UNIT"
    COMMERCIAL_SPACE = "COMMERCIAL_SPACE"
    PARKING_SPOT = "PARKING_SPOT"
    STORAGE = "STORAGE"
    LAND = "LAND"


class EventType(str, enum.Enum):
    LEASE_AGREEMENT = "LEASE_AGREEMENT"
    RENT_PAYMENT = "RENT_PAYMENT"
    MAINTENANCE_REQUEST = "MAINTENANCE_REQUEST"
    INSPECTION = "INSPECTION"
    MOVE_IN = "MOVE_IN"
    MOVE_OUT = "MOVE_OUT"
    CONTRACT_RENEWAL = "CONTRACT_RENEWAL"
    TERMINATION_NOTICE = "TERMINATION_NOTICE"


class EventStatus(str, enum.Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class ParticipationStatus(str, enum.Enum):
    INVITED = "INVITED"
    CONFIRMED = "CONFIRMED"
    DECLINED = "DECLINED"
    COMPLETED = "COMPLETED"


class ContractStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"
    TERMINATED = "TERMINATED"
    RENEWED = "RENEWED"


class PaymentFrequency(str, enum.Enum):
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    QUARTERLY = "QUARTERLY"
    ANNUALLY = "ANNUALLY"


class PaymentStatus(str, enum.Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    LATE = "LATE"
    PARTIAL = "PARTIAL"
    CANCELLED = "CANCELLED"


class RequestStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class FamilyStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    PENDING = "PENDING"


class VerificationStatus(str, enum.Enum):
    PENDING = "PENDING"
    VERIFIED = "VERIFIED"
    FAILED = "FAILED"

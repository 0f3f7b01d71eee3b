# backend/estatehub/routers/rental_contracts.py
from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import desc, func, select
from sqlalchemy.orm import Session, selectinload

from ..auth import require
from ..db import get_db
from ..enums import ContractStatus
from ..errors import BusinessRuleViolation
from ..models import RentalContract, Resource, User
from ..schemas import (
    RentalContractCreate,
    RentalContractDetailOut,
    RentalContractListOut,
    RentalContractUpdate,
)
from ..serialize import ok, page
from ..services.entities import EntityOps, must_get
from ..services.pagination import Page, fetch_page, pagination
from ..validation import payload

router = APIRouter(prefix="/rental-contracts", tags=["rental-contracts"])

contracts = EntityOps(
    RentalContract,
    "Rental contract",
    options=(
        selectinload(RentalContract.resource),
        selectinload(RentalContract.tenant),
        selectinload(RentalContract.rent_payments),
    ),
)


def _out(row: RentalContract) -> RentalContractDetailOut:
    out = RentalContractDetailOut.model_validate(row)
    out.rent_payments.sort(key=lambda p: p.due_date, reverse=True)
    return out


def _check_references(db: Session, values: dict[str, Any], *, self_id: Optional[str] = None) -> None:
    if values.get("resource_id"):
        must_get(db, Resource, values["resource_id"], label="Resource")
    if values.get("tenant_id"):
        must_get(db, User, values["tenant_id"], label="Tenant")

    number = values.get("contract_number")
    if number:
        q = select(RentalContract.id).where(RentalContract.contract_number == number)
        if self_id is not None:
            q = q.where(RentalContract.id != self_id)
        if db.scalar(q) is not None:
            raise BusinessRuleViolation("Contract number already in use")


def status_counts(db: Session) -> dict[str, int]:
    counts = {s.value: 0 for s in ContractStatus}
    for status, n in db.execute(select(RentalContract.status, func.count()).group_by(RentalContract.status)):
        counts[ContractStatus(status).value] = int(n)
    return counts


@router.get("")
def list_contracts(
    user: User = Depends(require("contracts.list")),
    status: Optional[ContractStatus] = Query(default=None),
    resource_id: Optional[str] = Query(default=None, alias="resourceId"),
    tenant_id: Optional[str] = Query(default=None, alias="tenantId"),
    pg: Page = Depends(pagination),
    db: Session = Depends(get_db),
):
    q = select(RentalContract).options(selectinload(RentalContract.resource)).order_by(desc(RentalContract.created_at))
    if status:
        q = q.where(RentalContract.status == status)
    if resource_id:
        q = q.where(RentalContract.resource_id == resource_id)
    if tenant_id:
        q = q.where(RentalContract.tenant_id == tenant_id)

    rows, total = fetch_page(db, q, pg)
    return page(
        [RentalContractListOut.model_validate(r) for r in rows],
        total=total,
        limit=pg.limit,
        offset=pg.offset,
        counts=status_counts(db),
    )


@router.post("", status_code=201)
def create_contract(
    user: User = Depends(require("contracts.create")),
    data: RentalContractCreate = Depends(payload(RentalContractCreate)),
    db: Session = Depends(get_db),
):
    values = data.model_dump()
    _check_references(db, values)
    row = contracts.create(db, user, values)
    return ok("rentalContract", _out(row))


@router.get("/{contract_id}")
def get_contract(
    contract_id: str,
    user: User = Depends(require("contracts.read")),
    db: Session = Depends(get_db),
):
    return ok("rentalContract", _out(contracts.get(db, contract_id)))


@router.api_route("/{contract_id}", methods=["PUT", "PATCH"])
def update_contract(
    contract_id: str,
    user: User = Depends(require("contracts.update")),
    data: RentalContractUpdate = Depends(payload(RentalContractUpdate)),
    db: Session = Depends(get_db),
):
    row = contracts.get(db, contract_id)
    values = data.model_dump(exclude_unset=True)
    _check_references(db, values, self_id=row.id)

    row = contracts.update(db, user, row, values)
    return ok("rentalContract", _out(row))


@router.delete("/{contract_id}")
def delete_contract(
    contract_id: str,
    user: User = Depends(require("contracts.delete")),
    db: Session = Depends(get_db),
):
    row = contracts.get(db, contract_id)
    contracts.delete(db, user, row)
    return ok(message="Rental contract deleted successfully")

"""
Leave balance API routes
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request

from vacation.api.auth import verify_api_key
from vacation.api.dependencies import get_balance_service
from vacation.api.rate_limit import WRITE_LIMIT, limiter
from vacation.models import LeaveType
from vacation.schemas import AccrueRequest, AccrueResult, BalanceGrant, LeaveBalanceOut
from vacation.services import BalanceService

router = APIRouter()


@router.post("/accrue", response_model=AccrueResult, dependencies=[Depends(verify_api_key)])
@limiter.limit(WRITE_LIMIT)
def accrue_balances(
    request: Request,
    payload: AccrueRequest,
    service: BalanceService = Depends(get_balance_service),
):
    """Open the year's balances; without employee_ids every active HR employee is included."""
    created = service.accrue_year(payload.year, payload.employee_ids)
    return AccrueResult(year=payload.year, created=created)


@router.get("/{employee_id}", response_model=List[LeaveBalanceOut])
def get_employee_balances(
    employee_id: int,
    year: Optional[int] = Query(None, ge=2000, le=2100),
    service: BalanceService = Depends(get_balance_service),
):
    return service.get_balances(employee_id, year)


@router.put(
    "/{employee_id}/{year}/{leave_type}",
    response_model=LeaveBalanceOut,
    dependencies=[Depends(verify_api_key)],
)
@limiter.limit(WRITE_LIMIT)
def grant_balance(
    request: Request,
    employee_id: int,
    year: int,
    leave_type: LeaveType,
    payload: BalanceGrant,
    service: BalanceService = Depends(get_balance_service),
):
    return service.grant(employee_id, year, leave_type, payload.granted_days)

"""
Leave request API routes
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status

from vacation.api.auth import verify_api_key
from vacation.api.dependencies import get_leave_service
from vacation.api.rate_limit import WRITE_LIMIT, limiter
from vacation.models import LeaveRequestStatus
from vacation.schemas import (
    ConsumeRequest,
    ConsumeResult,
    LeaveCancellation,
    LeaveDecision,
    LeaveRequestCreate,
    LeaveRequestOut,
)
from vacation.services import LeaveService

router = APIRouter()


@router.post("", response_model=LeaveRequestOut, status_code=status.HTTP_201_CREATED)
@limiter.limit(WRITE_LIMIT)
def submit_leave_request(
    request: Request,
    payload: LeaveRequestCreate,
    service: LeaveService = Depends(get_leave_service),
):
    """
    Submit a leave request.

    Days are reserved against the employee's balance until the request is decided.
    """
    return service.submit(
        employee_id=payload.employee_id,
        leave_type=payload.leave_type,
        start_date=payload.start_date,
        end_date=payload.end_date,
        half_day=payload.half_day,
        reason=payload.reason,
    )


@router.get("", response_model=List[LeaveRequestOut])
def list_leave_requests(
    employee_id: Optional[int] = Query(None, gt=0),
    status_filter: Optional[LeaveRequestStatus] = Query(None, alias="status"),
    year: Optional[int] = Query(None, ge=2000, le=2100),
    service: LeaveService = Depends(get_leave_service),
):
    return service.list_requests(employee_id=employee_id, status=status_filter, year=year)


@router.post("/consume", response_model=ConsumeResult, dependencies=[Depends(verify_api_key)])
@limiter.limit(WRITE_LIMIT)
def consume_finished_leave(
    request: Request,
    payload: Optional[ConsumeRequest] = None,
    service: LeaveService = Depends(get_leave_service),
):
    """Mark finished approved leave as consumed and report it to payroll."""
    as_of = payload.as_of if payload else None
    return service.consume_due(as_of)


@router.get("/{request_id}", response_model=LeaveRequestOut)
def get_leave_request(request_id: int, service: LeaveService = Depends(get_leave_service)):
    return service.get_request(request_id)


@router.post("/{request_id}/approve", response_model=LeaveRequestOut)
@limiter.limit(WRITE_LIMIT)
def approve_leave_request(
    request: Request,
    request_id: int,
    payload: LeaveDecision,
    service: LeaveService = Depends(get_leave_service),
):
    return service.approve(request_id, payload.approver_id, payload.comment)


@router.post("/{request_id}/reject", response_model=LeaveRequestOut)
@limiter.limit(WRITE_LIMIT)
def reject_leave_request(
    request: Request,
    request_id: int,
    payload: LeaveDecision,
    service: LeaveService = Depends(get_leave_service),
):
    return service.reject(request_id, payload.approver_id, payload.comment)


@router.post("/{request_id}/cancel", response_model=LeaveRequestOut)
@limiter.limit(WRITE_LIMIT)
def cancel_leave_request(
    request: Request,
    request_id: int,
    payload: LeaveCancellation,
    service: LeaveService = Depends(get_leave_service),
):
    """Withdraw a request; only the requesting employee may cancel."""
    return service.cancel(request_id, payload.employee_id)

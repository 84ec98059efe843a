from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field, computed_field

from vacation.models import LeaveRequestStatus, LeaveType


class LeaveRequestCreate(BaseModel):
    employee_id: int = Field(gt=0)
    leave_type: LeaveType
    start_date: date
    end_date: date
    half_day: bool = False
    reason: Optional[str] = Field(default=None, max_length=2000)


class LeaveDecision(BaseModel):
    approver_id: int = Field(gt=0)
    comment: Optional[str] = Field(default=None, max_length=512)


class LeaveCancellation(BaseModel):
    employee_id: int = Field(gt=0)


class ConsumeRequest(BaseModel):
    as_of: Optional[date] = None  # defaults to today


class LeaveRequestOut(BaseModel):
    id: int
    employee_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    half_day: bool
    days: float
    reason: Optional[str]
    status: LeaveRequestStatus
    approver_id: Optional[int]
    decision_comment: Optional[str]
    decided_at: Optional[datetime]
    payroll_synced: bool
    created_at: datetime

    class Config:
        from_attributes = True


class ConsumeResult(BaseModel):
    consumed: int
    payroll_synced: int
    payroll_failed: int


class BalanceGrant(BaseModel):
    granted_days: float = Field(ge=0)


class AccrueRequest(BaseModel):
    year: int = Field(ge=2000, le=2100)
    employee_ids: Optional[List[int]] = None  # None = every active employee from HR


class AccrueResult(BaseModel):
    year: int
    created: int


class LeaveBalanceOut(BaseModel):
    employee_id: int
    year: int
    leave_type: LeaveType
    granted_days: float
    used_days: float
    pending_days: float
    carried_over_days: float

    class Config:
        from_attributes = True

    @computed_field(return_type=float)
    @property
    def available_days(self) -> float:
        return self.granted_days - self.used_days - self.pending_days

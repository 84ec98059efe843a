"""
Payloads exchanged with other ERP modules over the declarative HTTP clients.
"""
from datetime import date
from typing import Optional

from pydantic import BaseModel

from vacation.models import LeaveType


class EmployeeInfo(BaseModel):
    """Employee record as served by the HR module"""
    id: int
    name: str
    department: Optional[str] = None
    manager_id: Optional[int] = None
    active: bool = True

    class Config:
        extra = "ignore"


class LeaveEvent(BaseModel):
    """Leave taken, reported to the payroll module"""
    employee_id: int
    request_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    days: float
    paid: bool
    event: str = "CONSUMED"

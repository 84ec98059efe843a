"""
Leave request and leave balance models
"""
from datetime import date, datetime

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Enum as SAEnum,
    Float,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from vacation.models.base import Base, utcnow
from vacation.models.enums import LeaveRequestStatus, LeaveType


class LeaveBalance(Base):
    """Per employee, per year, per leave type allowance"""

    __tablename__ = "leave_balances"
    __table_args__ = (
        UniqueConstraint("employee_id", "year", "leave_type", name="uq_balance_employee_year_type"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    employee_id: Mapped[int] = mapped_column(Integer, index=True)
    year: Mapped[int] = mapped_column(Integer)
    leave_type: Mapped[LeaveType] = mapped_column(SAEnum(LeaveType, native_enum=False, length=16))

    granted_days: Mapped[float] = mapped_column(Float, default=0.0)
    used_days: Mapped[float] = mapped_column(Float, default=0.0)
    pending_days: Mapped[float] = mapped_column(Float, default=0.0)  # reserved by undecided requests
    carried_over_days: Mapped[float] = mapped_column(Float, default=0.0)  # part of granted_days

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    @property
    def available_days(self) -> float:
        return self.granted_days - self.used_days - self.pending_days


class LeaveRequest(Base):
    """A single leave request and its approval state"""

    __tablename__ = "leave_requests"
    __table_args__ = (
        Index("ix_leave_employee_dates", "employee_id", "start_date", "end_date"),
        Index("ix_leave_status", "status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    employee_id: Mapped[int] = mapped_column(Integer, index=True)
    leave_type: Mapped[LeaveType] = mapped_column(SAEnum(LeaveType, native_enum=False, length=16))
    start_date: Mapped[date] = mapped_column(Date)
    end_date: Mapped[date] = mapped_column(Date)
    half_day: Mapped[bool] = mapped_column(Boolean, default=False)
    days: Mapped[float] = mapped_column(Float)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[LeaveRequestStatus] = mapped_column(
        SAEnum(LeaveRequestStatus, native_enum=False, length=16),
        default=LeaveRequestStatus.SUBMITTED,
    )
    approver_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    decision_comment: Mapped[str | None] = mapped_column(String(512), nullable=True)
    decided_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    payroll_synced: Mapped[bool] = mapped_column(Boolean, default=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

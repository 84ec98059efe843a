"""
Repositories for leave requests and leave balances.
"""

from datetime import date
from typing import Iterable, List, Optional

from sqlalchemy import and_, case, extract, select, update
from sqlalchemy.orm import Session

from vacation.models import (
    LeaveBalance,
    LeaveRequest,
    LeaveRequestStatus,
    LeaveType,
)
from vacation.repositories.base_repository import BaseRepository


class LeaveRequestRepository(BaseRepository[LeaveRequest]):
    """Queries over leave_requests"""

    def __init__(self, session: Session):
        super().__init__(session, LeaveRequest)

    def find_overlapping(
        self,
        employee_id: int,
        start_date: date,
        end_date: date,
        statuses: Iterable[LeaveRequestStatus],
    ) -> Optional[LeaveRequest]:
        """Return the first request of the employee whose period intersects [start_date, end_date]."""
        stmt = (
            select(LeaveRequest)
            .where(
                and_(
                    LeaveRequest.employee_id == employee_id,
                    LeaveRequest.status.in_(list(statuses)),
                    LeaveRequest.start_date <= end_date,
                    LeaveRequest.end_date >= start_date,
                )
            )
            .order_by(LeaveRequest.start_date)
            .limit(1)
        )
        return self.session.execute(stmt).scalars().first()

    def find_by_filters(
        self,
        employee_id: Optional[int] = None,
        status: Optional[LeaveRequestStatus] = None,
        year: Optional[int] = None,
    ) -> List[LeaveRequest]:
        stmt = select(LeaveRequest)
        if employee_id is not None:
            stmt = stmt.where(LeaveRequest.employee_id == employee_id)
        if status is not None:
            stmt = stmt.where(LeaveRequest.status == status)
        if year is not None:
            stmt = stmt.where(extract("year", LeaveRequest.start_date) == year)
        stmt = stmt.order_by(LeaveRequest.start_date, LeaveRequest.id)
        return list(self.session.execute(stmt).scalars().all())

    def find_approved_ended_before(self, as_of: date) -> List[LeaveRequest]:
        """Approved requests whose last day is strictly before ``as_of``."""
        stmt = (
            select(LeaveRequest)
            .where(
                LeaveRequest.status == LeaveRequestStatus.APPROVED,
                LeaveRequest.end_date < as_of,
            )
            .order_by(LeaveRequest.id)
        )
        return list(self.session.execute(stmt).scalars().all())

    def find_unsynced_consumed(self) -> List[LeaveRequest]:
        stmt = (
            select(LeaveRequest)
            .where(
                LeaveRequest.status == LeaveRequestStatus.CONSUMED,
                LeaveRequest.payroll_synced.is_(False),
            )
            .order_by(LeaveRequest.id)
        )
        return list(self.session.execute(stmt).scalars().all())

    def transition(self, leave: LeaveRequest, target: LeaveRequestStatus, **values) -> bool:
        """
        Move ``leave`` to ``target`` only if its stored status is still the one
        loaded. Returns False when another transaction changed it first.
        """
        stmt = (
            update(LeaveRequest)
            .where(LeaveRequest.id == leave.id, LeaveRequest.status == leave.status)
            .values(status=target, **values)
            .execution_options(synchronize_session=False)
        )
        moved = self.session.execute(stmt).rowcount == 1
        self.session.expire(leave)
        return moved


class LeaveBalanceRepository(BaseRepository[LeaveBalance]):
    """Queries over leave_balances"""

    def __init__(self, session: Session):
        super().__init__(session, LeaveBalance)

    def find_one(self, employee_id: int, year: int, leave_type: LeaveType) -> Optional[LeaveBalance]:
        stmt = select(LeaveBalance).where(
            LeaveBalance.employee_id == employee_id,
            LeaveBalance.year == year,
            LeaveBalance.leave_type == leave_type,
        )
        return self.session.execute(stmt).scalars().first()

    def find_for_employee(self, employee_id: int, year: Optional[int] = None) -> List[LeaveBalance]:
        stmt = select(LeaveBalance).where(LeaveBalance.employee_id == employee_id)
        if year is not None:
            stmt = stmt.where(LeaveBalance.year == year)
        stmt = stmt.order_by(LeaveBalance.year, LeaveBalance.leave_type)
        return list(self.session.execute(stmt).scalars().all())

    # Balance changes are single UPDATE statements computed by the database,
    # so concurrent transactions cannot overwrite each other's bookkeeping.

    def reserve(self, balance: LeaveBalance, days: float) -> bool:
        """Move ``days`` into pending_days if that many are still available."""
        stmt = (
            update(LeaveBalance)
            .where(
                LeaveBalance.id == balance.id,
                LeaveBalance.granted_days - LeaveBalance.used_days - LeaveBalance.pending_days >= days,
            )
            .values(pending_days=LeaveBalance.pending_days + days)
            .execution_options(synchronize_session=False)
        )
        reserved = self.session.execute(stmt).rowcount == 1
        self.session.expire(balance)
        return reserved

    def adjust(self, balance: LeaveBalance, pending: float = 0.0, used: float = 0.0) -> None:
        """Shift pending_days and used_days by the given amounts."""
        stmt = (
            update(LeaveBalance)
            .where(LeaveBalance.id == balance.id)
            .values(
                pending_days=LeaveBalance.pending_days + pending,
                used_days=LeaveBalance.used_days + used,
            )
            .execution_options(synchronize_session=False)
        )
        self.session.execute(stmt)
        self.session.expire(balance)

    def regrant(self, balance: LeaveBalance, granted_days: float) -> bool:
        """
        Replace the granted allowance unless it would drop below the days
        already used or pending. The carried over part is capped at the new
        allowance.
        """
        stmt = (
            update(LeaveBalance)
            .where(
                LeaveBalance.id == balance.id,
                LeaveBalance.used_days + LeaveBalance.pending_days <= granted_days,
            )
            .values(
                granted_days=granted_days,
                carried_over_days=case(
                    (LeaveBalance.carried_over_days > granted_days, granted_days),
                    else_=LeaveBalance.carried_over_days,
                ),
            )
            .execution_options(synchronize_session=False)
        )
        updated = self.session.execute(stmt).rowcount == 1
        self.session.expire(balance)
        return updated

"""
Leave request workflow

Handles submission, approval, rejection, cancellation and consumption of
leave requests, keeping the matching leave balance in step:

    SUBMITTED --approve--> APPROVED --consume--> CONSUMED
        |                      |
        +--reject--> REJECTED  +--cancel--> CANCELLED
        +--cancel--> CANCELLED

For balance-tracked leave types ``used + pending <= granted`` holds after
every operation.
"""

import threading
from datetime import date, datetime, timedelta, timezone
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from vacation.clients.hr import HrClient
from vacation.clients.payroll import PayrollClient
from vacation.exceptions import (
    AuthorizationError,
    DataNotFoundError,
    ExternalAPIError,
    InsufficientBalanceError,
    InvalidDateRangeError,
    InvalidStateTransitionError,
    LeaveOverlapError,
    ServiceUnavailableError,
    ValidationError,
)
from vacation.models import (
    ACTIVE_STATUSES,
    LeaveBalance,
    LeaveRequest,
    LeaveRequestStatus,
    LeaveType,
)
from vacation.repositories import LeaveBalanceRepository, LeaveRequestRepository
from vacation.schemas.integration import EmployeeInfo, LeaveEvent
from vacation.utils.logging import get_logger

logger = get_logger(__name__)

HALF_DAY = 0.5


def count_leave_days(start_date: date, end_date: date, half_day: bool = False) -> float:
    """
    Count working days (Mon-Fri) between two dates, both inclusive.

    A half day is only valid on a single working day and counts as 0.5.
    """
    if end_date < start_date:
        raise InvalidDateRangeError(
            start_date.isoformat(), end_date.isoformat(), "end_date is before start_date"
        )
    if half_day and start_date != end_date:
        raise InvalidDateRangeError(
            start_date.isoformat(), end_date.isoformat(), "half day leave must start and end on the same day"
        )

    days = 0
    current = start_date
    while current <= end_date:
        if current.weekday() < 5:
            days += 1
        current += timedelta(days=1)

    if half_day and days:
        return HALF_DAY
    return float(days)


class LeaveService:
    """Leave request lifecycle and balance bookkeeping"""

    _submit_locks = {}
    _submit_locks_guard = threading.Lock()

    def __init__(
        self,
        session: Session,
        hr_client: Optional[HrClient] = None,
        payroll_client: Optional[PayrollClient] = None,
    ):
        """
        Args:
            session: request scoped SQLAlchemy session, committed by this service
            hr_client: employee lookups; checks are skipped when None
            payroll_client: leave reporting; skipped when None
        """
        self.session = session
        self.requests = LeaveRequestRepository(session)
        self.balances = LeaveBalanceRepository(session)
        self.hr_client = hr_client
        self.payroll_client = payroll_client

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_request(self, request_id: int) -> LeaveRequest:
        leave = self.requests.find_by_id(request_id)
        if leave is None:
            raise DataNotFoundError("Leave request", request_id)
        return leave

    def list_requests(
        self,
        employee_id: Optional[int] = None,
        status: Optional[LeaveRequestStatus] = None,
        year: Optional[int] = None,
    ) -> List[LeaveRequest]:
        return self.requests.find_by_filters(employee_id=employee_id, status=status, year=year)

    # ------------------------------------------------------------------
    # Workflow
    # ------------------------------------------------------------------

    def submit(
        self,
        employee_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        half_day: bool = False,
        reason: Optional[str] = None,
    ) -> LeaveRequest:
        """
        Create a SUBMITTED request and reserve its days.

        Submissions of the same employee are serialized, so the overlap check
        and the insert cannot interleave with another submission.

        Raises:
            InvalidDateRangeError: bad range, crosses a year, or no working day in it
            AuthorizationError: HR reports the employee as inactive
            LeaveOverlapError: overlaps another active request of the employee
            InsufficientBalanceError: tracked type without enough available days
        """
        days = count_leave_days(start_date, end_date, half_day)
        if start_date.year != end_date.year:
            raise InvalidDateRangeError(
                start_date.isoformat(), end_date.isoformat(), "leave must not span calendar years"
            )
        if days <= 0:
            raise InvalidDateRangeError(
                start_date.isoformat(), end_date.isoformat(), "period contains no working day"
            )

        employee = self._lookup_employee(employee_id)
        if employee is not None and not employee.active:
            raise AuthorizationError("leave request", f"submit for inactive employee {employee_id}")

        with self._submit_lock(employee_id):
            conflict = self.requests.find_overlapping(employee_id, start_date, end_date, ACTIVE_STATUSES)
            if conflict is not None:
                raise LeaveOverlapError(employee_id, conflict.id)

            if leave_type.tracks_balance:
                balance = self.balances.find_one(employee_id, start_date.year, leave_type)
                if balance is None or not self.balances.reserve(balance, days):
                    available = balance.available_days if balance else 0.0
                    raise InsufficientBalanceError(employee_id, leave_type.value, days, available)

            leave = LeaveRequest(
                employee_id=employee_id,
                leave_type=leave_type,
                start_date=start_date,
                end_date=end_date,
                half_day=half_day,
                days=days,
                reason=reason,
                status=LeaveRequestStatus.SUBMITTED,
            )
            self.requests.save(leave)
            self.session.commit()

        logger.info(
            "Leave request %d submitted: employee=%d type=%s %s..%s (%.1f days)",
            leave.id, employee_id, leave_type.value, start_date, end_date, days,
        )
        return leave

    def approve(self, request_id: int, approver_id: int, comment: Optional[str] = None) -> LeaveRequest:
        leave = self.get_request(request_id)
        self._ensure_transition(leave, LeaveRequestStatus.APPROVED)
        self._check_approver(leave, approver_id, "approve")

        days = leave.days
        balance = self._tracked_balance(leave)
        self._decide(leave, LeaveRequestStatus.APPROVED, approver_id, comment)
        if balance is not None:
            self.balances.adjust(balance, pending=-days, used=days)

        self.session.commit()
        logger.info("Leave request %d approved by %d", request_id, approver_id)
        return leave

    def reject(self, request_id: int, approver_id: int, comment: Optional[str] = None) -> LeaveRequest:
        leave = self.get_request(request_id)
        self._ensure_transition(leave, LeaveRequestStatus.REJECTED)
        self._check_approver(leave, approver_id, "reject")

        days = leave.days
        balance = self._tracked_balance(leave)
        self._decide(leave, LeaveRequestStatus.REJECTED, approver_id, comment)
        if balance is not None:
            self.balances.adjust(balance, pending=-days)

        self.session.commit()
        logger.info("Leave request %d rejected by %d", request_id, approver_id)
        return leave

    def cancel(self, request_id: int, employee_id: int, today: Optional[date] = None) -> LeaveRequest:
        """
        Withdraw a request. Only the requester may cancel; an approved
        request can only be cancelled before its first day.
        """
        leave = self.get_request(request_id)
        if leave.employee_id != employee_id:
            raise AuthorizationError(f"leave request {leave.id}", "cancel")
        self._ensure_transition(leave, LeaveRequestStatus.CANCELLED)

        today = today or date.today()
        was_approved = leave.status == LeaveRequestStatus.APPROVED
        if was_approved and leave.start_date <= today:
            raise InvalidStateTransitionError(
                leave.id, f"{leave.status.value} (already started)", LeaveRequestStatus.CANCELLED.value
            )

        days = leave.days
        balance = self._tracked_balance(leave)
        self._move(leave, LeaveRequestStatus.CANCELLED)
        if balance is not None:
            if was_approved:
                self.balances.adjust(balance, used=-days)
            else:
                self.balances.adjust(balance, pending=-days)

        self.session.commit()
        logger.info("Leave request %d cancelled by employee %d", request_id, employee_id)
        return leave

    def consume_due(self, as_of: Optional[date] = None) -> Dict[str, int]:
        """
        Close out finished leave and report it to payroll.

        Every APPROVED request ending before ``as_of`` becomes CONSUMED. Then
        every CONSUMED request not yet reported is sent to payroll; failed
        reports stay unsynced and are retried on the next run.
        """
        as_of = as_of or date.today()

        consumed = 0
        for leave in self.requests.find_approved_ended_before(as_of):
            if self.requests.transition(leave, LeaveRequestStatus.CONSUMED):
                consumed += 1
        self.session.commit()

        synced = failed = 0
        if self.payroll_client is not None:
            for leave in self.requests.find_unsynced_consumed():
                try:
                    self.payroll_client.report_leave(body=self._leave_event(leave))
                except (ExternalAPIError, ServiceUnavailableError, DataNotFoundError) as e:
                    failed += 1
                    logger.warning("Payroll report for leave request %d failed: %s", leave.id, e.message)
                    continue
                leave.payroll_synced = True
                self.session.commit()
                synced += 1

        logger.info(
            "Consumption run as of %s: consumed=%d payroll_synced=%d payroll_failed=%d",
            as_of, consumed, synced, failed,
        )
        return {"consumed": consumed, "payroll_synced": synced, "payroll_failed": failed}

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _ensure_transition(self, leave: LeaveRequest, target: LeaveRequestStatus) -> None:
        if not leave.status.can_transition_to(target):
            raise InvalidStateTransitionError(leave.id, leave.status.value, target.value)

    def _move(self, leave: LeaveRequest, target: LeaveRequestStatus, **values) -> None:
        """Store the transition, failing if another transaction moved the request first."""
        if not self.requests.transition(leave, target, **values):
            raise InvalidStateTransitionError(leave.id, leave.status.value, target.value)

    def _check_approver(self, leave: LeaveRequest, approver_id: int, action: str) -> None:
        if approver_id == leave.employee_id:
            raise AuthorizationError(f"own leave request {leave.id}", action)
        employee = self._lookup_employee(leave.employee_id)
        if employee is not None and employee.manager_id is not None and employee.manager_id != approver_id:
            raise AuthorizationError(f"leave request {leave.id} of employee {leave.employee_id}", action)

    def _decide(
        self,
        leave: LeaveRequest,
        status: LeaveRequestStatus,
        approver_id: int,
        comment: Optional[str],
    ) -> None:
        self._move(
            leave,
            status,
            approver_id=approver_id,
            decision_comment=comment,
            decided_at=datetime.now(timezone.utc),
        )

    @classmethod
    def _submit_lock(cls, employee_id: int):
        with cls._submit_locks_guard:
            return cls._submit_locks.setdefault(employee_id, threading.RLock())

    def _tracked_balance(self, leave: LeaveRequest) -> Optional[LeaveBalance]:
        if not leave.leave_type.tracks_balance:
            return None
        return self.balances.find_one(leave.employee_id, leave.start_date.year, leave.leave_type)

    def _lookup_employee(self, employee_id: int) -> Optional[EmployeeInfo]:
        if self.hr_client is None:
            return None
        try:
            return self.hr_client.get_employee(employee_id)
        except DataNotFoundError as e:
            raise ValidationError("employee_id", "unknown employee", employee_id) from e

    @staticmethod
    def _leave_event(leave: LeaveRequest) -> LeaveEvent:
        return LeaveEvent(
            employee_id=leave.employee_id,
            request_id=leave.id,
            leave_type=leave.leave_type,
            start_date=leave.start_date,
            end_date=leave.end_date,
            days=leave.days,
            paid=leave.leave_type != LeaveType.UNPAID,
        )

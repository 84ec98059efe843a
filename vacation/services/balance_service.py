"""
Leave balance administration: grants and yearly accrual.
"""

from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from vacation.clients.hr import HrClient
from vacation.config import get_settings
from vacation.exceptions import InvalidLeaveTypeError, ValidationError
from vacation.models import LeaveBalance, LeaveType, TRACKED_LEAVE_TYPES
from vacation.repositories import LeaveBalanceRepository
from vacation.utils.logging import get_logger

logger = get_logger(__name__)


class BalanceService:
    """Leave balance lookups, grants and yearly accrual"""

    def __init__(
        self,
        session: Session,
        hr_client: Optional[HrClient] = None,
        annual_leave_days: Optional[float] = None,
        sick_leave_days: Optional[float] = None,
        max_carryover_days: Optional[float] = None,
    ):
        settings = get_settings()
        self.session = session
        self.balances = LeaveBalanceRepository(session)
        self.hr_client = hr_client
        self.annual_leave_days = (
            settings.annual_leave_days if annual_leave_days is None else annual_leave_days
        )
        self.sick_leave_days = settings.sick_leave_days if sick_leave_days is None else sick_leave_days
        self.max_carryover_days = (
            settings.max_carryover_days if max_carryover_days is None else max_carryover_days
        )

    def get_balances(self, employee_id: int, year: Optional[int] = None) -> List[LeaveBalance]:
        return self.balances.find_for_employee(employee_id, year)

    def grant(self, employee_id: int, year: int, leave_type: LeaveType, granted_days: float) -> LeaveBalance:
        """
        Set the granted allowance of a tracked leave type.

        The grant replaces the whole allowance, carried over days included:
        ``carried_over_days`` is capped at the new value. The allowance may
        not drop below what is already used or reserved.
        """
        if not leave_type.tracks_balance:
            raise InvalidLeaveTypeError(leave_type.value, "leave type has no balance")
        if granted_days < 0:
            raise ValidationError("granted_days", "must not be negative", granted_days)

        balance = self.balances.find_one(employee_id, year, leave_type)
        if balance is None:
            balance = self.balances.save(
                LeaveBalance(
                    employee_id=employee_id,
                    year=year,
                    leave_type=leave_type,
                    granted_days=granted_days,
                    used_days=0.0,
                    pending_days=0.0,
                    carried_over_days=0.0,
                )
            )
        elif not self.balances.regrant(balance, granted_days):
            committed = balance.used_days + balance.pending_days
            raise ValidationError(
                "granted_days",
                f"must cover {committed} day(s) already used or pending",
                granted_days,
            )

        self.session.commit()
        logger.info(
            "Granted %.1f %s day(s) to employee %d for %d",
            granted_days, leave_type.value, employee_id, year,
        )
        return balance

    def accrue_year(self, year: int, employee_ids: Optional[Iterable[int]] = None) -> int:
        """
        Open the balances of ``year`` for every employee.

        ANNUAL gets the configured allowance plus the unused part of last
        year's ANNUAL balance, capped at ``max_carryover_days``. SICK gets the
        configured allowance. Existing balances are left untouched, so the
        run can be repeated safely.

        Args:
            year: year to open
            employee_ids: employees to accrue for; defaults to the active
                employees reported by HR

        Returns:
            Number of balances created
        """
        if employee_ids is None:
            if self.hr_client is None:
                raise ValidationError("employee_ids", "required when the HR client is not enabled")
            employee_ids = [employee.id for employee in self.hr_client.list_employees(active=True)]

        created = 0
        for employee_id in sorted(set(employee_ids)):
            for leave_type in sorted(TRACKED_LEAVE_TYPES, key=lambda t: t.value):
                if self.balances.find_one(employee_id, year, leave_type) is not None:
                    continue
                carried = self._carryover(employee_id, year) if leave_type == LeaveType.ANNUAL else 0.0
                base = self.annual_leave_days if leave_type == LeaveType.ANNUAL else self.sick_leave_days
                self.balances.save(
                    LeaveBalance(
                        employee_id=employee_id,
                        year=year,
                        leave_type=leave_type,
                        granted_days=base + carried,
                        used_days=0.0,
                        pending_days=0.0,
                        carried_over_days=carried,
                    )
                )
                created += 1

        self.session.commit()
        logger.info("Accrued %d balance(s) for %d", created, year)
        return created

    def _carryover(self, employee_id: int, year: int) -> float:
        previous = self.balances.find_one(employee_id, year - 1, LeaveType.ANNUAL)
        if previous is None:
            return 0.0
        return max(0.0, min(previous.available_days, self.max_carryover_days))

"""
Enum definitions for models
"""
from enum import Enum


class LeaveType(str, Enum):
    """Kinds of leave an employee can request"""
    ANNUAL = "ANNUAL"    # paid annual leave, balance tracked
    SICK = "SICK"        # paid sick leave, balance tracked
    UNPAID = "UNPAID"    # no balance, reported to payroll
    SPECIAL = "SPECIAL"  # bereavement, wedding etc., no balance

    @property
    def tracks_balance(self) -> bool:
        return self in TRACKED_LEAVE_TYPES


TRACKED_LEAVE_TYPES = frozenset({LeaveType.ANNUAL, LeaveType.SICK})


class LeaveRequestStatus(str, Enum):
    """Leave request lifecycle"""
    SUBMITTED = "SUBMITTED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"
    CONSUMED = "CONSUMED"

    @property
    def is_terminal(self) -> bool:
        return not ALLOWED_TRANSITIONS[self]

    def can_transition_to(self, target: "LeaveRequestStatus") -> bool:
        return target in ALLOWED_TRANSITIONS[self]


ALLOWED_TRANSITIONS: dict[LeaveRequestStatus, frozenset[LeaveRequestStatus]] = {
    LeaveRequestStatus.SUBMITTED: frozenset({
        LeaveRequestStatus.APPROVED,
        LeaveRequestStatus.REJECTED,
        LeaveRequestStatus.CANCELLED,
    }),
    LeaveRequestStatus.APPROVED: frozenset({
        LeaveRequestStatus.CONSUMED,
        LeaveRequestStatus.CANCELLED,
    }),
    LeaveRequestStatus.REJECTED: frozenset(),
    LeaveRequestStatus.CANCELLED: frozenset(),
    LeaveRequestStatus.CONSUMED: frozenset(),
}

# Requests in these states block the employee's calendar
ACTIVE_STATUSES = frozenset({
    LeaveRequestStatus.SUBMITTED,
    LeaveRequestStatus.APPROVED,
    LeaveRequestStatus.CONSUMED,
})


__all__ = [
    "LeaveType",
    "LeaveRequestStatus",
    "ALLOWED_TRANSITIONS",
    "ACTIVE_STATUSES",
    "TRACKED_LEAVE_TYPES",
]

"""
Models package - unified exports for all models

    from vacation.models import LeaveRequest, LeaveBalance, LeaveType
"""

from vacation.models.base import Base, utcnow

from vacation.models.enums import (
    ACTIVE_STATUSES,
    ALLOWED_TRANSITIONS,
    TRACKED_LEAVE_TYPES,
    LeaveRequestStatus,
    LeaveType,
)

from vacation.models.leave import LeaveBalance, LeaveRequest

__all__ = [
    # Base
    "Base",
    "utcnow",
    # Enums
    "LeaveType",
    "LeaveRequestStatus",
    "ALLOWED_TRANSITIONS",
    "ACTIVE_STATUSES",
    "TRACKED_LEAVE_TYPES",
    # Leave models
    "LeaveRequest",
    "LeaveBalance",
]

"""
Request/response schemas for the HTTP API and inter-service payloads.
"""

from vacation.schemas.integration import EmployeeInfo, LeaveEvent
from vacation.schemas.leave import (
    AccrueRequest,
    AccrueResult,
    BalanceGrant,
    ConsumeRequest,
    ConsumeResult,
    LeaveBalanceOut,
    LeaveCancellation,
    LeaveDecision,
    LeaveRequestCreate,
    LeaveRequestOut,
)

__all__ = [
    # Inter-service payloads
    "EmployeeInfo",
    "LeaveEvent",
    # API schemas
    "AccrueRequest",
    "AccrueResult",
    "BalanceGrant",
    "ConsumeRequest",
    "ConsumeResult",
    "LeaveBalanceOut",
    "LeaveCancellation",
    "LeaveDecision",
    "LeaveRequestCreate",
    "LeaveRequestOut",
]

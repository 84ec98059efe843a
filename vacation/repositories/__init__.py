from vacation.repositories.base_repository import BaseRepository
from vacation.repositories.leave_repository import (
    LeaveBalanceRepository,
    LeaveRequestRepository,
)

__all__ = [
    "BaseRepository",
    "LeaveBalanceRepository",
    "LeaveRequestRepository",
]

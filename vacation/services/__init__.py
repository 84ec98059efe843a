from vacation.services.balance_service import BalanceService
from vacation.services.leave_service import LeaveService, count_leave_days

__all__ = [
    "BalanceService",
    "LeaveService",
    "count_leave_days",
]

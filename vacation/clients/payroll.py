from vacation.clients.base import HttpClient, post
from vacation.clients.registry import http_client
from vacation.schemas.integration import LeaveEvent


@http_client("payroll")
class PayrollClient(HttpClient):
    """Leave events consumed by the payroll module"""

    @post("/api/payroll/leave-events")
    def report_leave(self, body: LeaveEvent) -> None: ...

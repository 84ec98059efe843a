from typing import List, Optional

from vacation.clients.base import HttpClient, get
from vacation.clients.registry import http_client
from vacation.schemas.integration import EmployeeInfo


@http_client("hr")
class HrClient(HttpClient):
    """Employee directory of the HR module"""

    @get("/api/employees/{employee_id}")
    def get_employee(self, employee_id: int) -> EmployeeInfo: ...

    @get("/api/employees")
    def list_employees(self, active: Optional[bool] = True) -> List[EmployeeInfo]: ...

"""
Declarative HTTP clients for the other ERP modules.
"""

from vacation.clients.base import HttpClient, delete, get, post, put, request
from vacation.clients.registry import ClientRegistry, http_client, registered_clients
from vacation.clients.hr import HrClient
from vacation.clients.payroll import PayrollClient

__all__ = [
    "ClientRegistry",
    "HttpClient",
    "HrClient",
    "PayrollClient",
    "delete",
    "get",
    "http_client",
    "post",
    "put",
    "registered_clients",
    "request",
]

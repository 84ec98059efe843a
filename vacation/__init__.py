"""
Core backend package for the ERP vacation service.
Exposes leave requests, leave balances, and the inter-service HTTP clients.
"""

__version__ = "0.1.0"

__all__ = [
    "clients",
    "config",
    "database",
    "models",
    "schemas",
    "services",
    "tasks",
    "utils",
]

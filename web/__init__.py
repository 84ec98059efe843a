"""
FastAPI application surface for the ERP vacation service.
"""

from .app import create_app, app

__all__ = ["create_app", "app"]

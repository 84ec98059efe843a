from fastapi import APIRouter

from vacation.api import routes_balances, routes_leave_requests

api_router = APIRouter()

api_router.include_router(routes_leave_requests.router, prefix="/leave-requests", tags=["leave-requests"])
api_router.include_router(routes_balances.router, prefix="/balances", tags=["balances"])

from typing import Generator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from vacation.clients import ClientRegistry, HrClient, PayrollClient
from vacation.database import SessionLocal
from vacation.services import BalanceService, LeaveService


def get_db() -> Generator[Session, None, None]:
    """
    Request scoped database session.

    Usage:
        @router.get("/endpoint")
        def endpoint(db: Session = Depends(get_db)):
            ...

    Yields:
        SQLAlchemy Session, closed when the request ends
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_http_clients(request: Request) -> ClientRegistry:
    """Clients enabled at startup; an empty registry when none were enabled."""
    registry = getattr(request.app.state, "http_clients", None)
    return registry if registry is not None else ClientRegistry()


def get_leave_service(
    db: Session = Depends(get_db),
    clients: ClientRegistry = Depends(get_http_clients),
) -> LeaveService:
    return LeaveService(
        db,
        hr_client=clients.find(HrClient),
        payroll_client=clients.find(PayrollClient),
    )


def get_balance_service(
    db: Session = Depends(get_db),
    clients: ClientRegistry = Depends(get_http_clients),
) -> BalanceService:
    return BalanceService(db, hr_client=clients.find(HrClient))

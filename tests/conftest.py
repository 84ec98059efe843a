"""
Shared test fixtures for all tests.

Provides:
- db_engine: In-memory SQLite engine with all tables created
- db_session: SQLAlchemy session closed after each test
- erp: fake HR and payroll modules served through httpx.MockTransport
- http_clients: ClientRegistry whose clients talk to the fake modules
- client: FastAPI TestClient with test database and fake modules injected
"""

import json

import httpx
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from vacation.clients import ClientRegistry, HrClient, PayrollClient
from vacation.config import get_settings
from vacation.database import Base

MANAGER_ID = 10


@pytest.fixture
def db_engine():
    """Create an in-memory SQLite engine with all tables."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    # Import models so metadata is registered
    import vacation.models  # noqa: F401

    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)


@pytest.fixture
def db_session(db_engine):
    """Create a database session; closed after each test."""
    Session = sessionmaker(bind=db_engine)
    session = Session()
    yield session
    session.close()


class FakeErpModules:
    """In-memory HR and payroll modules answering the vacation service's calls."""

    def __init__(self):
        self.employees = {
            1: {"id": 1, "name": "Kim Minji", "department": "Sales", "manager_id": MANAGER_ID, "active": True},
            2: {"id": 2, "name": "Lee Jun", "department": "Sales", "manager_id": MANAGER_ID, "active": True},
            3: {"id": 3, "name": "Park Sora", "department": "Ops", "manager_id": MANAGER_ID, "active": False},
            MANAGER_ID: {"id": MANAGER_ID, "name": "Choi Hana", "department": "Sales", "manager_id": None, "active": True},
        }
        self.leave_events = []
        self.requests = []
        self.hr_down = False
        self.payroll_failures = 0  # next N payroll calls answer HTTP 500

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path.startswith("/api/employees"):
            if self.hr_down:
                return httpx.Response(503)
            if path == "/api/employees":
                employees = list(self.employees.values())
                if request.url.params.get("active") == "true":
                    employees = [e for e in employees if e["active"]]
                return httpx.Response(200, json=employees)
            employee = self.employees.get(int(path.rsplit("/", 1)[1]))
            if employee is None:
                return httpx.Response(404, json={"error": "not found"})
            return httpx.Response(200, json=employee)

        if path == "/api/payroll/leave-events" and request.method == "POST":
            if self.payroll_failures:
                self.payroll_failures -= 1
                return httpx.Response(500, text="payroll ledger locked")
            self.leave_events.append(json.loads(request.content))
            return httpx.Response(201)

        return httpx.Response(404)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def erp():
    return FakeErpModules()


@pytest.fixture
def http_clients(erp):
    """Enabled clients routed to the fake modules, without retry backoff."""
    registry = ClientRegistry.enable(
        get_settings().model_copy(update={"http_clients_enabled": True}),
        transport=erp.transport(),
    )
    for client_cls in (HrClient, PayrollClient):
        registry.get(client_cls).backoff = 0
    yield registry
    registry.close()


@pytest.fixture
def hr_client(http_clients):
    return http_clients.get(HrClient)


@pytest.fixture
def payroll_client(http_clients):
    return http_clients.get(PayrollClient)


@pytest.fixture
def client(db_session, http_clients):
    """Create a FastAPI TestClient with test database injected.

    Uses a minimal app (no lifespan/scheduler) to avoid side effects.
    """
    from fastapi import FastAPI
    from fastapi.testclient import TestClient
    from slowapi import _rate_limit_exceeded_handler
    from slowapi.errors import RateLimitExceeded

    from vacation.api import routes_health
    from vacation.api.dependencies import get_db
    from vacation.api.rate_limit import limiter
    from vacation.api.router import api_router
    from web.app import register_exception_handlers

    app = FastAPI()
    app.state.limiter = limiter
    app.state.http_clients = http_clients
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    register_exception_handlers(app)
    app.include_router(api_router, prefix="/api")
    app.include_router(routes_health.router, prefix="/health")

    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    limiter.reset()
    with TestClient(app) as tc:
        yield tc
    app.dependency_overrides.clear()

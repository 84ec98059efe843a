"""
Service health check
Reports database connectivity and the enabled inter-service HTTP clients.
"""
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from vacation import __version__
from vacation.api.dependencies import get_db, get_http_clients
from vacation.clients import ClientRegistry
from vacation.config import get_settings
from vacation.utils.logging import get_logger

logger = get_logger(__name__)
router = APIRouter()


def _check_db(db: Session) -> Dict[str, Any]:
    try:
        db.execute(text("SELECT 1"))
        return {"status": "UP"}
    except SQLAlchemyError as e:
        logger.error(f"Health check database probe failed: {e}")
        return {"status": "DOWN", "detail": str(e)}


@router.get("")
def health(
    db: Session = Depends(get_db),
    clients: ClientRegistry = Depends(get_http_clients),
):
    """Liveness and readiness in one payload; 503 when the database is down."""
    components: Dict[str, Any] = {
        "db": _check_db(db),
        "httpClients": clients.names(),
    }
    overall = "UP" if components["db"]["status"] == "UP" else "DOWN"
    body = {
        "status": overall,
        "service": get_settings().app_name,
        "version": __version__,
        "components": components,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    return JSONResponse(status_code=200 if overall == "UP" else 503, content=body)

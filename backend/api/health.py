"""GET /api/health — database reachability check."""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.engine import Engine

from core.database import get_engine, ping
from core.errors import QueryError

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
def health_check(engine: Engine = Depends(get_engine)):
    db_status = _check_database(engine)
    return {
        "status": "ok" if db_status["status"] == "up" else "degraded",
        "database": db_status,
    }


def _check_database(engine: Engine) -> dict:
    try:
        ping(engine)
        return {"status": "up", "dialect": engine.dialect.name}
    except QueryError as e:
        logger.warning("Database health check failed: %s", e.details)
        return {"status": "down", "error": e.details}

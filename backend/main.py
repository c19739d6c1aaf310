"""
CRUD Panel — schema-driven database administration API
FastAPI application entry point.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api import health, rows, tables
from config import settings
from core.errors import NotFoundError, PanelError, QueryError, ValidationError

# ── Logging ──────────────────────────────────────────────────────────────────
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
)
logger = logging.getLogger("crudpanel")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("CRUD Panel starting up…")
    yield
    logger.info("CRUD Panel shutting down.")


# ── App ───────────────────────────────────────────────────────────────────────
app = FastAPI(
    title="CRUD Panel",
    description="Browse, edit and design tables of any relational database from its schema catalog.",
    version="1.0.0",
    lifespan=lifespan,
)

# ── CORS ──────────────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Errors ────────────────────────────────────────────────────────────────────
def _error_body(exc: PanelError) -> dict:
    return {"error": exc.message, "details": exc.details}


@app.exception_handler(QueryError)
async def query_error_handler(request: Request, exc: QueryError):
    logger.error("%s %s: %s (%s)", request.method, request.url.path, exc.message, exc.details)
    return JSONResponse(status_code=500, content=_error_body(exc))


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content=_error_body(exc))


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content=_error_body(exc))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    details = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', '')}" for err in exc.errors()
    )
    return JSONResponse(status_code=400, content={"error": "Malformed request", "details": details})


# ── Routers ───────────────────────────────────────────────────────────────────
app.include_router(health.router, prefix="/api")
app.include_router(tables.router, prefix="/api")
app.include_router(rows.router,   prefix="/api")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=settings.API_HOST, port=settings.API_PORT)

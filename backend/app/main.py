"""
Ticket Assistant – main FastAPI application.

Run:
    uvicorn backend.app.main:app --reload
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlmodel import Session

from backend.app.config import LOG_LEVEL, SEED_ON_STARTUP
from backend.app.db import create_db_and_tables, engine
from backend.app.errors import NotFoundError, StoreError, TicketServiceError, ValidationError
from backend.app.routes.assistant import router as assistant_router
from backend.app.routes.categories import router as categories_router
from backend.app.routes.tickets import router as tickets_router
from backend.app.seed import seed

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("ticket_assistant")

VERSION = "1.0.0"


# ── Lifespan ──────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Prepare the database (and optional sample data) before serving."""
    logger.info("Creating database tables...")
    create_db_and_tables()

    if SEED_ON_STARTUP:
        logger.info("Seeding reference data...")
        with Session(engine) as session:
            seed(session)

    logger.info("Application ready")

    yield

    logger.info("Application shutting down")


# ── FastAPI application ───────────────────────────────────────────────
app = FastAPI(
    title="Ticket Assistant",
    description="Ticket management API with a guided ticket-drafting assistant",
    version=VERSION,
    lifespan=lifespan,
)

# CORS (development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(tickets_router)
app.include_router(categories_router)
app.include_router(assistant_router)


# ── Error mapping ─────────────────────────────────────────────────────
_STATUS_CODES: dict[type[TicketServiceError], int] = {
    ValidationError: 400,
    NotFoundError: 404,
    StoreError: 500,
}


@app.exception_handler(TicketServiceError)
async def ticket_service_error_handler(request: Request, exc: TicketServiceError) -> JSONResponse:
    status_code = next(
        (_STATUS_CODES[cls] for cls in type(exc).__mro__ if cls in _STATUS_CODES), 500
    )
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=status_code, content={"detail": exc.message})


@app.get("/api/health", include_in_schema=False)
async def health() -> dict:
    return {"status": "healthy", "version": VERSION}

from fastapi import FastAPI, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy import text

from foundations.db.base import get_db
from foundations.core.config import settings
from foundations.core.logging import configure_logging
from foundations.routers import habits as habits_router
from foundations.routers import rules as rules_router
from foundations.routers import challenges as challenges_router
from foundations.routers import metrics as metrics_router
from foundations.core.errors import (
    FoundationsException,
    foundations_exception_handler,
    validation_exception_handler,
    unhandled_exception_handler,
)

configure_logging()

app = FastAPI(
    title="Foundations API",
    description=(
        "**Commitment tracking**: habits, rules and fixed-duration challenges.\n\n"
        "Streaks are derived from a per-day completion ledger keyed by the "
        "configured timezone. Rule violations are limited to one per 24 hours.\n\n"
        "Requests identify the user with the `X-User-Id` header. "
        "All error responses follow the `{code, message, details}` envelope."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Exception handlers (most specific first) ---
app.add_exception_handler(FoundationsException, foundations_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers ---
app.include_router(habits_router.router)
app.include_router(rules_router.router)
app.include_router(challenges_router.router)
app.include_router(metrics_router.router)


@app.get("/health", tags=["health"], summary="Health check")
def health(db: Session = Depends(get_db)):
    """
    Returns `{"status": "ok", "db": "ok"}` when both the API and the database
    are reachable. Returns HTTP 503 if the DB is down.
    """
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        return JSONResponse(
            status_code=503,
            content={"status": "error", "db": "unreachable"},
        )
    return {"status": "ok", "db": "ok", "env": settings.APP_ENV, "timezone": settings.TIMEZONE}

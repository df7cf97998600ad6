import logging
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from ticketbari.database import init_db, ping_db
from ticketbari.config import get_settings
from ticketbari.exceptions import MarketplaceError
from ticketbari.middleware.security import setup_security_middleware
from ticketbari.routers import (
    auth_router,
    tickets_router,
    bookings_router,
    payments_router,
    transactions_router,
    admin_router
)
from ticketbari.routers.auth import limiter

settings = get_settings()
logger = logging.getLogger(__name__)


def setup_logging():
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
    )
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    init_db()
    logger.info("TicketBari API started")
    yield
    logger.info("TicketBari API shutting down")


app = FastAPI(
    title="TicketBari",
    description="A transport ticket marketplace",
    version="1.0.0",
    lifespan=lifespan
)

# Rate limiter setup
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

setup_security_middleware(
    app,
    cors_origins=[o.strip() for o in settings.cors_origins.split(",") if o.strip()]
)

app.include_router(auth_router)
app.include_router(tickets_router)
app.include_router(bookings_router)
app.include_router(payments_router)
app.include_router(transactions_router)
app.include_router(admin_router)


@app.get("/health")
async def health():
    database_up = ping_db()
    return {
        "status": "OK" if database_up else "DEGRADED",
        "timestamp": datetime.utcnow().isoformat(),
        "database": "Connected" if database_up else "Disconnected"
    }


@app.exception_handler(MarketplaceError)
async def marketplace_error_handler(request: Request, exc: MarketplaceError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.message}
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    message = "Route not found" if exc.status_code == 404 else str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": message}
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "; ".join(
        f"{'.'.join(str(p) for p in error['loc'] if p != 'body')}: {error['msg']}"
        for error in errors
    ) or "Invalid request"
    return JSONResponse(
        status_code=422,
        content={"success": False, "message": message}
    )


@app.exception_handler(Exception)
async def server_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": "Internal server error"}
    )

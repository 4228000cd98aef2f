# paintperfect/main.py
import time
from pathlib import Path
from uuid import uuid4

import sentry_sdk
import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from sentry_sdk.integrations.fastapi import FastApiIntegration
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from paintperfect import models  # noqa: F401  (registers SQLAlchemy models)
from paintperfect.api.routes import admin as api_admin
from paintperfect.api.routes import auth as api_auth
from paintperfect.api.routes import cart as api_cart
from paintperfect.api.routes import catalog as api_catalog
from paintperfect.api.routes import designs as api_designs
from paintperfect.api.routes import requests as api_requests
from paintperfect.core.exceptions import PaintPerfectError
from paintperfect.core.logging_config import logger, setup_logging
from paintperfect.core.rate_limit import limiter
from paintperfect.core.settings import settings
from paintperfect.db import Base, engine
from paintperfect.observability.metrics import router as metrics_router
from paintperfect.routers import (
    admin_dashboard,
    auth,
    cart,
    pages,
    requests,
    user_dashboard,
    vendor_dashboard,
)

if settings.SENTRY_DSN:
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        integrations=[FastApiIntegration()],
        traces_sample_rate=0.1,
    )

# ----------------------------------------------------
# App init
# ----------------------------------------------------
app = FastAPI(title=settings.APP_NAME, version="0.1.0")

setup_logging()
logger.info("startup", service="paintperfect-web")


# ----------------------------------------------------
# Health
# ----------------------------------------------------
@app.get("/health", include_in_schema=True)
def health() -> dict:
    return {"status": "ok"}


# ----------------------------------------------------
# Logging middleware
# ----------------------------------------------------
@app.middleware("http")
async def logging_middleware(request: Request, call_next):
    start = time.time()

    request_id = request.headers.get("X-Request-ID") or uuid4().hex
    client_ip = request.client.host if request.client else "unknown"

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id)
    bound_logger = logger.bind(
        ip=client_ip,
        endpoint=str(request.url.path),
        method=request.method,
    )

    bound_logger.info("request_started")
    response = await call_next(request)
    latency_ms = round((time.time() - start) * 1000, 2)

    bound_logger.bind(
        status_code=response.status_code,
        latency_ms=latency_ms,
        user_id=getattr(request.state, "user_id", None),
    ).info("request_finished")
    response.headers["X-Request-ID"] = request_id
    return response


# ----------------------------------------------------
# Middleware
# ----------------------------------------------------
app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RateLimitExceeded)
def ratelimit_handler(request: Request, exc: RateLimitExceeded):
    return PlainTextResponse(str(exc), status_code=429)


@app.exception_handler(PaintPerfectError)
def domain_error_handler(request: Request, exc: PaintPerfectError):
    logger.info(
        "domain_error",
        code=exc.code,
        message=exc.message,
        endpoint=str(request.url.path),
    )
    return JSONResponse(exc.to_dict(), status_code=exc.status_code)


# ----------------------------------------------------
# Routers
# ----------------------------------------------------
app.include_router(pages.router)
app.include_router(auth.router)
app.include_router(user_dashboard.router)
app.include_router(vendor_dashboard.router)
app.include_router(admin_dashboard.router)
app.include_router(cart.router)
app.include_router(requests.router)

app.include_router(api_auth.router)
app.include_router(api_catalog.router)
app.include_router(api_designs.router)
app.include_router(api_cart.router)
app.include_router(api_requests.router)
app.include_router(api_admin.router)

app.include_router(metrics_router)  # /metrics

if settings.STORAGE_BACKEND == "local":
    # LocalStorage.public_url -> /files/<bucket>/<key>
    Path(settings.LOCAL_STORAGE_ROOT).mkdir(parents=True, exist_ok=True)
    app.mount("/files", StaticFiles(directory=settings.LOCAL_STORAGE_ROOT), name="files")


# ----------------------------------------------------
# Startup
# ----------------------------------------------------
@app.on_event("startup")
def on_startup():
    Base.metadata.create_all(bind=engine)

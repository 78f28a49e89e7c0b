import logging
import subprocess
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from .api.ai import router as ai_router
from .api.api_keys import router as api_keys_router
from .api.audit import router as audit_router
from .api.health import router as health_router
from .api.response_builders import validation_error_response
from .api.seo import router as seo_router
from .api.subscription import router as subscription_router
from .config import (
    API_PREFIX, API_VERSION, APP_NAME, AUTO_CREATE_SCHEMA, AUTO_MIGRATE, CORS_ORIGINS, ENVIRONMENT,
)
from .db_init import init_schema_and_seed
from .logging_config import setup_logging
from .middleware import ApiVersionHeaderMiddleware, TracingMiddleware

# Configure logging at import time
setup_logging()

logger = logging.getLogger("sitebuilder")


def run_migrations() -> None:
    try:
        subprocess.run(["alembic", "upgrade", "head"], check=True)
        logger.info("Alembic auto-migrate: upgrade head OK")
    except (OSError, subprocess.CalledProcessError):
        logger.exception("Alembic auto-migrate failed")


@asynccontextmanager
async def lifespan(application: FastAPI):
    logger.info("Site Builder API starting up", extra={
        "environment": ENVIRONMENT,
        "version": API_VERSION,
        "component": "api"
    })

    if AUTO_MIGRATE:
        run_migrations()
    elif AUTO_CREATE_SCHEMA:
        init_schema_and_seed()

    logger.info("Site Builder API ready", extra={"component": "api"})
    try:
        yield
    finally:
        logger.info("Site Builder API shutting down", extra={"component": "api"})


app = FastAPI(title="Site Builder API", version=API_VERSION, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(TracingMiddleware)
app.add_middleware(ApiVersionHeaderMiddleware)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"field": ".".join(str(p) for p in err.get("loc", ()) if p not in ("path", "query", "body")) or "request",
         "message": err.get("msg", "Invalid value")}
        for err in exc.errors()
    ]
    return validation_error_response(errors)


app.include_router(health_router, prefix=API_PREFIX)
app.include_router(api_keys_router, prefix=API_PREFIX)
app.include_router(seo_router, prefix=API_PREFIX)
app.include_router(subscription_router, prefix=API_PREFIX)
app.include_router(audit_router, prefix=API_PREFIX)
app.include_router(ai_router, prefix=API_PREFIX)

logger.info("startup: %s routes mounted under %s", APP_NAME, API_PREFIX, extra={"component": "api"})

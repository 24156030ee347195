"""
LabHub FastAPI Application - Main entry point.

Back-office for the robotics lab website:

- Intake: students submit project proposals
- Review: faculty approve/reject proposals from the dashboard
- Notifications: every lifecycle event queues an email
- Admin: email queue, activity log, role management

Endpoints live under /api/v1/{module}/.
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from labhub.core.config import settings
from labhub.core.container import build_services
from labhub.core.exceptions import LabHubError, TransientStoreError, ValidationError
from labhub.core.log import configure_logging
from labhub.gateway import InMemoryGateway
from labhub.schemas.common import HealthResponse
from labhub.api.v1 import api_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown."""
    configure_logging(settings.LOG_LEVEL)
    services = build_services(settings)
    await services.startup()
    app.state.services = services
    yield
    await services.shutdown()


app = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    description="""
LabHub - back-office for robotics project proposals.

## Modules

- **Auth**: sign-in, sessions, profiles
- **Submissions**: proposal intake and faculty review
- **Dashboard**: counts by status
- **Admin**: email queue, activity log, roles
    """,
    lifespan=lifespan,
    docs_url="/api/docs" if settings.DEBUG else None,
    redoc_url="/api/redoc" if settings.DEBUG else None,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# HEALTH CHECK
# ============================================================================

@app.get("/api/health", response_model=HealthResponse, tags=["health"])
async def health_check(request: Request):
    """Health check endpoint."""
    services = getattr(request.app.state, "services", None)
    store = "memory" if services is not None and isinstance(services.gateway, InMemoryGateway) else "database"
    return HealthResponse(code=200, message="API is healthy.", store=store)


app.include_router(api_router, prefix="/api/v1")


# ============================================================================
# ERROR HANDLERS
# ============================================================================

@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "errors": exc.errors}
    )


@app.exception_handler(TransientStoreError)
async def store_error_handler(request: Request, exc: TransientStoreError):
    logger.error(f"Store failure on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": "Something went wrong while saving. Please try again."}
    )


@app.exception_handler(LabHubError)
async def labhub_error_handler(request: Request, exc: LabHubError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message}
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    if settings.DEBUG:
        return JSONResponse(
            status_code=500,
            content={"detail": str(exc)}
        )
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"}
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "labhub.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )

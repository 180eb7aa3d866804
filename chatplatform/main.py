# chatplatform/main.py
"""
FastAPI application entry point.
Wires configuration, database initialization, CORS, routers and the
JSON error envelope used by every endpoint.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from chatplatform import __version__
from chatplatform.api import ALL_ROUTERS
from chatplatform.config import SERVER, UPLOADS
from chatplatform.core.exceptions import PlatformException
from chatplatform.db.init_db import init_database
from chatplatform.db.session import get_engine
from chatplatform.utils.logger import setup_logger

logger = setup_logger(__name__)


# =============================================================================
# Application Lifespan
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler - startup and shutdown."""
    logger.info("Starting chatbot platform API...")
    try:
        init_database()
    except Exception as e:
        logger.error(f"Startup failed: {e}")
        raise

    logger.info(f"   Database: {get_engine().url.render_as_string(hide_password=True)}")
    logger.info(f"   Uploads: {UPLOADS.upload_dir} (max {UPLOADS.max_file_size_mb} MB)")
    logger.info(f"   CORS origins: {', '.join(SERVER.cors_origins)}")

    yield

    logger.info("Shutting down...")
    get_engine().dispose()


# =============================================================================
# Exception Handlers
# =============================================================================

async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Schema validation failures -> 400 with per-field details."""
    details = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        details.append({"field": ".".join(loc), "message": error.get("msg", "Invalid value")})
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Validation failed", "details": details},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def platform_exception_handler(request: Request, exc: PlatformException):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    content = {"error": "Internal server error"}
    if SERVER.debug:
        content["message"] = str(exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


# =============================================================================
# Application Factory
# =============================================================================

def create_app() -> FastAPI:
    app = FastAPI(
        title="Chatbot Platform API",
        description="Multi-tenant chatbot projects with a streaming chat relay",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=SERVER.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(PlatformException, platform_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    for router in ALL_ROUTERS:
        app.include_router(router)

    @app.get("/api/health", tags=["System"])
    async def health_check():
        """Liveness plus database reachability."""
        try:
            with get_engine().connect() as conn:
                conn.execute(text("SELECT 1"))
            database = "connected"
        except SQLAlchemyError as e:
            logger.warning(f"Health check database probe failed: {e}")
            database = "disconnected"

        return {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "database": database,
        }

    return app


app = create_app()

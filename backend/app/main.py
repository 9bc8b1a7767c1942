"""
ScriptFlow - FastAPI Application

Main entry point for the backend API.
Provides endpoints for the idea inbox, script pipeline, reviews, billing
and the Stripe/Clerk webhooks.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config.settings import settings
from app.infrastructure.exceptions import (
    ScriptFlowError,
    ValidationError,
    NotFoundError,
    DuplicateError,
    ConflictError,
)

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    # Startup
    logger.info(f"ScriptFlow Backend starting in {settings.environment} mode...")

    if settings.database_url:
        try:
            from app.infrastructure.db.database import init_db
            await init_db()
            logger.info("SQLModel database connection pool initialized")
        except Exception as e:
            logger.warning(f"SQLModel database initialization skipped: {e}")

    yield

    # Shutdown
    if settings.database_url:
        try:
            from app.infrastructure.db.database import close_db
            await close_db()
            logger.info("SQLModel database connection pool closed")
        except Exception as e:
            logger.warning(f"SQLModel database shutdown error: {e}")

    logger.info("ScriptFlow Backend shutting down...")


app = FastAPI(
    title="ScriptFlow",
    description="Content pipeline manager for solo video creators",
    version="1.0.0",
    lifespan=lifespan,
    debug=settings.debug,
)

# CORS configuration from Settings
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# Exception Handlers
# ============================================================================

@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    """Handle validation errors."""
    return JSONResponse(
        status_code=400,
        content=exc.to_dict(),
    )


@app.exception_handler(NotFoundError)
async def not_found_error_handler(request: Request, exc: NotFoundError):
    """Handle not found errors."""
    return JSONResponse(
        status_code=404,
        content=exc.to_dict(),
    )


@app.exception_handler(DuplicateError)
@app.exception_handler(ConflictError)
async def conflict_error_handler(request: Request, exc: ScriptFlowError):
    """Handle duplicates and state conflicts."""
    return JSONResponse(
        status_code=409,
        content=exc.to_dict(),
    )


@app.exception_handler(ScriptFlowError)
async def general_error_handler(request: Request, exc: ScriptFlowError):
    """Handle all other application errors."""
    logger.error(f"Unhandled application error: {exc.message}")
    return JSONResponse(
        status_code=500,
        content=exc.to_dict(),
    )


# ============================================================================
# Health Check
# ============================================================================

@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "scriptflow"}


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "ScriptFlow API",
        "version": "1.0.0",
        "docs": "/docs",
    }


# ============================================================================
# Import and register routers
# ============================================================================

from app.api.routes import billing, ideas, pipeline, reviews, scripts, webhooks  # noqa: E402
from app.api.routes import settings as settings_routes  # noqa: E402

app.include_router(ideas.router, prefix="/api", tags=["Ideas"])
app.include_router(scripts.router, prefix="/api", tags=["Scripts"])
app.include_router(pipeline.router, prefix="/api", tags=["Pipeline"])
app.include_router(reviews.router, prefix="/api", tags=["Reviews"])
app.include_router(settings_routes.router, prefix="/api", tags=["Settings"])
app.include_router(billing.router, prefix="/api", tags=["Billing"])
app.include_router(webhooks.router, prefix="/api", tags=["Webhooks"])

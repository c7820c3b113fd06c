"""
Tender Evaluation - FastAPI Application

Main API server for tender setup, bidder evaluation and comparison.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from config.settings import settings
from config.logging_config import setup_logging
from database.connection import init_db, close_db, check_db
from api.auth.router import router as auth_router
from api.routes.profile import router as profile_router
from api.routes.items import router as items_router
from api.routes.projects import router as projects_router
from api.routes.tenders import router as tenders_router
from api.routes.bidders import router as bidders_router
from api.routes.evaluations import router as evaluations_router
from api.routes.comparison import router as comparison_router
from api.routes.jobs import router as jobs_router
from api.routes.copilot import router as copilot_router
from api.middleware.error_handler import setup_error_handlers
from api.middleware.logging import LoggingMiddleware
from api.middleware.rate_limit import setup_rate_limiting
from workers.queue import close_redis_pool

# Set up logging
logger = setup_logging(log_level="INFO")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle management."""
    logger.info("Starting Tender Evaluation API...")
    logger.info(f"Environment: {settings.api_env}")
    logger.info(f"Evaluator backend: {settings.evaluator_backend.value}")

    if settings.database_auto_create:
        await init_db()

    yield

    # Shutdown: Close connections
    await close_redis_pool()
    await close_db()

    logger.info("Shutting down Tender Evaluation API...")


# Create FastAPI app
app = FastAPI(
    title="Tender Evaluation API",
    description="Weighted, category-based evaluation of construction tender bids",
    version="1.0.0",
    lifespan=lifespan
)

# Set up error handlers (before middleware)
setup_error_handlers(app)

# Set up rate limiting
setup_rate_limiting(app)

# Add logging middleware
app.add_middleware(LoggingMiddleware)

# Configure CORS (should be last middleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ============================================================================
# API Routes
# ============================================================================

for router in (
    auth_router,
    profile_router,
    items_router,
    projects_router,
    tenders_router,
    bidders_router,
    evaluations_router,
    comparison_router,
    jobs_router,
    copilot_router,
):
    app.include_router(router, prefix="/api")

# Uploaded documents are served from here; FileStorage builds the public URLs
app.mount("/files", StaticFiles(directory=settings.documents_dir), name="files")


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Tender Evaluation API",
        "version": "1.0.0",
        "status": "running",
        "environment": settings.api_env,
        "evaluator": settings.evaluator_backend.value,
        "docs": "/docs"
    }


@app.get("/health")
async def health():
    """Health check endpoint. Reports degraded when the database is unreachable."""
    database_ok = await check_db()
    return {
        "status": "healthy" if database_ok else "degraded",
        "database": "ok" if database_ok else "unreachable",
        "environment": settings.api_env
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True
    )

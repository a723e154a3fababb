"""
RFP Manager - FastAPI Application

Tracks RFP requirements, drafts and attachments, runs the rule-based
compliance check and exports the submission package.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.settings import settings
from config.logging_config import setup_logging
from api.routes import compliance, rfps, submissions
from api.middleware.error_handler import setup_error_handlers
from api.middleware.logging import LoggingMiddleware
from api.middleware.rate_limit import setup_rate_limiting
from database.connection import init_db, close_db

API_VERSION = "1.0.0"
API_PREFIX = "/api/v1"

logger = setup_logging(log_level=settings.log_level, log_to_file=settings.log_to_file)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting RFP Manager API {API_VERSION} ({settings.api_env})")
    if settings.database_auto_create:
        await init_db()
        logger.info("Database tables ensured")

    yield

    await close_db()
    logger.info("RFP Manager API stopped")


app = FastAPI(
    title="RFP Manager API",
    description="RFP response tracking, compliance checking and submission export",
    version=API_VERSION,
    lifespan=lifespan
)

setup_error_handlers(app)
setup_rate_limiting(app)
app.add_middleware(LoggingMiddleware)

# Added last so it wraps everything, including error responses
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for module in (rfps, compliance, submissions):
    app.include_router(module.router, prefix=API_PREFIX)


@app.get("/")
async def root():
    return {
        "name": "RFP Manager API",
        "version": API_VERSION,
        "environment": settings.api_env,
        "docs": "/docs"
    }


@app.get("/health")
async def health():
    """Liveness check."""
    return {
        "ok": True,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": settings.service_name
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_env == "development"
    )

"""FastAPI application entry point."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .middlewares import error_handling_middleware, logging_middleware
from .routers import aircraft, health, scoring

# Get settings
settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Scoring service for flight information extraction",
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add custom middlewares
app.middleware("http")(logging_middleware)
app.middleware("http")(error_handling_middleware)

# Include routers
app.include_router(health.router)
app.include_router(scoring.router)
app.include_router(aircraft.router)


@app.on_event("startup")
async def startup_event():
    """Run on application startup."""
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Scoring policy: {settings.scoring_policy_path or 'built-in defaults'}")


@app.on_event("shutdown")
async def shutdown_event():
    """Run on application shutdown."""
    logger.info("Shutting down application")


def main():
    """Entry point for running the application."""
    import uvicorn

    uvicorn.run(
        "flight_eval.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=(settings.environment == "development"),
        workers=settings.api_workers if settings.environment != "development" else 1,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()

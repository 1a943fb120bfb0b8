"""
Study Tracker Server - Main Application Entry Point
Progress, timeline and calendar layout for entrance-exam preparation
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from loguru import logger
import sys
import time

from app.config import get_settings
from app.routes import timeline, calendar, progress, stats, schedules
from app.database import init_supabase


# Configure loguru - show DEBUG level for verbose logging
logger.remove()
logger.add(
    sys.stdout,
    colorize=True,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
    level="DEBUG"
)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log all incoming requests"""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        origin = request.headers.get("origin", "no-origin")
        logger.info(f"[REQUEST] {request.method} {request.url.path} - Origin: {origin}")

        response = await call_next(request)

        process_time = (time.time() - start_time) * 1000
        logger.info(f"[RESPONSE] {request.method} {request.url.path} - Status: {response.status_code} - Time: {process_time:.2f}ms")

        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    logger.info("Starting Study Tracker Server...")

    init_supabase()
    logger.info("Supabase client initialized")

    yield

    logger.info("Shutting down Study Tracker Server...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application"""
    settings = get_settings()

    logger.info("=" * 60)
    logger.info("=== STUDY TRACKER API STARTING ===")
    logger.info(f"Environment: {settings.app_env}")
    logger.info(f"Debug Mode: {settings.debug}")
    logger.info("=" * 60)

    app = FastAPI(
        title="Study Tracker API",
        description="Study progress, exam timeline and calendar layout for entrance-exam preparation.",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(RequestLoggingMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    logger.info(f"[CORS] Allowed origins: {', '.join(settings.cors_origins_list)}")

    logger.info("[ROUTES] Registering API routes...")
    app.include_router(timeline.router, prefix="/api", tags=["Timeline"])
    app.include_router(calendar.router, prefix="/api/calendar", tags=["Calendar"])
    app.include_router(progress.router, prefix="/api/progress", tags=["Progress"])
    app.include_router(stats.router, prefix="/api/logs", tags=["Statistics"])
    app.include_router(schedules.router, prefix="/api/schedules", tags=["Schedules"])
    logger.info("[ROUTES] All routes registered")

    @app.get("/", tags=["Health"])
    async def root():
        """Health check endpoint"""
        return {
            "service": "Study Tracker API",
            "status": "operational"
        }

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Detailed health check"""
        return {
            "status": "healthy",
            "environment": settings.app_env,
            "version": "1.0.0"
        }

    logger.info("=== STUDY TRACKER API READY ===")
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )

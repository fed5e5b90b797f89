"""
storefront/main.py

Purpose: Application entry point

- Builds the FastAPI app (create_app)
- Loads configuration and logging
- Refuses to start without Razorpay credentials
- Opens the store and gateway client on startup, closes them on shutdown
- Registers API routes and serves the static frontend
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional
import time

from storefront.core.config import Settings, settings as default_settings, validate_settings
from storefront.core.errors import add_exception_handlers
from storefront.core.logging import setup_logging, get_logger
from storefront.db.store import Store, build_store
from storefront.services.razorpay_service import RazorpayClient
from storefront.api import account, auth, export, payments

APP_VERSION = "1.0.0"

logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[Store] = None,
    gateway: Optional[RazorpayClient] = None,
) -> FastAPI:
    """
    Builds the application. ``store`` and ``gateway`` replace the ones
    that would otherwise be built from settings at startup.
    """
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("🚀 Starting storefront application...")

        try:
            validate_settings(settings)
            logger.info("✅ Configuration validated")

            app.state.store = store or build_store(settings)
            await app.state.store.connect()
            logger.info(f"✅ Store ready ({type(app.state.store).__name__})")

            app.state.gateway = gateway or RazorpayClient.from_settings(settings)
            logger.info("✅ Razorpay client ready")

        except Exception as e:
            logger.critical(f"Failed to start application: {str(e)}", exc_info=True)
            raise

        yield

        logger.info("🛑 Shutting down storefront application...")
        try:
            await app.state.gateway.close()
            await app.state.store.close()
            logger.info("👋 Storefront application shut down")
        except Exception as e:
            logger.error(f"Error during shutdown: {str(e)}", exc_info=True)

    app = FastAPI(
        title="Storefront - Prepaid Balance API",
        description="Registration, Razorpay top-ups and balance-funded purchases",
        version=APP_VERSION,
        lifespan=lifespan,
        debug=settings.DEBUG,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        """Add processing time header to all responses."""
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)

        if process_time > 5.0:
            logger.warning(f"Slow request detected: {request.method} {request.url.path} ({process_time:.2f}s)")

        return response

    add_exception_handlers(app, settings)

    app.include_router(auth.router)
    app.include_router(account.router)
    app.include_router(payments.router)
    app.include_router(export.router)

    static_dir = Path(settings.STATIC_DIR) if settings.STATIC_DIR else None
    index_file = static_dir / "index.html" if static_dir else None

    @app.get("/", tags=["Health"], include_in_schema=False)
    async def root():
        """Frontend entry page, or basic service info when no frontend is deployed."""
        if index_file and index_file.is_file():
            return FileResponse(index_file)
        return {
            "name": "Storefront API",
            "version": APP_VERSION,
            "status": "running",
            "environment": settings.ENVIRONMENT
        }

    @app.get("/health", tags=["Health"])
    async def health_check(request: Request):
        """
        Store connectivity check.
        """
        healthy = await request.app.state.store.is_healthy()
        return JSONResponse(
            status_code=200 if healthy else 503,
            content={
                "status": "healthy" if healthy else "unhealthy",
                "timestamp": time.time(),
                "environment": settings.ENVIRONMENT,
                "version": APP_VERSION,
                "checks": {"store": "healthy" if healthy else "unhealthy"}
            }
        )

    @app.get("/live", tags=["Health"])
    async def liveness_check():
        return {"status": "alive"}

    # Mounted last so API routes take precedence
    if static_dir and static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir), name="static")

    return app


setup_logging()
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "storefront.main:app",
        host="0.0.0.0",
        port=default_settings.PORT,
        reload=default_settings.is_development,
        log_level=default_settings.LOG_LEVEL.lower()
    )

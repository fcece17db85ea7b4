# alerte_meteo/main.py
# ------------------------------------------------------------
# FastAPI entrypoint for the weather alert service.
#
# Responsibilities:
# - App initialization & middleware
# - Error envelope ({"ok": false, "error": ...}) for every failure
# - Route registration
# - Optional static front-end (public page + admin page)
# ------------------------------------------------------------

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
import structlog

from .config import settings
from .errors import AlertError, StoreError
from .log_setup import setup_logging
from .routes import alert, health, session, wilayas
from .routes._common import envelope

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "alert service starting",
        store=settings.store_backend,
        environment=settings.environment,
    )
    if not settings.admin_user or not settings.admin_pass:
        logger.warning("ADMIN_USER/ADMIN_PASS not set, admin login disabled")
    yield
    logger.info("alert service stopped")


def create_app() -> FastAPI:
    # --------------------------------------------------------
    # FastAPI application instance
    # --------------------------------------------------------
    app = FastAPI(
        title="Alerte Météo API",
        version="0.1.0",
        description="Current weather alert: public read, admin publish",
        lifespan=lifespan,
    )

    # --------------------------------------------------------
    # CORS configuration
    # Credentials allowed: the admin cookie must travel
    # --------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_list(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --------------------------------------------------------
    # Error envelope
    # --------------------------------------------------------
    @app.exception_handler(AlertError)
    async def alert_error_handler(request: Request, exc: AlertError):
        if isinstance(exc, StoreError):
            logger.error("store failure", method=request.method, path=request.url.path, error=str(exc))
        else:
            logger.info(
                "request rejected",
                method=request.method,
                path=request.url.path,
                reason=type(exc).__name__,
            )
        return JSONResponse(
            status_code=exc.status_code,
            content=envelope(False, exc.public_message),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("unhandled exception", method=request.method, path=request.url.path)
        return JSONResponse(
            status_code=500,
            content=envelope(False, "Erreur serveur"),
        )

    # --------------------------------------------------------
    # API routes
    # --------------------------------------------------------
    app.include_router(alert.router)
    app.include_router(session.router)
    app.include_router(wilayas.router)
    app.include_router(health.router)

    # --------------------------------------------------------
    # Static front-end (index.html / admin.html), mounted last so
    # it never shadows /api/*
    # --------------------------------------------------------
    if settings.static_dir:
        static_path = Path(settings.static_dir)
        if static_path.is_dir():
            admin_page = static_path / "admin.html"

            @app.get("/admin", include_in_schema=False)
            def admin_page_route():
                return FileResponse(admin_page)

            app.mount("/", StaticFiles(directory=static_path, html=True), name="static")
        else:
            logger.warning("static_dir not found, skipping", path=str(static_path))

    return app


setup_logging()
app = create_app()

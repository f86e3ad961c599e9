"""FastAPI application for the VidForge back end"""

import os
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from vidforge.app import VidForgeApp
from vidforge.utils.exceptions import VidForgeError
from vidforge.utils.logger import get_logger

from .api import router as api_router
from .auth_routes import router as auth_router
from .generate_routes import router as generate_router
from .history_routes import router as history_router

logger = get_logger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


def register_exception_handlers(app: FastAPI) -> None:
    """Every failure is rendered as {"success": false, "error": "..."}"""

    @app.exception_handler(VidForgeError)
    async def vidforge_error_handler(request: Request, exc: VidForgeError):
        if exc.status_code >= 500:
            logger.error("Request failed", path=request.url.path, error=exc.message)
        else:
            logger.info("Request rejected", path=request.url.path, status_code=exc.status_code, error=exc.message)
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.info("Malformed request", path=request.url.path, errors=len(exc.errors()))
        return _error(400, "Invalid request body or parameters")

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error", path=request.url.path, error=str(exc))
        return _error(500, "Internal server error")


def create_app(vidforge_app: Optional[VidForgeApp] = None) -> FastAPI:
    """Build the FastAPI app around a VidForge container"""
    container = vidforge_app or VidForgeApp()

    app = FastAPI(
        title="VidForge",
        description="AI video generation demo API",
        version="1.0.0",
    )
    app.state.vidforge = container

    # CORS middleware - configurable for production
    cors_origins = os.getenv("CORS_ORIGINS")
    origins = [o.strip() for o in cors_origins.split(",") if o.strip()] if cors_origins else ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(api_router)
    app.include_router(auth_router)
    app.include_router(generate_router)
    app.include_router(history_router)

    @app.on_event("startup")
    async def startup_event():
        """Seed demo data and start the session sweeper"""
        try:
            container.initialize()
            container.start_background()
        except Exception as e:
            logger.exception("Critical error during startup", error=str(e))
            raise

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("Shutdown event triggered - stopping background services")
        container.shutdown()

    return app


app = create_app()

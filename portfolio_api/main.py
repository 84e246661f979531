import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Config, get_config
from .database.database import create_tables
from .models import blog, contact, project, service, skill, user  # noqa: F401  register all models
from .routers import auth, contact as contact_routes, portfolio
from .routers import blog as blog_routes
from .utils.errors import AppError, ValidationFailed, format_validation_errors
from .utils.storage import ObjectStorage, build_storage

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI):
    """Every error leaves the API as a JSON envelope, never a framework page."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_content())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        error = ValidationFailed(format_validation_errors(exc.errors()))
        return JSONResponse(status_code=error.status_code, content=error.to_content())

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": message},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": "Internal server error", "code": "server_error"},
        )


def create_app(config: Optional[Config] = None, storage: Optional[ObjectStorage] = None) -> FastAPI:
    config = config or get_config()
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        create_tables()
        yield

    app = FastAPI(title="Portfolio API", version="1.0.0", lifespan=lifespan)
    app.state.config = config
    app.state.storage = storage if storage is not None else build_storage(config)

    # Configuration CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(portfolio.router)
    app.include_router(portfolio.cms_router)
    app.include_router(contact_routes.router)
    app.include_router(contact_routes.cms_router)
    app.include_router(blog_routes.router)
    app.include_router(blog_routes.uploads_router)
    app.include_router(blog_routes.cms_router)

    @app.get("/api/health", tags=["health"])
    def health():
        return {"success": True, "storage": app.state.storage.backend}

    return app


app = create_app()

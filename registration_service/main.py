from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.exc import IntegrityError
from starlette.middleware.base import BaseHTTPMiddleware

from registration_service.api.v1.routes.api import router as api_router
from registration_service.api.v1.routes.registration import router as registration_router

from registration_service.core.config import (
    PROJECT_NAME,
    VERSION,
    DESCRIPTION,
    DEBUG,
    DOCS_URL,
    API_PREFIX,
)
from registration_service.core.events import create_start_app_handler, create_stop_app_handler
from registration_service.core.exceptions import ServiceError
from registration_service.core.middleware.debug_middleware import debug_middleware


def error_response(status_code: int, category: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"category": category, "message": message})


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    log = logger.warning if exc.status_code < 500 else logger.error
    log(f"{exc.status_code} {exc.category} on {request.method} {request.url.path}: {exc.message}")
    return error_response(exc.status_code, exc.category, exc.message)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}"
        for err in exc.errors()
    )
    logger.warning(f"400 BAD_REQUEST on {request.method} {request.url.path}: {message}")
    return error_response(status.HTTP_400_BAD_REQUEST, "BAD_REQUEST", message)


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.error(f"409 CONFLICT on {request.method} {request.url.path}: {exc.orig}")
    return error_response(status.HTTP_409_CONFLICT, "CONFLICT", str(exc.orig))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"500 on {request.method} {request.url.path}: {exc!r}")
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_SERVER_ERROR", str(exc))


@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_start_app_handler(app)()
    yield
    await create_stop_app_handler(app)()


def get_application() -> FastAPI:
    app = FastAPI(
        title=PROJECT_NAME,
        debug=DEBUG,
        version=VERSION,
        description=DESCRIPTION,
        docs_url=DOCS_URL,
        lifespan=lifespan,
    )

    # Public health endpoint
    app.include_router(api_router, prefix=API_PREFIX)

    # Registration endpoints
    app.include_router(registration_router, prefix=f"{API_PREFIX}/registrations")

    # Errors are rendered as {"category": ..., "message": ...}
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    if DEBUG:
        app.add_middleware(BaseHTTPMiddleware, dispatch=debug_middleware)

    return app


app = get_application()

"""FastAPI application entry point.

`create_app()` accepts a prebuilt service container and an optional
authorization check so tests and embedding applications can supply their
own; the module-level `app` is wired from settings for `fastapi run`.
"""

from contextlib import asynccontextmanager
import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from sqlalchemy.exc import SQLAlchemyError
from structlog import contextvars

from localization.api.deps import AuthCheck
from localization.api.main import api_router
from localization.container import Services, build_services
from localization.core.config import settings
from localization.core.exceptions import AppException
from localization.core.logging import get_logger, setup_logging

setup_logging()
logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def custom_generate_unique_id(route: APIRoute) -> str:
    """Operation ids of the form {tag}-{route_name} for generated clients."""
    if route.tags:
        return f"{route.tags[0]}-{route.name}"
    return route.name


@asynccontextmanager
async def lifespan(app: FastAPI):
    services: Services = app.state.services
    logger.info(
        "application_startup",
        environment=settings.ENVIRONMENT,
        translator_endpoint=settings.TRANSLATOR_ENDPOINT,
    )

    try:
        services.translator.load_config()
    except SQLAlchemyError as e:
        # Not fatal: the client loads credentials again on first use.
        logger.warning(
            "translator_config_load_failed",
            error=str(e),
            error_type=type(e).__name__,
        )

    yield

    # Let in-flight fan-out jobs finish before the HTTP client closes.
    await services.aclose()
    logger.info("application_shutdown")


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Render every AppException as {error_code, message, details}."""
    logger.warning(
        "app_exception",
        error_code=exc.error_code,
        message=exc.message,
        status_code=exc.status_code,
        details=exc.details,
        path=request.url.path,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def bind_request_id(request: Request, call_next):
    """Tag every log line of the request, and the response, with its id."""
    request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
    contextvars.clear_contextvars()
    contextvars.bind_contextvars(request_id=request_id, path=request.url.path)

    response = await call_next(request)
    response.headers[REQUEST_ID_HEADER] = request_id
    return response


def _add_cors(app: FastAPI) -> None:
    if not settings.all_cors_origins:
        return
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.all_cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", REQUEST_ID_HEADER, "Accept"],
        expose_headers=[REQUEST_ID_HEADER],
    )
    logger.info("cors_configured", origins=settings.all_cors_origins)


def create_app(
    services: Services | None = None,
    auth_check: AuthCheck | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        services: Prebuilt service container; built from settings when omitted
        auth_check: Callable deciding whether a request may reach the API
            routes. Without one every request is permitted.
    """
    app = FastAPI(
        title=settings.PROJECT_NAME,
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        docs_url=f"{settings.API_V1_STR}/docs",
        redoc_url=f"{settings.API_V1_STR}/redoc",
        lifespan=lifespan,
        generate_unique_id_function=custom_generate_unique_id,
    )
    app.state.services = services or build_services()
    app.state.auth_check = auth_check

    app.add_exception_handler(AppException, app_exception_handler)  # type: ignore[arg-type]
    app.middleware("http")(bind_request_id)
    _add_cors(app)

    app.include_router(api_router, prefix=settings.API_V1_STR)

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "ok", "service": settings.PROJECT_NAME}

    return app


app = create_app()

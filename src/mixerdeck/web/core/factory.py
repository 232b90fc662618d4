"""Application factory for creating FastAPI application with dependency injection."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mixerdeck.web.core.container import Container
from mixerdeck.web.core.lifespan import lifespan
from mixerdeck.web.middleware.request_logging import StructuredRequestLoggingMiddleware
from mixerdeck.web.models.audio import ErrorResponse
from mixerdeck.web.routers import audio_api_routes, health_api_routes, settings_api_routes


def _describe_validation_error(exc: RequestValidationError) -> str:
    """Summarize the first validation failure as ``field: message``."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Answer malformed requests with a 400 error envelope."""
    envelope = ErrorResponse(success=False, error=_describe_validation_error(exc))
    return JSONResponse(status_code=400, content=envelope.model_dump(mode="json", by_alias=True))


def create_app() -> FastAPI:
    """Create FastAPI application with dependency injection.

    Returns:
        FastAPI: The configured application instance.
    """
    container = Container()

    app = FastAPI(
        lifespan=lifespan,
        title="MixerDeck API",
        description="Volume and mute control for Windows audio devices and applications",
        version="1.0.0",
    )

    # Wildcard CORS for controllers on the local network
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # nosemgrep
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(StructuredRequestLoggingMiddleware)

    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    container.wire(
        modules=[
            "mixerdeck.web.routers.audio_api_routes",
            "mixerdeck.web.routers.health_api_routes",
            "mixerdeck.web.routers.settings_api_routes",
        ]
    )

    app.include_router(audio_api_routes.router, prefix="/api", tags=["Audio API"])
    app.include_router(settings_api_routes.router, prefix="/api", tags=["Settings API"])
    app.include_router(health_api_routes.router, prefix="/api", tags=["Health Check API"])

    app.container = container  # type: ignore[attr-defined]

    return app

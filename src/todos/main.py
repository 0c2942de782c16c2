import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .errors import TodoException
from .repositories import StoreRepository
from .routers import todos as todos_router
from .services import Service, TodosService
from .settings import Settings, get_settings
from .store import get_record_store

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {
        "name": "todos",
        "description": "CRUD operations for Todo items, scoped by owner email.",
    },
]


def _jsonable_errors(exc: RequestValidationError) -> list:
    # Pydantic error contexts may hold exception instances that JSON cannot encode.
    return [{k: v for k, v in err.items() if k != "ctx"} for err in exc.errors()]


# PUBLIC_INTERFACE
def build_service(settings: Settings) -> Service:
    """Wire settings -> record store -> repository -> service."""
    store = get_record_store(settings)
    return TodosService(StoreRepository(store))


# PUBLIC_INTERFACE
def create_app(service: Optional[Service] = None, settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        service: Service to expose; built from settings when omitted.
        settings: Settings to use; read from the environment when omitted.
    """
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level)

    app = FastAPI(
        title="Todos Backend",
        description="Backend API service for managing owner-scoped todos stored in Redis.",
        version="0.1.0",
        openapi_tags=openapi_tags,
    )
    app.state.settings = settings
    app.state.service = service if service is not None else build_service(settings)

    # Configure CORS based on settings (.env -> CORS_ALLOW_ORIGINS), with '*' fallback
    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """
        Return a consistent JSON structure for malformed request bodies.

        Response format:
            {
                "error": "invalid request",
                "detail": [... pydantic/fastapi error details ...]
            }
        """
        return JSONResponse(
            status_code=400,
            content={"error": "invalid request", "detail": _jsonable_errors(exc)},
        )

    @app.exception_handler(TodoException)
    async def todo_exception_handler(request: Request, exc: TodoException) -> JSONResponse:
        status_code = todos_router.status_code_for(exc)
        if status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=status_code, content=exc.to_json())

    # PUBLIC_INTERFACE
    @app.get("/", summary="Health Check", tags=["health"])
    def health_check():
        """
        Health check endpoint.

        Returns:
            A JSON object indicating service health.
        """
        return {"message": "Healthy", "backend": settings.store_backend}

    app.include_router(todos_router.router)
    return app


# PUBLIC_INTERFACE
def run() -> None:
    """Serve the application with uvicorn on the configured port."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(create_app(settings=settings), host="0.0.0.0", port=settings.port)


app = create_app()


if __name__ == "__main__":
    run()

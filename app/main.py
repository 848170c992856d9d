from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from contextlib import asynccontextmanager
from typing import Optional
import logging

from app.config import Settings, get_settings
from app.database import STORE_FAILURES, Database
from app.exceptions import (
    AccessDenied,
    ProgressNotFound,
    ReviewApiError,
    StoreError,
    ValidationError,
)
from app.logging_config import setup_logging
from app.services.auth_service import get_verifier

# Import routers
from app.routes import auth, progress

logger = logging.getLogger(__name__)

ERROR_STATUS = [
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (AccessDenied, status.HTTP_400_BAD_REQUEST),
    (ProgressNotFound, status.HTTP_404_NOT_FOUND),
    (StoreError, status.HTTP_500_INTERNAL_SERVER_ERROR),
]


async def review_api_error_handler(request: Request, exc: ReviewApiError):
    for error_type, status_code in ERROR_STATUS:
        if isinstance(exc, error_type):
            break
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    message = exc.message
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        message = f"An internal server error occurred. Error: {exc.message}"
    return JSONResponse(status_code=status_code, content={"message": message})


async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Invalid data.", "errors": jsonable_errors(exc)},
    )


def jsonable_errors(exc: RequestValidationError):
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", "")}
        for error in exc.errors()
    ]


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup: connect to the database, refuse to serve without it
        setup_logging(settings.LOG_LEVEL)
        database = Database(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
        try:
            await database.connect()
        except ReviewApiError:
            await database.dispose()
            raise
        app.state.database = database
        app.state.verifier = get_verifier(settings.PASSWORD_SCHEME)
        logger.info("Database initialized")
        logger.info("%s v%s started", settings.APP_NAME, settings.API_VERSION)
        yield
        # Shutdown
        logger.info("Shutting down...")
        await database.dispose()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.API_VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ReviewApiError, review_api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)

    # Include routers
    app.include_router(progress.router)  # save / reviews
    app.include_router(auth.router)      # login

    @app.get("/hello", response_class=PlainTextResponse)
    async def hello():
        return f"Hello World! v{settings.API_VERSION}"

    # Health check for API
    @app.get("/api/health")
    async def health_check(request: Request):
        try:
            await request.app.state.database.ping()
        except STORE_FAILURES + (OSError,) as e:
            logger.error("Health check failed: %s", e)
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "unavailable"},
            )
        return {"status": "healthy"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)

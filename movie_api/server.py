"""
Primary FastAPI application entry point
"""
import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from movie_api.core.config import settings
from movie_api.core.logging_config import get_access_logger, setup_logging
from movie_api.api.deps import close_connections, initialize_connections
from movie_api.api.api import api_router

setup_logging(level=settings.LOG_LEVEL, access_log_file=settings.ACCESS_LOG_FILE)
logger = logging.getLogger(__name__)
access_logger = get_access_logger()
logger.info("Starting myFlix API server...")

WELCOME_MESSAGE = "Welcome to the best movie search app ever!(Maybe😁)"


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Application startup: Initializing connections...")
    await initialize_connections()
    yield
    # Shutdown
    logger.info("Application shutdown: Closing connections...")
    await close_connections()


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start) * 1000
    client_host = request.client.host if request.client else "-"
    access_logger.info(
        f'{client_host} "{request.method} {request.url.path}" {response.status_code} {elapsed_ms:.1f}ms'
    )
    return response


def _validation_message(error: dict) -> str:
    # Field validators raise ValueError(<message>); surface the bare message
    if error.get("type") == "value_error":
        return str((error.get("ctx") or {}).get("error", error.get("msg")))
    field = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
    return f"{field}: {error.get('msg')}" if field else str(error.get("msg"))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    messages = [_validation_message(error) for error in exc.errors()]
    for message in messages:
        logger.error(f"Validation error on {request.method} {request.url.path}: {message}")
    return JSONResponse(
        status_code=422,
        content=jsonable_encoder({"errors": messages}),
    )


app.include_router(api_router)


@app.get("/", response_class=PlainTextResponse, status_code=status.HTTP_200_OK)
async def root():
    """Root endpoint to confirm the API is running."""
    return WELCOME_MESSAGE


if __name__ == "__main__":
    import uvicorn
    logger.info(f"Listening on Port {settings.PORT}")
    uvicorn.run("movie_api.server:app", host=settings.HOST, port=settings.PORT)

"""FastAPI application entry point."""

import os
import logging
import tomllib
from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from dotenv import load_dotenv

# Load environment variables from .env file
# Must be called before importing modules that read env vars (like api.security)
load_dotenv()

from api.routes import auth, health
from api.routes.auth import error_response, failure_message_for, internal_error_response
from utils.logging import setup_structured_logging
from adapter.mongodb.connection import get_connection
from adapter.mongodb.indexes import ensure_all_indexes
from domain.model.errors import StoreUnavailableError

# Set up structured JSON logging
setup_structured_logging()

logger = logging.getLogger(__name__)

# Read version from pyproject.toml (single source of truth)
# main.py is at <root>/src/api/main.py
_project_root = Path(__file__).parent.parent.parent
with open(_project_root / "pyproject.toml", "rb") as f:
    VERSION = tomllib.load(f)["project"]["version"]

SERVICE_NAME = "Okobo Bank API"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: connect and ensure indexes, then close on shutdown."""
    connection = get_connection()
    try:
        if ensure_all_indexes(connection.get_database()):
            logger.info("MongoDB indexes verified/created successfully")
        else:
            logger.warning("Failed to create some MongoDB indexes")
    except StoreUnavailableError:
        logger.warning("MongoDB unavailable, skipping index creation")

    yield  # App runs here

    connection.close()


app = FastAPI(
    title=SERVICE_NAME,
    description="Signup, signin and session API for the Okobo Bank demo",
    version=VERSION,
    lifespan=lifespan,
)

# With JWTs sent in the Authorization header, a wildcard origin must not allow credentials
cors_origins_env = os.getenv("CORS_ORIGINS", "*")

if cors_origins_env == "*":
    cors_origins = ["*"]
    allow_credentials = False
    logger.warning(
        "CORS configured with wildcard origin ('*'). "
        "For production, set CORS_ORIGINS to specific domains (e.g., 'https://bank.example.com')"
    )
else:
    cors_origins = [origin.strip() for origin in cors_origins_env.split(",")]
    allow_credentials = True
    logger.info(f"CORS configured with specific origins: {cors_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Bodies that do not parse into the request model get the 400 envelope."""
    logger.info("Malformed request body", extra={"path": request.url.path, "errors": exc.errors()})
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        "Invalid request",
        "Please check your input and try again",
    )


@app.exception_handler(StoreUnavailableError)
async def store_unavailable_handler(request: Request, exc: StoreUnavailableError):
    logger.error("Database unavailable", extra={"path": request.url.path, "error": str(exc)})
    return internal_error_response(failure_message_for(request.url.path))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Router 404/405 and dependency 401s use the same envelope as the routes."""
    response = error_response(exc.status_code, str(exc.detail), str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


# Register routes
app.include_router(auth.router)
app.include_router(health.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": SERVICE_NAME,
        "version": VERSION,
        "status": "running"
    }


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    # Access logs are off; route handlers log request outcomes
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=port,
        access_log=False
    )

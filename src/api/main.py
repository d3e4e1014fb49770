"""FastAPI application entry point."""

import os
import sys
import logging
import tomllib
from pathlib import Path
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv

# Must run before importing modules that read env vars at import time
load_dotenv()

# main.py is at src/api/main.py, so src is two levels up
_src_path = Path(__file__).parent.parent
sys.path.insert(0, str(_src_path))

from api.routes import health, learning, words
from domain.model.errors import (
    CodecError,
    DomainError,
    NotFoundError,
    RepositoryError,
    ValidationError,
)
from utils.logging import setup_structured_logging

setup_structured_logging()

logger = logging.getLogger(__name__)

# Read version from pyproject.toml (single source of truth)
_project_root = _src_path.parent
with open(_project_root / "pyproject.toml", "rb") as f:
    VERSION = tomllib.load(f)["project"]["version"]

SERVICE_NAME = "Wordbook API"

app = FastAPI(
    title=SERVICE_NAME,
    description="Vocabulary memorization service - wordbook storage and review scheduling",
    version=VERSION,
)

cors_origins_env = os.getenv("CORS_ORIGINS", "*")
if cors_origins_env == "*":
    cors_origins = ["*"]
    allow_credentials = False  # Browsers reject credentials with a wildcard origin
else:
    cors_origins = [origin.strip() for origin in cors_origins_env.split(",")]
    allow_credentials = True

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


def error_status(error: DomainError) -> int:
    if isinstance(error, NotFoundError):
        return 404
    if isinstance(error, ValidationError):
        return 422
    return 500


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    """Flatten domain errors to ``{"detail", "kind"}``."""
    status_code = error_status(exc)
    detail = str(exc)
    if isinstance(exc, (CodecError, RepositoryError)):
        detail = f"{exc.kind}: {detail}"
    if status_code >= 500:
        logger.error("Request failed", extra={
            "path": request.url.path,
            "kind": exc.kind,
            "error": str(exc),
        })
    return JSONResponse(status_code=status_code, content={"detail": detail, "kind": exc.kind})


app.include_router(words.router)
app.include_router(learning.router)
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
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=port,
        access_log=False  # structured logging already covers requests
    )

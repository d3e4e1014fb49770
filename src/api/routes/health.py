"""Health check endpoint."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from api.dependencies import get_word_repo
from domain.model.errors import DomainError
from port.word_repository import WordRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health(repo: WordRepository = Depends(get_word_repo)):
    """Health check reporting whether the wordbook can be loaded."""
    health_status = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
        "services": {}
    }

    try:
        word_count = len(repo.load())
        health_status["services"]["wordbook"] = {
            "status": "healthy",
            "message": f"{word_count} words loaded"
        }
        overall_healthy = True
    except DomainError as e:
        logger.warning("Wordbook unavailable", extra={"kind": e.kind, "error": str(e)})
        health_status["services"]["wordbook"] = {
            "status": "unhealthy",
            "message": f"{e.kind}: {str(e)[:200]}"
        }
        overall_healthy = False

    if not overall_healthy:
        health_status["status"] = "degraded"

    status_code = status.HTTP_200_OK if overall_healthy else status.HTTP_503_SERVICE_UNAVAILABLE

    return JSONResponse(
        content=health_status,
        status_code=status_code
    )

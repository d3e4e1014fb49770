"""Word API routes.

Endpoints:
- GET /words: List words, optionally filtered
- GET /words/search: Substring search over headwords, translations and examples
- GET /words/{id}: Get a single word
- POST /words/{id}/progress: Record a review outcome
- POST /words/{id}/known, /words/{id}/unknown: Shortcut review outcomes
- POST /words/cache/clear: Drop the cached snapshot
"""

import logging

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_word_repo
from api.models import ErrorResponse, ProgressRequest, StatusResponse, WordResponse
from domain.model.errors import NotFoundError
from domain.model.word import WordFilter
from port.word_repository import WordRepository
from services import learning_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/words",
    tags=["words"],
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)


@router.get("", response_model=list[WordResponse])
async def list_words(
    tags: list[str] | None = Query(None, description="Match words carrying any of these tags"),
    difficulty_min: int | None = None,
    difficulty_max: int | None = None,
    mastery_min: int | None = None,
    mastery_max: int | None = None,
    progress_min: int | None = None,
    progress_max: int | None = None,
    search_text: str | None = None,
    repo: WordRepository = Depends(get_word_repo),
):
    """List words in corpus order."""
    word_filter = WordFilter(
        tags=tuple(tags) if tags else None,
        difficulty_min=difficulty_min,
        difficulty_max=difficulty_max,
        mastery_min=mastery_min,
        mastery_max=mastery_max,
        progress_min=progress_min,
        progress_max=progress_max,
        search_text=search_text,
    )
    return [WordResponse.from_domain(w) for w in repo.load(word_filter)]


@router.get("/search", response_model=list[WordResponse])
async def search_words(
    q: str = Query(..., description="Case-insensitive search text"),
    limit: int = Query(50, ge=0, le=1000),
    repo: WordRepository = Depends(get_word_repo),
):
    return [WordResponse.from_domain(w) for w in repo.search(q, limit)]


# Declared before /{word_id} routes so "cache" is never taken for an ID
@router.post("/cache/clear", response_model=StatusResponse)
async def clear_cache(repo: WordRepository = Depends(get_word_repo)):
    """Force the next read to reload the wordbook from disk."""
    repo.invalidate()
    return StatusResponse(message="Word cache cleared")


@router.get("/{word_id}", response_model=WordResponse)
async def get_word(word_id: str, repo: WordRepository = Depends(get_word_repo)):
    word = repo.get_by_id(word_id)
    if word is None:
        raise NotFoundError(f"Word {word_id} not found")
    return WordResponse.from_domain(word)


@router.post("/{word_id}/progress", response_model=StatusResponse)
async def update_word_progress(
    word_id: str,
    request: ProgressRequest,
    repo: WordRepository = Depends(get_word_repo),
):
    """Record a review outcome. Unknown IDs are accepted and ignored."""
    repo.update_progress(word_id, request.progress, request.is_correct)
    return StatusResponse(message="Progress updated")


@router.post("/{word_id}/known", response_model=StatusResponse)
async def mark_word_known(word_id: str, repo: WordRepository = Depends(get_word_repo)):
    learning_service.mark_known(repo, word_id)
    return StatusResponse(message="Word marked as known")


@router.post("/{word_id}/unknown", response_model=StatusResponse)
async def mark_word_unknown(word_id: str, repo: WordRepository = Depends(get_word_repo)):
    learning_service.mark_unknown(repo, word_id)
    return StatusResponse(message="Word marked as unknown")

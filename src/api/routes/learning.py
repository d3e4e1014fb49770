"""Learning session API routes.

Endpoints:
- GET /learning/next, /learning/previous: Navigate the recommendation list
- GET /learning/daily: Today's batch
- GET /learning/review: Words due for review
- GET /learning/stats: Aggregate statistics
- POST /learning/reset: Reset every word's progress
- GET/PUT /learning/settings: Review mode, difficulty preference, daily goal
- PUT /learning/daily-goal: Update the daily goal only
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_settings_repo, get_word_repo
from api.models import (
    DailyGoalRequest,
    ErrorResponse,
    SettingsBody,
    StatsResponse,
    StatusResponse,
    WordResponse,
)
from port.settings_repository import SettingsRepository
from port.word_repository import WordRepository
from services import learning_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/learning",
    tags=["learning"],
    responses={500: {"model": ErrorResponse}},
)


@router.get("/next", response_model=Optional[WordResponse])
async def next_word(
    current_id: str | None = Query(None, description="ID of the word currently shown"),
    repo: WordRepository = Depends(get_word_repo),
    settings_repo: SettingsRepository = Depends(get_settings_repo),
):
    """Next recommended word, or null for an empty recommendation list."""
    word = learning_service.get_next_word(repo, settings_repo, current_id)
    return WordResponse.from_domain(word) if word else None


@router.get("/previous", response_model=Optional[WordResponse])
async def previous_word(
    current_id: str | None = Query(None, description="ID of the word currently shown"),
    repo: WordRepository = Depends(get_word_repo),
    settings_repo: SettingsRepository = Depends(get_settings_repo),
):
    word = learning_service.get_previous_word(repo, settings_repo, current_id)
    return WordResponse.from_domain(word) if word else None


@router.get("/daily", response_model=list[WordResponse])
async def daily_words(
    repo: WordRepository = Depends(get_word_repo),
    settings_repo: SettingsRepository = Depends(get_settings_repo),
):
    return [WordResponse.from_domain(w) for w in learning_service.get_daily_words(repo, settings_repo)]


@router.get("/review", response_model=list[WordResponse])
async def review_words(repo: WordRepository = Depends(get_word_repo)):
    return [WordResponse.from_domain(w) for w in learning_service.get_review_words(repo)]


@router.get("/stats", response_model=StatsResponse)
async def learning_stats(
    repo: WordRepository = Depends(get_word_repo),
    settings_repo: SettingsRepository = Depends(get_settings_repo),
):
    stats = learning_service.calculate_learning_stats(repo, settings_repo)
    return StatsResponse.from_domain(stats)


@router.post("/reset", response_model=StatusResponse)
async def reset_progress(repo: WordRepository = Depends(get_word_repo)):
    learning_service.reset_all_progress(repo)
    logger.info("Learning progress reset via API")
    return StatusResponse(message="All progress reset")


@router.get("/settings", response_model=SettingsBody)
async def get_settings(settings_repo: SettingsRepository = Depends(get_settings_repo)):
    return SettingsBody.from_domain(settings_repo.get())


@router.put("/settings", response_model=SettingsBody)
async def update_settings(
    request: SettingsBody,
    settings_repo: SettingsRepository = Depends(get_settings_repo),
):
    settings = request.to_domain()
    settings_repo.save(settings)
    logger.info("Learning settings updated", extra=settings.to_dict())
    return SettingsBody.from_domain(settings)


@router.put("/daily-goal", response_model=SettingsBody)
async def update_daily_goal(
    request: DailyGoalRequest,
    settings_repo: SettingsRepository = Depends(get_settings_repo),
):
    settings = learning_service.update_daily_goal(settings_repo, request.daily_goal)
    return SettingsBody.from_domain(settings)

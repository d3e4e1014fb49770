"""JSON file implementation of SettingsRepository."""

import json
import os
from logging import getLogger
from pathlib import Path
from threading import Lock

from adapter.filesystem.config import APP_NAME, WORDBOOK_DATA_DIR, WORDBOOK_SETTINGS_FILE
from domain.model.errors import PersistError
from domain.model.settings import (
    DEFAULT_DAILY_GOAL,
    MAX_DAILY_GOAL,
    MIN_DAILY_GOAL,
    DifficultyPreference,
    LearningSettings,
    ReviewMode,
)
from utils.paths import user_data_dir

logger = getLogger(__name__)

# Environment variables override the file (highest priority)
ENV_OVERRIDES = {
    'review_mode': 'WORDBOOK_REVIEW_MODE',
    'difficulty_preference': 'WORDBOOK_DIFFICULTY_PREFERENCE',
    'daily_goal': 'WORDBOOK_DAILY_GOAL',
}


def _default_settings_path() -> Path:
    if WORDBOOK_SETTINGS_FILE:
        return Path(WORDBOOK_SETTINGS_FILE)
    base = Path(WORDBOOK_DATA_DIR) if WORDBOOK_DATA_DIR else user_data_dir(APP_NAME)
    return base / 'settings.json'


def settings_from_dict(raw: dict) -> LearningSettings:
    """Build settings from loosely typed values, falling back per field."""
    defaults = LearningSettings()

    try:
        review_mode = ReviewMode(str(raw.get('review_mode', defaults.review_mode.value)).lower())
    except ValueError:
        logger.warning("Invalid review_mode, using default", extra={"value": raw.get('review_mode')})
        review_mode = defaults.review_mode

    try:
        preference = DifficultyPreference(
            str(raw.get('difficulty_preference', defaults.difficulty_preference.value)).lower()
        )
    except ValueError:
        logger.warning(
            "Invalid difficulty_preference, using default",
            extra={"value": raw.get('difficulty_preference')},
        )
        preference = defaults.difficulty_preference

    try:
        daily_goal = int(raw.get('daily_goal', DEFAULT_DAILY_GOAL))
        if not MIN_DAILY_GOAL <= daily_goal <= MAX_DAILY_GOAL:
            raise ValueError(daily_goal)
    except (TypeError, ValueError):
        logger.warning("Invalid daily_goal, using default", extra={"value": raw.get('daily_goal')})
        daily_goal = DEFAULT_DAILY_GOAL

    return LearningSettings(
        review_mode=review_mode,
        difficulty_preference=preference,
        daily_goal=daily_goal,
    )


class JsonSettingsRepository:
    """Learning settings stored under the ``learning`` key of a JSON file.

    Other top-level keys in the file belong to other collaborators and are
    preserved on save.
    """

    def __init__(self, settings_file: str | Path | None = None, use_env: bool = True):
        self.settings_file = Path(settings_file) if settings_file else _default_settings_path()
        self.use_env = use_env
        self._file_lock = Lock()

    def _read_file(self) -> dict:
        if not self.settings_file.exists():
            return {}
        try:
            with open(self.settings_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Could not load settings file, using defaults", extra={"error": str(e)})
            return {}
        return data if isinstance(data, dict) else {}

    def get(self) -> LearningSettings:
        raw = dict(self._read_file().get('learning') or {})
        if self.use_env:
            for key, env_name in ENV_OVERRIDES.items():
                env_value = os.environ.get(env_name)
                if env_value is not None:
                    raw[key] = env_value
        return settings_from_dict(raw)

    def save(self, settings: LearningSettings) -> None:
        with self._file_lock:
            data = self._read_file()
            data['learning'] = settings.to_dict()
            try:
                self.settings_file.parent.mkdir(parents=True, exist_ok=True)
                with open(self.settings_file, 'w', encoding='utf-8') as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
            except OSError as e:
                raise PersistError(f"Cannot save settings to {self.settings_file}: {e}") from e
        logger.info("Settings saved", extra={"path": str(self.settings_file)})

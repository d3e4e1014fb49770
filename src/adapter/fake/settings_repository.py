"""In-memory implementation of SettingsRepository for testing."""

from domain.model.settings import LearningSettings


class FakeSettingsRepository:
    def __init__(self, settings: LearningSettings | None = None):
        self.settings = settings or LearningSettings()
        self.save_count = 0

    def get(self) -> LearningSettings:
        return self.settings

    def save(self, settings: LearningSettings) -> None:
        self.settings = settings
        self.save_count += 1

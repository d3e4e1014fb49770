"""Port for learning settings."""

from typing import Protocol

from domain.model.settings import LearningSettings


class SettingsRepository(Protocol):

    def get(self) -> LearningSettings:
        ...

    def save(self, settings: LearningSettings) -> None:
        ...

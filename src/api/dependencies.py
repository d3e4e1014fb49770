from functools import lru_cache

from adapter.filesystem.settings_repository import JsonSettingsRepository
from adapter.filesystem.word_store import FileWordStore
from adapter.xml.word_repository import XmlWordRepository
from port.settings_repository import SettingsRepository
from port.word_repository import WordRepository


# One repository per process so every request shares the same cache slot
@lru_cache(maxsize=1)
def get_word_repo() -> WordRepository:
    return XmlWordRepository(FileWordStore())


@lru_cache(maxsize=1)
def get_settings_repo() -> SettingsRepository:
    return JsonSettingsRepository()

"""File implementation of WordStore."""

import os
import uuid
from logging import getLogger
from pathlib import Path

from adapter.filesystem.config import APP_NAME, WORDBOOK_DATA_DIR, WORDBOOK_FILE, WORDBOOK_FILE_NAME
from adapter.xml.codec import EMPTY_DOCUMENT
from domain.model.errors import LoadError, PersistError
from utils.paths import executable_dir, user_data_dir

logger = getLogger(__name__)


class FileWordStore:
    """Wordbook document on disk.

    Reads resolve the first existing file among:
    1. ``<executable dir>/<file name>``
    2. ``<executable dir>/resources/<file name>``
    3. ``<current working dir>/<file name>``
    4. ``<data dir>/vocabulary/<file name>``, created empty if nothing matched.

    Writes always go to the data-dir file. Passing ``path`` (or setting
    WORDBOOK_FILE) pins both reads and writes to a single file.
    """

    def __init__(
        self,
        path: str | Path | None = None,
        file_name: str | None = None,
        data_dir: str | Path | None = None,
        search_dirs: list[Path] | None = None,
    ):
        self.file_name = file_name or WORDBOOK_FILE_NAME
        pinned = path or WORDBOOK_FILE
        self.pinned_path = Path(pinned) if pinned else None
        base = Path(data_dir or WORDBOOK_DATA_DIR or user_data_dir(APP_NAME))
        self.data_path = self.pinned_path or base / 'vocabulary' / self.file_name
        if search_dirs is None:
            exe_dir = executable_dir()
            search_dirs = [exe_dir, exe_dir / 'resources', Path.cwd()]
        self.search_dirs = search_dirs

    def candidates(self) -> list[Path]:
        """Read locations in resolution order."""
        if self.pinned_path is not None:
            return [self.pinned_path]
        return [d / self.file_name for d in self.search_dirs] + [self.data_path]

    def resolve(self) -> Path:
        """Return the first existing candidate, creating the data file if none exists."""
        for candidate in self.candidates():
            if candidate.is_file():
                return candidate

        logger.info("No wordbook found, creating empty document", extra={"path": str(self.data_path)})
        try:
            self.data_path.parent.mkdir(parents=True, exist_ok=True)
            self.data_path.write_text(EMPTY_DOCUMENT, encoding='utf-8')
        except OSError as e:
            raise LoadError(f"Cannot create wordbook at {self.data_path}: {e}") from e
        return self.data_path

    def read(self) -> bytes:
        path = self.resolve()
        try:
            content = path.read_bytes()
        except OSError as e:
            raise LoadError(f"Cannot read wordbook at {path}: {e}") from e
        logger.info("Wordbook read", extra={"path": str(path), "bytes": len(content)})
        return content

    def write(self, content: str) -> None:
        """Atomically replace the data-dir file (temp file + rename)."""
        target = self.data_path
        temp_file = target.with_name(f"{target.name}.{uuid.uuid4().hex[:8]}.tmp")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(temp_file, 'w', encoding='utf-8') as f:
                f.write(content)
            os.replace(temp_file, target)
        except OSError as e:
            temp_file.unlink(missing_ok=True)
            raise PersistError(f"Cannot write wordbook to {target}: {e}") from e
        logger.info("Wordbook written", extra={"path": str(target), "bytes": len(content)})

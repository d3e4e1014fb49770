"""In-memory implementation of WordStore for testing."""

from domain.model.errors import LoadError, PersistError


class FakeWordStore:
    def __init__(self, content: str | bytes = ''):
        self.content: bytes = content.encode('utf-8') if isinstance(content, str) else content
        self.read_count = 0
        self.writes: list[str] = []
        self.fail_read = False
        self.fail_write = False

    def read(self) -> bytes:
        if self.fail_read:
            raise LoadError("Simulated read failure")
        self.read_count += 1
        return self.content

    def write(self, content: str) -> None:
        if self.fail_write:
            raise PersistError("Simulated write failure")
        self.writes.append(content)
        self.content = content.encode('utf-8')

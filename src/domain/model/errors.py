"""Domain-level exceptions.

Adapters and services raise these errors to express failures of the word
store or violations of business rules. Only the API layer flattens them to
text, keeping the ``kind`` so callers can still tell failures apart.
"""


class DomainError(Exception):
    """Base class for all domain errors."""

    kind = "domain"


class NotFoundError(DomainError):
    """Requested entity does not exist."""

    kind = "not_found"


class ValidationError(DomainError):
    """Input violates a business validation rule."""

    kind = "validation"


# ── codec ─────────────────────────────────────────────────────


class CodecError(DomainError):
    """The wordbook document could not be decoded."""

    kind = "codec"


class CodecSyntaxError(CodecError):
    """Document structure cannot be tokenized."""

    kind = "codec_syntax"

    def __init__(self, message: str, line: int | None = None, column: int | None = None):
        self.line = line
        self.column = column
        super().__init__(message)


class CodecEncodingError(CodecError):
    """Document bytes are not valid UTF-8."""

    kind = "codec_encoding"


# ── repository ───────────────────────────────────────────────


class RepositoryError(DomainError):
    """Backing store failure."""

    kind = "repository"


class LoadError(RepositoryError):
    """Backing store is unreadable or its content undecodable."""

    kind = "load"


class PersistError(RepositoryError):
    """Writing the snapshot back to the backing store failed.

    The in-memory snapshot keeps the attempted update until the next reload.
    """

    kind = "persist"

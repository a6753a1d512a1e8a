from __future__ import annotations

from enum import Enum


class GelbooruError(Exception):
    pass


class InvalidLimitError(GelbooruError, ValueError):
    def __init__(self, limit: int) -> None:
        super().__init__(f"Limit {limit} exceeds the maximum page size")
        self.limit = limit


class RequestError(GelbooruError):
    def __init__(self, status: int) -> None:
        super().__init__(f"Server responded with status {status}")
        self.status = status


class DecodingErrorKind(Enum):
    MISSING_FIELD = "missing-field"
    TYPE_MISMATCH = "type-mismatch"
    INVALID_ENUM_VALUE = "invalid-enum-value"
    MALFORMED = "malformed"


class DecodingError(GelbooruError):
    def __init__(self, kind: DecodingErrorKind, field: str | None = None, detail: str = "") -> None:
        where = f" at '{field}'" if field else ""
        message = f"Can not decode response: {kind.value}{where}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
        self.kind = kind
        self.field = field


class TransportError(GelbooruError):
    """
    Network level failure: DNS, connection, TLS or timeout.
    The original exception is kept in `cause` and chained as `__cause__`.
    """

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"Request failed: {cause!r}")
        self.cause = cause


class PostNotFoundError(GelbooruError, LookupError):
    def __init__(self, tags: str) -> None:
        super().__init__(f"No posts match '{tags}'")
        self.tags = tags

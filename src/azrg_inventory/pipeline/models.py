"""Per-entity result model produced by the worker pool."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from azrg_inventory.core.exceptions import FetchError, ParseError

FAILURE_PARSE = "parse"
FAILURE_UNEXPECTED = "unexpected"


@dataclass(frozen=True)
class FailureReason:
    """Structured description of why one entity could not be fetched.

    Attributes:
        kind: FetchError kind, ``parse`` or ``unexpected``
        message: Human readable reason, rendered inline by the renderers
        status_code: HTTP status of the failing response, if any
    """

    kind: str
    message: str
    status_code: int | None = None

    @classmethod
    def from_exception(cls, error: BaseException) -> FailureReason:
        if isinstance(error, FetchError):
            return cls(error.kind, str(error), error.status_code)
        if isinstance(error, ParseError):
            return cls(FAILURE_PARSE, str(error))
        return cls(FAILURE_UNEXPECTED, f"{type(error).__name__}: {error}")

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class DetailResult:
    """Outcome of fetching detail for one entity: a value or a failure, never both."""

    entity: Any
    value: Any = None
    failure: FailureReason | None = None

    @classmethod
    def success(cls, entity: Any, value: Any) -> DetailResult:
        return cls(entity=entity, value=value)

    @classmethod
    def failed(cls, entity: Any, failure: FailureReason) -> DetailResult:
        return cls(entity=entity, failure=failure)

    @property
    def ok(self) -> bool:
        return self.failure is None

    @property
    def error(self) -> str | None:
        return None if self.failure is None else self.failure.message

"""
Resolution errors for the kindql schema engine.

Errors raised inside field resolvers are caught by the query engine and
reported as per-field errors (with ``extensions.code``), leaving sibling
fields and records in the same query intact.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Classification of resolution failures."""

    RESOLUTION_ERROR = "RESOLUTION_ERROR"

    # Record tagged with a kind the active configuration does not know
    KIND_NOT_FOUND = "KIND_NOT_FOUND"

    # Query engine asked for a field the type never declared (registry bug)
    UNKNOWN_FIELD = "UNKNOWN_FIELD"

    # Stored value disagrees with the declared FieldType
    FIELD_TYPE_MISMATCH = "FIELD_TYPE_MISMATCH"

    # Record store lock poisoned or timed out
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"


class ResolutionError(Exception):
    """
    Base class for errors scoped to a single field or record resolution.

    Attributes:
        code: ErrorCode of this failure
        details: Extra context copied into the GraphQL error extensions
    """

    code: ErrorCode = ErrorCode.RESOLUTION_ERROR

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details = details

    @property
    def extensions(self) -> dict[str, Any]:
        return {"code": self.code.value, **self.details}


class KindNotFoundError(ResolutionError):
    """Dispatch failure: the record's kind has no entry in the configuration."""

    code = ErrorCode.KIND_NOT_FOUND

    def __init__(self, kind: str, record_name: str | None = None):
        super().__init__(
            f"Kind '{kind}' is not present in the active configuration",
            kind=kind,
            record=record_name,
        )
        self.kind = kind


class UnknownFieldError(ResolutionError):
    """Field requested that the concrete type never declared."""

    code = ErrorCode.UNKNOWN_FIELD

    def __init__(self, type_name: str, field_name: str):
        super().__init__(
            f"Unknown field '{field_name}' on type '{type_name}'",
            type=type_name,
            field=field_name,
        )
        self.type_name = type_name
        self.field_name = field_name


class FieldTypeMismatchError(ResolutionError):
    """Stored value tag does not match the field's declared type."""

    code = ErrorCode.FIELD_TYPE_MISMATCH

    def __init__(self, kind: str, field_name: str, declared: str, actual: str):
        super().__init__(
            f"Field '{field_name}' of kind '{kind}' is declared {declared} but holds {actual}",
            kind=kind,
            field=field_name,
            declared=declared,
            actual=actual,
        )


class StoreUnavailableError(ResolutionError):
    """The record store could not be read for this query."""

    code = ErrorCode.STORE_UNAVAILABLE

"""
Record types for the kindql record store.

Records are immutable data containers tagged with the kind they belong to.
A record never references its KindSchema; the schema is looked up by
``kind`` from the active configuration at resolution time.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from kindql.config.schemas import FieldType

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


@dataclass(frozen=True, slots=True)
class FieldValue:
    """
    Actual value of one field on one record.

    Tagged union of ``String(text)`` and ``Number(int32)``.
    """

    type: FieldType
    value: str | int

    def __post_init__(self) -> None:
        if self.type == FieldType.STRING:
            if not isinstance(self.value, str):
                raise TypeError(f"String field value must be str, got {type(self.value).__name__}")
        elif self.type == FieldType.NUMBER:
            if isinstance(self.value, bool) or not isinstance(self.value, int):
                raise TypeError(f"Number field value must be int, got {type(self.value).__name__}")
            if not INT32_MIN <= self.value <= INT32_MAX:
                raise ValueError(f"Number field value {self.value} outside 32-bit range")

    @classmethod
    def string(cls, text: str) -> FieldValue:
        return cls(FieldType.STRING, text)

    @classmethod
    def number(cls, value: int) -> FieldValue:
        return cls(FieldType.NUMBER, value)

    @classmethod
    def from_python(cls, value: Any) -> FieldValue:
        """Wrap a plain str/int, passing FieldValue through unchanged."""
        if isinstance(value, FieldValue):
            return value
        if isinstance(value, str):
            return cls.string(value)
        if isinstance(value, int) and not isinstance(value, bool):
            return cls.number(value)
        raise TypeError(f"Unsupported field value type: {type(value).__name__}")

    def matches(self, field_type: FieldType) -> bool:
        return self.type == field_type


@dataclass(frozen=True, slots=True)
class Record:
    """
    One dynamically typed record.

    Attributes:
        name: Record name (exposed through the shared ``name`` field)
        kind: Kind tag used for dispatch
        fields: Field name -> FieldValue (read-only)
    """

    name: str
    kind: str
    fields: Mapping[str, FieldValue] = field(default_factory=dict)

    def __post_init__(self) -> None:
        fields = dict(self.fields)
        for key, value in fields.items():
            if not isinstance(value, FieldValue):
                raise TypeError(
                    f"Field '{key}' of record '{self.name}' must be a FieldValue, "
                    f"got {type(value).__name__}; use Record.create() for plain values"
                )
        # Detach from the caller's dict so the record cannot change after publication
        object.__setattr__(self, "fields", MappingProxyType(fields))

    @classmethod
    def create(cls, name: str, kind: str, **values: Any) -> Record:
        """
        Convenience constructor from plain Python values.

        Example:
            Record.create("Dumbo", "Elephant", age=5)
        """
        return cls(
            name=name,
            kind=kind,
            fields={key: FieldValue.from_python(value) for key, value in values.items()},
        )

    def get(self, field_name: str) -> FieldValue | None:
        return self.fields.get(field_name)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for logging."""
        return {
            "name": self.name,
            "kind": self.kind,
            "fields": {key: value.value for key, value in self.fields.items()},
        }

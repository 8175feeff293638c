"""
Configuration Schemas for kindql.

Pydantic models describing the kind catalog a schema is generated from.

A Configuration maps every kind (e.g. "Cat") to a KindSchema that declares
the kind-specific fields and their FieldType. Configurations are frozen down
to their nested mappings: a change in configuration means building a new
schema, never mutating the one in use.

Usage:
    config = Configuration.from_mapping({
        "Cat": {"fur": "String"},
        "Elephant": {"age": "Number"},
    })

    config.get("Cat").fields  # {"fur": FieldType.STRING}
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

if TYPE_CHECKING:
    from kindql.store.records import Record

# Shared interface field every kind exposes
SHARED_FIELD_NAME = "name"

INTERFACE_TYPE_NAME = "Animal"
QUERY_TYPE_NAME = "Query"

# Root field listing every record
LIST_FIELD_NAME = "animals"

RESERVED_TYPE_NAMES = frozenset(
    {
        QUERY_TYPE_NAME,
        INTERFACE_TYPE_NAME,
        "String",
        "Int",
        "Float",
        "Boolean",
        "ID",
    }
)

_NAME_PATTERN = re.compile(r"^[_A-Za-z][_A-Za-z0-9]*$")


def _check_name(value: str, what: str) -> str:
    if not _NAME_PATTERN.match(value) or value.startswith("__"):
        raise ValueError(f"Invalid {what} name '{value}'")
    return value


class FieldType(str, Enum):
    """Declared shape of one named field of a kind."""

    STRING = "String"
    NUMBER = "Number"


class KindSchema(BaseModel):
    """
    Field schema for one kind.

    Attributes:
        kind: Kind identifier, also the wire-visible type name
        fields: Kind-specific field name -> FieldType
    """

    model_config = ConfigDict(frozen=True)

    kind: str = Field(..., description="Kind identifier")
    fields: Mapping[str, FieldType] = Field(
        default_factory=dict,
        validate_default=True,
        description="Kind-specific fields and their declared types",
    )

    @field_validator("kind")
    @classmethod
    def _validate_kind(cls, value: str) -> str:
        return _check_name(value, "kind")

    @field_validator("fields")
    @classmethod
    def _validate_fields(cls, value: Mapping[str, FieldType]) -> Mapping[str, FieldType]:
        for field_name in value:
            _check_name(field_name, "field")
            if field_name == SHARED_FIELD_NAME:
                raise ValueError(
                    f"Field '{SHARED_FIELD_NAME}' is shared by every kind and cannot be redeclared"
                )
        return MappingProxyType(dict(value))

    def field_type(self, field_name: str) -> FieldType | None:
        """Declared type of a kind-specific field, None if undeclared."""
        return self.fields.get(field_name)


class Configuration(BaseModel):
    """
    Kind catalog for one schema build.

    Keys are kind identifiers; each value is the KindSchema of that kind.
    A nested KindSchema may omit ``kind``; it is filled from its key.
    """

    model_config = ConfigDict(frozen=True)

    kinds: Mapping[str, KindSchema] = Field(default_factory=dict, validate_default=True)

    @model_validator(mode="before")
    @classmethod
    def _fill_kind_from_key(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        kinds = data.get("kinds")
        if not isinstance(kinds, Mapping):
            return data

        filled: dict[str, Any] = {}
        for key, schema in kinds.items():
            if isinstance(schema, Mapping) and "kind" not in schema:
                schema = {**schema, "kind": key}
            filled[key] = schema
        return {**data, "kinds": filled}

    @field_validator("kinds")
    @classmethod
    def _freeze_kinds(cls, value: Mapping[str, KindSchema]) -> Mapping[str, KindSchema]:
        return MappingProxyType(dict(value))

    @model_validator(mode="after")
    def _validate_keys(self) -> Configuration:
        for key, schema in self.kinds.items():
            if key != schema.kind:
                raise ValueError(f"Configuration key '{key}' does not match kind '{schema.kind}'")
            if key in RESERVED_TYPE_NAMES:
                raise ValueError(f"Kind '{key}' collides with a reserved type name")
        return self

    @classmethod
    def from_mapping(cls, mapping: dict[str, dict[str, str | FieldType]]) -> Configuration:
        """
        Build from a plain ``{kind: {field: type}}`` mapping.

        Example:
            Configuration.from_mapping({"Dog": {"breed": "String"}})
        """
        return cls(
            kinds={
                kind: KindSchema(kind=kind, fields=dict(fields))
                for kind, fields in mapping.items()
            }
        )

    def get(self, kind: str) -> KindSchema | None:
        return self.kinds.get(kind)

    def kind_ids(self) -> list[str]:
        """Configured kinds in a stable (sorted) order."""
        return sorted(self.kinds)

    def __contains__(self, kind: object) -> bool:
        return kind in self.kinds

    def __len__(self) -> int:
        return len(self.kinds)

    def validate_record(self, record: Record) -> list[str]:
        """
        Check a record against this configuration.

        Returns:
            List of problems, empty when the record is consistent
        """
        schema = self.kinds.get(record.kind)
        if schema is None:
            return [f"Unknown kind '{record.kind}' for record '{record.name}'"]

        problems = []
        for field_name, value in record.fields.items():
            declared = schema.field_type(field_name)
            if declared is None:
                problems.append(
                    f"Field '{field_name}' is not declared for kind '{record.kind}'"
                )
            elif value.type != declared:
                problems.append(
                    f"Field '{field_name}' of kind '{record.kind}' is declared "
                    f"{declared.value} but holds {value.type.value}"
                )
        return problems


def default_configuration() -> Configuration:
    """The built-in zoo catalog: Cat, Dog and Elephant."""
    return Configuration.from_mapping(
        {
            "Cat": {"fur": FieldType.STRING},
            "Dog": {"breed": FieldType.STRING},
            "Elephant": {"age": FieldType.NUMBER},
        }
    )


class AppSettings(BaseModel):
    """
    Application settings model.

    Populated from ``KINDQL_*`` environment variables by
    ``kindql.app.dependencies.get_settings``.
    """

    # Service identity
    service_name: str = "kindql"
    environment: str = "development"
    debug: bool = False

    # Kind catalog source; the built-in zoo catalog is used when unset
    config_file: str | None = Field(default=None, description="JSON/YAML kind catalog")

    # Record store
    fixture_amount: int = Field(default=30, ge=0, description="Records seeded at startup")
    lock_timeout_seconds: float | None = Field(default=5.0, gt=0)

    # Schema generation
    regenerate_per_request: bool = True

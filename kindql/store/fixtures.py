"""
Fixture generation for the record store.

Builds sample records for each configured kind from an explicit catalog of
per-kind builders. The catalog is constructed by the caller (usually at
process start) and passed in; there is no module-level registry.

Kinds without a registered builder get values synthesized from their
declared field types, so a configuration that gains a kind still produces
usable fixtures.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from kindql.config.schemas import Configuration, FieldType, KindSchema

from .records import FieldValue, Record

logger = logging.getLogger(__name__)

RecordBuilder = Callable[[int, KindSchema], Record]


class FixtureError(Exception):
    """A builder produced a record inconsistent with the configuration."""

    pass


def record_name(kind: str, index: int) -> str:
    return f"{kind} {index}"


def _dog(index: int, schema: KindSchema) -> Record:
    return Record.create(record_name(schema.kind, index), schema.kind, breed="Retriever")


def _cat(index: int, schema: KindSchema) -> Record:
    return Record.create(record_name(schema.kind, index), schema.kind, fur="long")


def _elephant(index: int, schema: KindSchema) -> Record:
    return Record.create(record_name(schema.kind, index), schema.kind, age=index)


def default_builders() -> dict[str, RecordBuilder]:
    """Builders for the built-in zoo catalog."""
    return {
        "Cat": _cat,
        "Dog": _dog,
        "Elephant": _elephant,
    }


def synthesize_record(index: int, schema: KindSchema) -> Record:
    """Record with one value per declared field, derived from the field type."""
    fields = {}
    for field_name, field_type in schema.fields.items():
        if field_type == FieldType.NUMBER:
            fields[field_name] = FieldValue.number(index)
        else:
            fields[field_name] = FieldValue.string(f"{field_name} {index}")
    return Record(name=record_name(schema.kind, index), kind=schema.kind, fields=fields)


class FixtureGenerator:
    """
    Generates fixture records for a configuration.

    Usage:
        generator = FixtureGenerator(default_builders())
        records = generator.generate(config, amount=30)
        store.extend(records)
    """

    def __init__(self, builders: dict[str, RecordBuilder] | None = None):
        self._builders: dict[str, RecordBuilder] = dict(builders or {})

    def register(self, kind: str, builder: RecordBuilder) -> None:
        self._builders[kind] = builder

    def builder_for(self, kind: str) -> RecordBuilder:
        return self._builders.get(kind, synthesize_record)

    def generate(self, config: Configuration, amount: int) -> list[Record]:
        """
        Generate ``amount // len(config)`` records for every configured kind.

        Raises:
            FixtureError: If a builder output does not validate against config
        """
        if not len(config):
            return []

        per_kind = amount // len(config)
        records: list[Record] = []

        for kind in config.kind_ids():
            schema = config.get(kind)
            builder = self.builder_for(kind)
            for index in range(per_kind):
                record = builder(index, schema)
                problems = config.validate_record(record)
                if problems:
                    raise FixtureError(
                        f"Builder for kind '{kind}' produced an invalid record: {'; '.join(problems)}"
                    )
                records.append(record)

        logger.info(
            f"[fixtures] Generated {len(records)} records | kinds={len(config)} | per_kind={per_kind}"
        )
        return records

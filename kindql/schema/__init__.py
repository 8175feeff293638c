"""
kindql Schema Engine

Generates a GraphQL schema from a kind catalog at runtime and resolves
interface-typed records against it.

Components:
    - SchemaGenerator: Configuration -> GeneratedSchema
    - InterfaceDispatcher: shared interface + tag-based dispatch
    - ConcreteTypeResolver: per-kind object types and field resolution
    - FieldRegistry: per-build memo of concrete types
    - QueryRoot: ``animals`` root field bound to the record store
"""

from .context import SchemaContext, TypeContext
from .errors import (
    ErrorCode,
    FieldTypeMismatchError,
    KindNotFoundError,
    ResolutionError,
    StoreUnavailableError,
    UnknownFieldError,
)
from .generator import GeneratedSchema, SchemaGenerator
from .interface import InterfaceDispatcher
from .query import QueryRoot
from .registry import FieldRegistry, TypeRegistrationError
from .types import SCALAR_TYPES, ConcreteTypeResolver, scalar_for

__all__ = [
    "SCALAR_TYPES",
    "ConcreteTypeResolver",
    "ErrorCode",
    "FieldRegistry",
    "FieldTypeMismatchError",
    "GeneratedSchema",
    "InterfaceDispatcher",
    "KindNotFoundError",
    "QueryRoot",
    "ResolutionError",
    "SchemaContext",
    "SchemaGenerator",
    "StoreUnavailableError",
    "TypeContext",
    "TypeRegistrationError",
    "UnknownFieldError",
    "scalar_for",
]

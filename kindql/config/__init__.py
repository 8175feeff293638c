"""
kindql Configuration

Kind catalog models, application settings and configuration providers.
"""

from .provider import (
    ConfigProvider,
    ConfigurationError,
    FileConfigProvider,
    MemoryConfigProvider,
    StaticConfigProvider,
)
from .schemas import (
    INTERFACE_TYPE_NAME,
    LIST_FIELD_NAME,
    QUERY_TYPE_NAME,
    SHARED_FIELD_NAME,
    AppSettings,
    Configuration,
    FieldType,
    KindSchema,
    default_configuration,
)

__all__ = [
    "INTERFACE_TYPE_NAME",
    "LIST_FIELD_NAME",
    "QUERY_TYPE_NAME",
    "SHARED_FIELD_NAME",
    "AppSettings",
    "ConfigProvider",
    "Configuration",
    "ConfigurationError",
    "FieldType",
    "FileConfigProvider",
    "KindSchema",
    "MemoryConfigProvider",
    "StaticConfigProvider",
    "default_configuration",
]

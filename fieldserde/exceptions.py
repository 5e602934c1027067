"""
Serializer Exceptions
fieldserde

Precondition failures raised synchronously before any traversal begins.
Data-validation outcomes are never raised; they are collected on the output.
"""

from typing import Any


class SerializerError(Exception):
    """Base class for all fieldserde exceptions."""


class SchemaDefinitionError(SerializerError, TypeError):
    """Raised when a schema or composite field is built from unusable parts."""

    def __init__(self, message: str, field: str = None):
        self.field = field
        super().__init__(message)


class SerializeOptionsError(SerializerError, ValueError):
    """Raised when serialize() receives an invalid option."""

    def __init__(self, option: str, message: str, value: Any = None):
        self.option = option
        self.value = value
        super().__init__(f"Invalid serialize option [{option}]: {message}")


class InvalidInputError(SerializerError, TypeError):
    """Raised when many=True is requested for a non-array input."""


class SerializationFailed(SerializerError):
    """Raised by the strict boundary policy when serialization reports errors."""

    def __init__(
        self,
        serializer: str,
        direction: str,
        errors: dict[str, str],
        data: Any = None
    ):
        self.serializer = serializer
        self.direction = direction
        self.errors = errors
        self.data = data

        items = [f"{path}: {message}" for path, message in errors.items()]
        error_summary = "; ".join(items[:3])
        if len(items) > 3:
            error_summary += f" ... and {len(items) - 3} more"

        super().__init__(
            f"Serialization failed [{serializer}] ({direction}): {error_summary}"
        )


class ConfigError(SerializerError):
    """Raised when a configuration file cannot be parsed or holds invalid settings."""

    def __init__(self, message: str, path: str = None):
        self.path = path
        super().__init__(message)

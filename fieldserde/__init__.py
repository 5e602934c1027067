"""
fieldserde

Declarative field contracts and serializers for validating incoming data and
shaping outgoing data.
"""

from .exceptions import (
    ConfigError,
    InvalidInputError,
    SchemaDefinitionError,
    SerializationFailed,
    SerializeOptionsError,
    SerializerError,
)
from .fields import (
    MISSING,
    ArrayField,
    BooleanField,
    CharField,
    DateField,
    DateTimeField,
    EmailField,
    Field,
    FieldKind,
    IntegerField,
    JsonField,
    NumberField,
    ObjectField,
    UrlField,
)
from .options import Mode, SerializeOptions
from .output import ErrorDetail, SerializerOutput
from .policy import SerializerPolicy, serialize_input, serialize_output
from .serializer import Serializer

__all__ = [
    # Engine
    "Serializer",
    "SerializerOutput",
    "ErrorDetail",
    "SerializeOptions",
    "Mode",

    # Fields
    "MISSING",
    "Field",
    "FieldKind",
    "CharField",
    "NumberField",
    "IntegerField",
    "BooleanField",
    "DateTimeField",
    "DateField",
    "EmailField",
    "UrlField",
    "JsonField",
    "ObjectField",
    "ArrayField",

    # Boundary policy
    "SerializerPolicy",
    "serialize_input",
    "serialize_output",

    # Exceptions
    "SerializerError",
    "SchemaDefinitionError",
    "SerializeOptionsError",
    "InvalidInputError",
    "SerializationFailed",
    "ConfigError",
]

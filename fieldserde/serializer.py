"""
Serializer
fieldserde

Walks an input value against a schema of field contracts and assembles the
sanitized output plus a flat path-keyed error mapping.

serialize() keeps all per-call state (mode, context, errors, depth) in local
values, so one Serializer can be reused, nested and called concurrently.
"""

import time
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from fieldserde import metrics
from fieldserde.config import SerializerSettings, get_settings
from fieldserde.exceptions import InvalidInputError, SchemaDefinitionError
from fieldserde.fields import MISSING, Field
from fieldserde.log import StructuredLogger
from fieldserde.options import Mode, SerializeOptions
from fieldserde.output import SerializerOutput
from fieldserde.sink import ErrorSink


def read_value(item: Any, key: str) -> Any:
    """Value of key in item, or MISSING when item is not a mapping or lacks it."""
    if isinstance(item, Mapping):
        return item.get(key, MISSING)
    return MISSING


class Serializer:
    """
    Owns an ordered schema of field name -> Field.

    Output key order follows schema order. Fields that are skipped or
    produce no value are left out of the output entirely.

    Usage:
        users = Serializer({
            "name": CharField(),
            "age": IntegerField().min(18),
        }, name="user")
        out = users.serialize(payload, mode="input", context={"is_admin": True})
        if not out.is_valid():
            ...
    """

    def __init__(
        self,
        schema: Mapping[str, Field],
        *,
        name: str = None,
        many: bool = False,
        settings: SerializerSettings = None
    ):
        if not isinstance(schema, Mapping):
            raise SchemaDefinitionError(
                f"Serializer expects a mapping of field name to Field, got {type(schema).__name__}"
            )
        for key, field in schema.items():
            if not isinstance(field, Field):
                raise SchemaDefinitionError(
                    f"Schema entry '{key}' is not a Field: {type(field).__name__}",
                    field=key,
                )

        # validated here so a bad default fails at construction, not on first call
        SerializeOptions.build(many=many)

        self.schema: dict[str, Field] = dict(schema)
        self.name = name or "anonymous"
        self.many = many
        self.settings = settings or get_settings()

        self.log = StructuredLogger(
            "serializer", serializer=self.name, level=self.settings.log_level
        )
        if self.settings.json_log_dir:
            self.log.setup_file_logging(self.settings.json_log_dir)

    def __repr__(self):
        return f"Serializer(name={self.name!r}, fields={list(self.schema)})"

    def serialize(
        self,
        input: Any,
        *,
        mode: Mode | str = Mode.BOTH,
        many: bool = None,
        context: Mapping = None
    ) -> SerializerOutput:
        """
        Serialize input against the schema.

        Args:
            input: A single item, or a list of items when many=True
            mode: "input", "output" or "both"
            many: Treat input as a list of items (defaults to the
                constructor's many)
            context: Mapping consulted by context rules, validators and
                computed defaults

        Returns:
            SerializerOutput with data and errors

        Raises:
            SerializeOptionsError: If an option is invalid
            InvalidInputError: If many=True and input is not a list
        """
        options = SerializeOptions.build(
            mode=mode,
            many=self.many if many is None else many,
            context=context,
        )

        if options.many and not isinstance(input, list | tuple):
            raise InvalidInputError(
                f"Expected array when many=True, got {type(input).__name__}"
            )

        started = time.perf_counter()
        sink = ErrorSink(max_depth=self.settings.max_depth)

        if options.many:
            data = [
                self._serialize_item(item, options.mode, options.context, sink, index)
                for index, item in enumerate(input)
            ]
        else:
            data = self._serialize_item(input, options.mode, options.context, sink)

        output = SerializerOutput(data=data, errors=sink.errors)
        duration = time.perf_counter() - started

        if self.settings.metrics_enabled:
            metrics.record_call(self.name, str(options.mode), len(sink.errors), duration)

        self.log.serialized(
            mode=str(options.mode),
            many=options.many,
            items=len(data) if options.many else 1,
            errors=len(sink.errors),
            duration=duration,
        )
        return output

    def serialize_nested(
        self,
        value: Any,
        *,
        mode: Mode,
        context: dict,
        sink: ErrorSink
    ) -> dict:
        """Serialize one nested item into an enclosing call's sink."""
        return self._serialize_item(value, mode, context, sink)

    def _serialize_item(
        self,
        item: Any,
        mode: Mode,
        context: dict,
        sink: ErrorSink,
        index: int = None
    ) -> dict:
        if isinstance(item, BaseModel):
            item = item.model_dump()

        output = {}

        for key, field in self.schema.items():
            value = read_value(item, key)
            path = f"{index}.{key}" if index is not None else key

            result = field.serialize(value, context, sink, path, mode, item)
            if not result.skip and result.value is not MISSING:
                output[key] = result.value

        return output

    def describe(self, _seen: frozenset = frozenset()) -> dict:
        """
        Recursive schema reflection: kind name, required and mode flags per
        field, the child kind of arrays and the nested shape of objects.
        A serializer that contains itself is reported as "<recursive>".
        """
        seen = _seen | {id(self)}
        return {key: field.describe(seen) for key, field in self.schema.items()}

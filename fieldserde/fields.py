"""
Field Contracts
fieldserde

Schema leaves and composite fields. A field decides, for one value at one
path, whether it is skipped, defaulted, rejected or passed through.

Builder methods (optional, default, validate, only_if, read_only,
write_only and the kind-specific extras) mutate the field in place and
return it for chaining. A field shared between schemas sees every later
mutation; use copy() to get an independent contract.
"""

import copy
import logging
import math
from collections.abc import Callable, Mapping
from datetime import date, datetime
from enum import StrEnum
from typing import Any, NamedTuple

from fieldserde import validators as v
from fieldserde.exceptions import SchemaDefinitionError
from fieldserde.options import Mode
from fieldserde.sink import ErrorSink

logger = logging.getLogger(__name__)


class _Missing:
    """Sentinel for a key that is not present at all."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "MISSING"

    def __bool__(self):
        return False

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


MISSING = _Missing()

REQUIRED_MESSAGE = "Field is required"
VALIDATION_FAILED_MESSAGE = "Validation failed"
EXPECTED_ARRAY_MESSAGE = "Expected array"
DEPTH_EXCEEDED_MESSAGE = "Maximum nesting depth exceeded"


# =============================================================================
# FIELD KINDS
# =============================================================================

class FieldKind(StrEnum):
    """Closed set of field kinds. The value is the reported kind name."""

    FIELD = "Field"
    CHAR = "CharField"
    NUMBER = "NumberField"
    INTEGER = "IntegerField"
    BOOLEAN = "BooleanField"
    DATETIME = "DateTimeField"
    DATE = "DateField"
    EMAIL = "EmailField"
    URL = "UrlField"
    JSON = "JsonField"
    OBJECT = "ObjectField"
    ARRAY = "ArrayField"


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def _is_integer(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


TYPE_CHECKS: dict[FieldKind, Callable[[Any], bool]] = {
    FieldKind.FIELD: lambda value: True,
    FieldKind.CHAR: lambda value: isinstance(value, str),
    FieldKind.NUMBER: _is_number,
    FieldKind.INTEGER: _is_integer,
    FieldKind.BOOLEAN: lambda value: isinstance(value, bool),
    FieldKind.DATETIME: lambda value: isinstance(value, datetime),
    # datetime is a date subclass; no calendar-only narrowing
    FieldKind.DATE: lambda value: isinstance(value, date),
    FieldKind.EMAIL: lambda value: isinstance(value, str),
    FieldKind.URL: lambda value: isinstance(value, str),
    FieldKind.JSON: lambda value: isinstance(value, dict | list),
    FieldKind.OBJECT: lambda value: isinstance(value, Mapping),
    FieldKind.ARRAY: lambda value: isinstance(value, list | tuple),
}


def is_absent(value: Any) -> bool:
    """
    Whether a value triggers default/required handling.

    Zero, NaN, False and the empty string count as absent alongside a missing
    key and None. Empty lists and dicts do not.
    """
    if value is MISSING or value is None or value is False:
        return True
    if isinstance(value, str):
        return value == ""
    if _is_number(value):
        return value == 0 or (isinstance(value, float) and math.isnan(value))
    return False


class FieldResult(NamedTuple):
    """Outcome of serializing one value: a value, or skip."""

    value: Any = MISSING
    skip: bool = False


SKIP = FieldResult(skip=True)


# =============================================================================
# BASE FIELD
# =============================================================================

class Field:
    """
    A schema leaf: type check, required flag, default, validator chain,
    optional context rule and mode flags.
    """

    kind: FieldKind = FieldKind.FIELD

    def __init__(
        self,
        *,
        required: bool = True,
        default: Any = MISSING,
        validators: list[Callable] = None,
        context_rule: Callable[[dict], bool] = None,
        write_only: bool = False,
        read_only: bool = False,
    ):
        self.required = required
        self.default_value = default
        self.validators = list(validators or [])
        self.context_rule = context_rule
        self.is_write_only = write_only
        self.is_read_only = read_only

    def __repr__(self):
        return f"{type(self).__name__}(required={self.required})"

    # -------------------------------------------------------------------------
    # Builders
    # -------------------------------------------------------------------------

    def optional(self):
        self.required = False
        return self

    def default(self, value: Any):
        """Static default, or a callable ``(value, root, context) -> default``."""
        self.default_value = value
        return self

    def validate(self, fn: Callable[[Any, dict], bool | str]):
        self.validators.append(fn)
        return self

    def only_if(self, fn: Callable[[dict], bool]):
        """Include the field only when ``fn(context)`` is truthy."""
        self.context_rule = fn
        return self

    def write_only(self):
        self.is_write_only = True
        return self

    def read_only(self):
        self.is_read_only = True
        return self

    def copy(self):
        """Independent copy, safe to keep building on."""
        clone = copy.copy(self)
        clone.validators = list(self.validators)
        return clone

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    @property
    def kind_name(self) -> str:
        """Reported kind: the class's own FieldKind, else the subclass name."""
        if "kind" in type(self).__dict__:
            return str(self.kind)
        return type(self).__name__

    def check_type(self, value: Any) -> bool:
        return TYPE_CHECKS[self.kind](value)

    def _resolve_presence(
        self,
        value: Any,
        context: dict,
        sink: ErrorSink,
        path: str,
        mode: Mode,
        root: Any,
    ) -> FieldResult | None:
        """Mode, context and absence handling. None means keep going."""
        if mode == Mode.INPUT and self.is_read_only:
            return SKIP
        if mode == Mode.OUTPUT and self.is_write_only:
            return SKIP

        if self.context_rule is not None and not self.context_rule(context):
            return SKIP

        if is_absent(value):
            if self.default_value is not MISSING:
                if callable(self.default_value):
                    current = None if value is MISSING else value
                    return FieldResult(self.default_value(current, root, context))
                return FieldResult(copy.deepcopy(self.default_value))
            if self.required and mode != Mode.OUTPUT:
                sink.report_error(path, REQUIRED_MESSAGE)
            return SKIP

        return None

    def _run_validators(self, value: Any, context: dict, sink: ErrorSink, path: str) -> None:
        # every validator runs; the last failure at a path is the one kept
        for validator in self.validators:
            result = validator(value, context)
            if result is True:
                continue
            message = result if isinstance(result, str) and result else VALIDATION_FAILED_MESSAGE
            sink.report_error(path, message)

    def serialize(
        self,
        value: Any,
        context: dict,
        sink: ErrorSink,
        path: str,
        mode: Mode = Mode.BOTH,
        root: Any = None,
    ) -> FieldResult:
        """
        Serialize one value.

        Precedence: mode exclusion, context exclusion, absence (default or
        required error), type check, validators.

        Args:
            value: Raw value, MISSING when the key is absent
            context: Caller-supplied context mapping
            sink: Error sink of the current call
            path: Error path for this value
            mode: Direction of the current call
            root: The item this value was read from

        Returns:
            FieldResult with the value, or SKIP
        """
        presence = self._resolve_presence(value, context, sink, path, mode, root)
        if presence is not None:
            return presence

        if not self.check_type(value):
            sink.report_error(path, f"Invalid {self.kind_name}")
            return SKIP

        self._run_validators(value, context, sink, path)
        return FieldResult(value)

    def describe(self, seen: frozenset = frozenset()) -> dict:
        return {
            "type": self.kind_name,
            "required": self.required,
            "read_only": self.is_read_only,
            "write_only": self.is_write_only,
            "child": None,
            "serializer": None,
        }


# =============================================================================
# SCALAR KINDS
# =============================================================================

class CharField(Field):
    kind = FieldKind.CHAR

    def min_length(self, length: int):
        return self.validate(v.min_length(length))

    def max_length(self, length: int):
        return self.validate(v.max_length(length))

    def enum_options(self, options: list[str]):
        return self.validate(v.one_of(options))


class EmailField(CharField):
    """String field. No address format check is applied by itself."""

    kind = FieldKind.EMAIL


class UrlField(CharField):
    """String field. No URL format check is applied by itself."""

    kind = FieldKind.URL


class NumberField(Field):
    kind = FieldKind.NUMBER

    def min(self, value: float):
        return self.validate(v.min_value(value))

    def max(self, value: float):
        return self.validate(v.max_value(value))


class IntegerField(NumberField):
    kind = FieldKind.INTEGER


class BooleanField(Field):
    kind = FieldKind.BOOLEAN


class DateTimeField(Field):
    kind = FieldKind.DATETIME


class DateField(DateTimeField):
    kind = FieldKind.DATE


class JsonField(Field):
    """Opaque JSON: any dict or list, no structural validation."""

    kind = FieldKind.JSON


# =============================================================================
# COMPOSITE KINDS
# =============================================================================

def is_serializer(candidate: Any) -> bool:
    """Whether candidate exposes a schema and can serialize a nested item."""
    return (
        isinstance(getattr(candidate, "schema", None), Mapping)
        and callable(getattr(candidate, "serialize_nested", None))
    )


def _describe_nested(serializer: Any, seen: frozenset) -> dict | str:
    if id(serializer) in seen:
        return "<recursive>"
    return serializer.describe(_seen=seen)


class ObjectField(Field):
    """Delegates a mapping value to a nested Serializer."""

    kind = FieldKind.OBJECT

    def __init__(self, serializer: Any, **kwargs):
        super().__init__(**kwargs)
        if not is_serializer(serializer):
            raise SchemaDefinitionError("ObjectField expects a Serializer instance")
        self.serializer = serializer

    def serialize(
        self,
        value: Any,
        context: dict,
        sink: ErrorSink,
        path: str,
        mode: Mode = Mode.BOTH,
        root: Any = None,
    ) -> FieldResult:
        presence = self._resolve_presence(value, context, sink, path, mode, root)
        if presence is not None:
            return presence

        nested = sink.descend()
        if nested.exhausted:
            logger.warning(f"Depth limit {sink.max_depth} reached at {path}")
            sink.report_error(path, DEPTH_EXCEEDED_MESSAGE)
            return SKIP

        data = self.serializer.serialize_nested(value, mode=mode, context=context, sink=nested)
        sink.merge(nested, prefix=path)
        # nested output is kept even when it carries errors
        return FieldResult(data)

    def describe(self, seen: frozenset = frozenset()) -> dict:
        description = super().describe(seen)
        description["serializer"] = _describe_nested(self.serializer, seen)
        return description


class ArrayField(Field):
    """
    Validates a list element by element.

    With a nested Serializer child every element yields one output item, so
    the output keeps the input length. With a field child, elements that are
    skipped or fail are dropped and the output may be shorter.
    """

    kind = FieldKind.ARRAY

    def __init__(self, child: Any, **kwargs):
        super().__init__(**kwargs)
        self.child = child
        self.serializer = None

        if is_serializer(child):
            self.serializer = child
        elif not isinstance(child, Field):
            raise SchemaDefinitionError(
                f"ArrayField expects a Field or Serializer child, got {type(child).__name__}"
            )

    def serialize(
        self,
        value: Any,
        context: dict,
        sink: ErrorSink,
        path: str,
        mode: Mode = Mode.BOTH,
        root: Any = None,
    ) -> FieldResult:
        presence = self._resolve_presence(value, context, sink, path, mode, root)
        if presence is not None:
            return presence

        if not isinstance(value, list | tuple):
            sink.report_error(path, EXPECTED_ARRAY_MESSAGE)
            return SKIP

        out = []

        if self.serializer is not None:
            for i, item in enumerate(value):
                nested = sink.descend()
                if nested.exhausted:
                    logger.warning(f"Depth limit {sink.max_depth} reached at {path}[{i}]")
                    sink.report_error(f"{path}[{i}]", DEPTH_EXCEEDED_MESSAGE)
                    out.append({})
                    continue
                out.append(
                    self.serializer.serialize_nested(item, mode=mode, context=context, sink=nested)
                )
                sink.merge(nested, prefix=f"{path}[{i}]")
        else:
            for i, item in enumerate(value):
                result = self.child.serialize(item, context, sink, f"{path}[{i}]", mode, root)
                if not result.skip and result.value is not MISSING:
                    out.append(result.value)

        return FieldResult(out)

    def describe(self, seen: frozenset = frozenset()) -> dict:
        description = super().describe(seen)
        description["child"] = "Serializer" if self.serializer is not None else self.child.kind_name
        return description

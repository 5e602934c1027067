"""
Boundary Policy
fieldserde

Helpers for applying serializers at service boundaries: sanitize what comes
in ("input" mode) and shape what goes out ("output" mode).

Usage:
    @serialize_input(user_serializer)
    def create_user(payload: dict) -> dict:
        ...

    @serialize_output(user_serializer, context={"is_admin": False})
    def get_user(user_id: str) -> dict:
        ...
"""

import functools
import logging
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from fieldserde.exceptions import SerializationFailed
from fieldserde.options import Mode
from fieldserde.output import SerializerOutput
from fieldserde.serializer import Serializer

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SerializerPolicy:
    """
    Policy enforcement for serializers at a boundary.

    Strict policies raise SerializationFailed on any error; lenient policies
    log a warning and hand back the partial output.
    """

    def __init__(self, strict: bool = False):
        self.strict = strict

    def _enforce(
        self,
        serializer: Serializer,
        data: Any,
        mode: Mode,
        context: Mapping = None,
        many: bool = False
    ) -> SerializerOutput:
        output = serializer.serialize(data, mode=mode, context=context, many=many)

        if not output.is_valid():
            if self.strict:
                raise SerializationFailed(
                    serializer=serializer.name,
                    direction=str(mode),
                    errors=output.errors,
                    data=data,
                )
            logger.warning(
                f"{mode} serialization errors for {serializer.name}: "
                f"{list(output.errors.items())[:3]}"
            )

        return output

    def enforce_input(
        self,
        serializer: Serializer,
        data: Any,
        context: Mapping = None,
        many: bool = False
    ) -> SerializerOutput:
        """Run serializer over incoming data in input mode."""
        return self._enforce(serializer, data, Mode.INPUT, context, many)

    def enforce_output(
        self,
        serializer: Serializer,
        data: Any,
        context: Mapping = None,
        many: bool = False
    ) -> SerializerOutput:
        """Run serializer over outgoing data in output mode."""
        return self._enforce(serializer, data, Mode.OUTPUT, context, many)


def serialize_input(
    serializer: Serializer,
    *,
    strict: bool = True,
    context: Mapping = None,
    many: bool = False
):
    """
    Decorator that sanitizes the first positional argument before the call.

    The wrapped callable receives the serialized data in place of the raw
    payload.
    """
    policy = SerializerPolicy(strict=strict)

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(payload, *args, **kwargs):
            output = policy.enforce_input(serializer, payload, context=context, many=many)
            return func(output.data, *args, **kwargs)

        return wrapper
    return decorator


def serialize_output(
    serializer: Serializer,
    *,
    strict: bool = False,
    context: Mapping = None,
    many: bool = False
):
    """Decorator that shapes the wrapped callable's return value."""
    policy = SerializerPolicy(strict=strict)

    def decorator(func: Callable[..., T]) -> Callable[..., Any]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            result = func(*args, **kwargs)
            return policy.enforce_output(serializer, result, context=context, many=many).data

        return wrapper
    return decorator

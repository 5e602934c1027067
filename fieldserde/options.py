"""
Serialize Options
fieldserde

Per-call options for Serializer.serialize(), validated eagerly so that
misuse fails before any traversal begins.
"""

from collections.abc import Mapping
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictBool, ValidationError, field_validator

from fieldserde.exceptions import SerializeOptionsError


class Mode(StrEnum):
    """Direction a payload is travelling in."""

    BOTH = "both"
    INPUT = "input"
    OUTPUT = "output"


OPTION_MESSAGES = {
    "many": "many must be a boolean",
    "mode": f"mode must be one of: {', '.join(m.value for m in Mode)}",
    "context": "context must be a mapping",
}


class SerializeOptions(BaseModel):
    """Validated options for a single serialize() call."""

    model_config = ConfigDict(frozen=True)

    mode: Mode = Field(default=Mode.BOTH)
    many: StrictBool = Field(default=False)
    context: dict[Any, Any] = Field(default_factory=dict)

    @field_validator("context", mode="before")
    @classmethod
    def _plain_mapping(cls, v: Any):
        # lists, strings and other non-mappings are rejected outright
        if not isinstance(v, Mapping):
            raise ValueError(OPTION_MESSAGES["context"])
        return dict(v)

    @classmethod
    def build(
        cls,
        mode: Any = Mode.BOTH,
        many: Any = False,
        context: Any = None
    ) -> "SerializeOptions":
        """
        Build options from raw keyword values.

        ``context=None`` means "no context" and becomes an empty mapping.

        Raises:
            SerializeOptionsError: On the first invalid option.
        """
        raw = {"mode": mode, "many": many, "context": {} if context is None else context}
        try:
            return cls(**raw)
        except ValidationError as e:
            first = e.errors()[0]
            option = str(first["loc"][0]) if first["loc"] else "options"
            raise SerializeOptionsError(
                option=option,
                message=OPTION_MESSAGES.get(option, first["msg"]),
                value=raw.get(option),
            ) from e

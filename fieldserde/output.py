"""
Serializer Output
fieldserde

The result of one serialize() call: the sanitized data tree plus a flat
path-keyed error mapping.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ErrorDetail(BaseModel):
    """One entry of the verbose error list."""

    model_config = ConfigDict(frozen=True)

    path: str
    message: str


class SerializerOutput(BaseModel):
    """
    Sanitized data and errors.

    ``data`` is a mapping for a single item or a list of mappings when the
    call ran with many=True. ``errors`` keeps insertion order.
    """

    model_config = ConfigDict(frozen=True)

    data: Any = None
    errors: dict[str, str] = Field(default_factory=dict)

    def is_valid(self) -> bool:
        return not self.errors

    def first_error(self) -> str | None:
        """First message in insertion order, or None."""
        return next(iter(self.errors.values()), None)

    def verbose_error_list(self) -> list[ErrorDetail]:
        return [ErrorDetail(path=path, message=message) for path, message in self.errors.items()]

    def to_dict(self) -> dict:
        return {"data": self.data, "errors": dict(self.errors)}

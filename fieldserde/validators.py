"""
Convenience Validators
fieldserde

Factories for the common validator callables. Every validator has the
signature ``(value, context) -> True | message``.
"""

import re
from collections.abc import Callable, Iterable
from typing import Any

ValidatorFn = Callable[[Any, dict], bool | str]


def min_value(limit: float) -> ValidatorFn:
    """Value must be >= limit."""
    def check(value, context):
        return value >= limit or f"Must be ≥ {limit}"
    return check


def max_value(limit: float) -> ValidatorFn:
    """Value must be <= limit."""
    def check(value, context):
        return value <= limit or f"Must be ≤ {limit}"
    return check


def min_length(length: int) -> ValidatorFn:
    def check(value, context):
        return len(value) >= length or f"Must be at least {length} characters"
    return check


def max_length(length: int) -> ValidatorFn:
    def check(value, context):
        return len(value) <= length or f"Must be at most {length} characters"
    return check


def one_of(options: Iterable[Any]) -> ValidatorFn:
    """Value must be one of the given options."""
    allowed = list(options)

    def check(value, context):
        return value in allowed or f"Must be one of: {', '.join(str(o) for o in allowed)}"
    return check


def matches(pattern: str | re.Pattern, message: str = "Invalid format") -> ValidatorFn:
    """
    Value must fully match a regular expression.

    Email and URL fields perform no format check of their own; attach one
    of these when the shape matters.
    """
    compiled = re.compile(pattern) if isinstance(pattern, str) else pattern

    def check(value, context):
        return compiled.fullmatch(value) is not None or message
    return check

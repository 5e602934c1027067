"""
Convenience Validator Tests
fieldserde

Tests for fieldserde/validators.py.
"""

import re

from fieldserde import EmailField, Serializer
from fieldserde.validators import matches, max_length, max_value, min_length, min_value, one_of


class TestBounds:
    """Tests for numeric and length bounds."""

    def test_min_value(self):
        check = min_value(18)
        assert check(18, {}) is True
        assert check(17, {}) == "Must be ≥ 18"

    def test_max_value(self):
        check = max_value(1.5)
        assert check(1.5, {}) is True
        assert check(2, {}) == "Must be ≤ 1.5"

    def test_lengths(self):
        assert min_length(2)("ab", {}) is True
        assert min_length(2)("a", {}) == "Must be at least 2 characters"
        assert max_length(2)("ab", {}) is True
        assert max_length(2)("abc", {}) == "Must be at most 2 characters"


class TestOneOf:
    """Tests for enumerated options."""

    def test_accepts_member(self):
        assert one_of(["a", "b"])("a", {}) is True

    def test_rejects_non_member(self):
        assert one_of(["a", "b"])("c", {}) == "Must be one of: a, b"

    def test_accepts_generator(self):
        """Options are materialised once, so generators work repeatedly."""
        check = one_of(x for x in ("a", "b"))
        assert check("b", {}) is True
        assert check("b", {}) is True


class TestMatches:
    """Tests for regular expression validators."""

    EMAIL = r"[^@\s]+@[^@\s]+\.[^@\s]+"

    def test_full_match_required(self):
        check = matches(r"\d+")
        assert check("123", {}) is True
        assert check("123a", {}) == "Invalid format"

    def test_compiled_pattern_and_message(self):
        check = matches(re.compile(r"[a-z]+"), message="Lowercase only")
        assert check("ABC", {}) == "Lowercase only"

    def test_email_field_needs_attached_validator(self):
        """EmailField only checks format when a validator is attached."""
        bare = Serializer({"email": EmailField()})
        checked = Serializer({"email": EmailField().validate(matches(self.EMAIL, "Invalid email"))})

        assert bare.serialize({"email": "nope"}).is_valid()
        assert checked.serialize({"email": "nope"}).errors == {"email": "Invalid email"}
        assert checked.serialize({"email": "a@b.io"}).is_valid()

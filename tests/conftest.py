"""
Pytest Fixtures for fieldserde Tests

Shared serializers, payloads and settings isolation.
"""

from pathlib import Path

import pytest

from fieldserde import (
    ArrayField,
    CharField,
    IntegerField,
    JsonField,
    ObjectField,
    Serializer,
)
from fieldserde.config import SerializerSettings, _reset_settings, configure
from fieldserde.sink import ErrorSink

# =============================================================================
# PATH FIXTURES
# =============================================================================


@pytest.fixture
def project_root() -> Path:
    """Get project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def config_dir(project_root) -> Path:
    """Get the shipped config directory."""
    return project_root / "config"


# =============================================================================
# SETTINGS FIXTURES
# =============================================================================


@pytest.fixture(autouse=True)
def isolate_settings(monkeypatch):
    """Every test starts from default settings with no config directory."""
    monkeypatch.delenv("FIELDSERDE_CONFIG_DIR", raising=False)
    _reset_settings()
    yield
    _reset_settings()


@pytest.fixture
def shallow_settings():
    """Settings allowing only two levels of nesting."""
    settings = SerializerSettings(max_depth=2, metrics_enabled=False)
    configure(settings)
    return settings


@pytest.fixture
def sink() -> ErrorSink:
    """Fresh error sink."""
    return ErrorSink()


# =============================================================================
# SERIALIZER FIXTURES
# =============================================================================


@pytest.fixture
def address_serializer() -> Serializer:
    """Street and city, both required strings."""
    return Serializer({
        "street": CharField(),
        "city": CharField(),
    }, name="address")


@pytest.fixture
def user_serializer(address_serializer) -> Serializer:
    """User schema exercising every composition style."""
    return Serializer({
        "name": CharField(),
        "age": IntegerField().min(18),
        "age_in_two_years": IntegerField()
            .default(lambda _, root, ctx: root["age"] + 2)
            .read_only(),
        "address": ObjectField(address_serializer),
        "tags": ArrayField(CharField().min_length(2)),
        "metadata": JsonField().default({"created_by": "system"}),
    }, name="user")


# =============================================================================
# PAYLOAD FIXTURES
# =============================================================================


@pytest.fixture
def valid_user() -> dict:
    """User payload that passes every contract."""
    return {
        "name": "Ada",
        "age": 36,
        "address": {"street": "42 Loop", "city": "Lagos"},
        "tags": ["admin", "ops"],
        "metadata": {"source": "signup"},
    }

"""Tests for _types.py — Secret and exception classes."""

import pytest
from pydantic import BaseModel, ConfigDict, ValidationError

from envlayers._types import (
    ConversionError,
    EnvError,
    ParseError,
    Secret,
    SourceUnavailableError,
)


class TestEnvError:
    @pytest.mark.parametrize("cls", [ParseError, SourceUnavailableError, ConversionError])
    def test_subclasses(self, cls):
        assert issubclass(cls, EnvError)


class TestParseError:
    def test_message_includes_location(self):
        err = ParseError("unterminated ' quote", source="app.env", line=3)
        assert str(err) == "app.env:3: unterminated ' quote"

    def test_without_source(self):
        assert str(ParseError("bad", line=1)) == "<string>:1: bad"

    def test_to_dict(self):
        assert ParseError("bad", source="a.env", line=2).to_dict() == {
            "error": "ParseError",
            "source": "a.env",
            "line": 2,
            "message": "bad",
        }


class TestSourceUnavailableError:
    def test_message_includes_source(self):
        err = SourceUnavailableError("/etc/app.env", "file does not exist")
        assert "/etc/app.env" in str(err)
        assert err.to_dict()["source"] == "/etc/app.env"


class TestConversionError:
    def test_without_variable(self):
        err = ConversionError("out of range")
        assert str(err) == "out of range"
        assert err.variable is None
        assert err.reason == "invalid"

    def test_with_variable(self):
        err = ConversionError("value is empty or not set", variable="PORT", type="integer", reason="empty")
        assert str(err) == "Environment variable 'PORT' (integer): value is empty or not set"


class TestSecret:
    def test_repr_redacts(self):
        s = Secret("hunter2")
        assert "hunter2" not in repr(s)
        assert "***" in repr(s)

    def test_str_redacts(self):
        assert str(Secret("hunter2")) == "***"

    def test_secret_value_returns_original(self):
        assert Secret("hunter2").secret_value == "hunter2"

    def test_equality(self):
        assert Secret("a") == Secret("a")
        assert Secret("a") != Secret("b")

    def test_not_equal_to_raw(self):
        assert Secret("a") != "a"

    def test_hash(self):
        assert {Secret("a"), Secret("a")} == {Secret("a")}

    def test_bool(self):
        assert bool(Secret("x")) is True
        assert bool(Secret("")) is False


class _SecretModel(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)
    api_key: Secret[str]


class _SecretIntModel(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)
    pin: Secret[int]


class TestSecretPydantic:
    def test_as_pydantic_field(self):
        m = _SecretModel(api_key="raw-value")
        assert isinstance(m.api_key, Secret)
        assert m.api_key.secret_value == "raw-value"

    def test_passthrough_if_already_secret(self):
        s = Secret("wrapped")
        m = _SecretModel(api_key=s)
        assert m.api_key is s

    def test_model_dump_redacts(self):
        dumped = _SecretModel(api_key="my-secret").model_dump()
        assert dumped["api_key"] == "***"

    def test_inner_type_validated(self):
        assert _SecretIntModel(pin=1234).pin.secret_value == 1234
        with pytest.raises(ValidationError):
            _SecretIntModel(pin="abc")

    def test_required_secret_missing_raises(self):
        with pytest.raises(ValidationError):
            _SecretModel()

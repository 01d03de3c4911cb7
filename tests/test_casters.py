"""Tests for _casters.py — built-in casters, Csv, Choices."""

import pytest

from envlayers._casters import Choices, Csv, _cast_bool, _cast_float, _cast_int
from envlayers._types import ConversionError


class TestCastBool:
    @pytest.mark.parametrize("value", ["true", "True", "TRUE", "tRuE"])
    def test_true_literals(self, value):
        assert _cast_bool(value) is True

    @pytest.mark.parametrize("value", ["false", "False", "FALSE"])
    def test_false_literals(self, value):
        assert _cast_bool(value) is False

    @pytest.mark.parametrize("value", ["1", "0", "yes", "no", "on", "t", " true", "truthy"])
    def test_anything_else_raises(self, value):
        with pytest.raises(ValueError, match="Cannot cast"):
            _cast_bool(value)


class TestCastNumbers:
    def test_int(self):
        assert _cast_int("0042") == 42

    def test_int_rejects_trailing_newline(self):
        with pytest.raises(ValueError):
            _cast_int("42\n")

    def test_float_exponent(self):
        assert _cast_float("2.5E-1") == 0.25

    def test_float_trailing_dot(self):
        assert _cast_float("5.") == 5.0

    @pytest.mark.parametrize("value", ["1e999", "-1e999", "9" * 400 + ".0"])
    def test_float_overflow_raises(self, value):
        with pytest.raises(ValueError, match="out of range"):
            _cast_float(value)


class TestCsv:
    def test_basic_split(self):
        assert Csv()("a,b,c") == ["a", "b", "c"]

    def test_builtin_item_type(self):
        assert Csv("integer")("1,2,3") == [1, 2, 3]
        assert Csv("boolean")("true,FALSE") == [True, False]

    def test_callable_item(self):
        assert Csv(str.upper)("a,b") == ["A", "B"]

    def test_custom_delimiter(self):
        assert Csv(delimiter=";")("a;b;c") == ["a", "b", "c"]

    def test_strip_whitespace(self):
        assert Csv()("a , b , c") == ["a", "b", "c"]

    def test_no_strip(self):
        assert Csv(strip=False)("a , b") == ["a ", " b"]

    def test_skips_empty_elements(self):
        assert Csv()("a,,b,") == ["a", "b"]

    def test_empty_input(self):
        assert Csv()("") == []

    def test_container(self):
        result = Csv(container=tuple)("a,b,c")
        assert result == ("a", "b", "c")
        assert isinstance(result, tuple)

    def test_invalid_element_raises_conversion_error(self):
        with pytest.raises(ConversionError) as excinfo:
            Csv("integer")("1,two,3")
        err = excinfo.value
        assert err.type == "csv[integer]"
        assert "element 1" in err.message
        assert isinstance(err.__cause__, ValueError)

    def test_unknown_item_type(self):
        with pytest.raises(ValueError, match="Unknown element type"):
            Csv("decimal")


class TestChoices:
    def test_valid_choice(self):
        assert Choices(["debug", "info", "warning"])("info") == "info"

    def test_invalid_choice_raises(self):
        with pytest.raises(ConversionError, match="not a valid choice") as excinfo:
            Choices(["debug", "info"])("critical")
        assert excinfo.value.type == "choices[string]"

    def test_with_item_type(self):
        assert Choices([1, 2, 3], item="integer")("2") == 2

    def test_invalid_after_cast(self):
        with pytest.raises(ConversionError, match="not a valid choice"):
            Choices([1, 2, 3], item="integer")("5")

    def test_uncastable_value(self):
        with pytest.raises(ConversionError) as excinfo:
            Choices([1, 2, 3], item="integer")("one")
        assert excinfo.value.type == "choices[integer]"

    def test_ignore_case_returns_declared_spelling(self):
        assert Choices(["DEBUG", "Info"], ignore_case=True)("info") == "Info"

    def test_case_sensitive_by_default(self):
        with pytest.raises(ConversionError):
            Choices(["info"])("INFO")

"""
Tests for the Target List Parser.

A target list is either a single path string or a purely positional
list of path strings.
"""

import pytest

from mdot.diagnostics import MissingFieldError, ShapeError, TypeMismatchError
from mdot.targets import parse_target_list
from mdot.values import NIL, Bool, Integer, String, from_python


class TestAcceptedShapes:
    """Test the shapes that parse."""

    def test_single_string(self):
        assert parse_target_list(String("~/.bashrc")) == ["~/.bashrc"]

    def test_list_of_strings(self):
        assert parse_target_list(from_python(["tar", "hello"])) == ["tar", "hello"]

    def test_order_and_duplicates_preserved(self):
        """Never reorder or deduplicate."""
        value = from_python(["b", "a", "b"])
        assert parse_target_list(value) == ["b", "a", "b"]

    def test_integer_keyed_mapping(self):
        """Integer keys declared as a mapping still count as positional."""
        value = from_python({1: "a", 2: "b"})
        assert parse_target_list(value) == ["a", "b"]

    def test_empty_list_allowed_when_optional(self):
        assert parse_target_list(from_python([]), "excludes") == []


class TestRejectedShapes:
    """Test the shapes that are fatal."""

    def test_map_is_shape_error(self):
        """targets = { a = 1, b = 2 } is not a list."""
        with pytest.raises(ShapeError) as exc:
            parse_target_list(from_python({"a": 1, "b": 2}))
        assert '["a"] = 1' in str(exc.value)

    def test_mixed_table_is_shape_error(self):
        value = from_python({1: "a", "extra": "b"})
        with pytest.raises(ShapeError):
            parse_target_list(value)

    def test_non_string_element(self):
        with pytest.raises(TypeMismatchError) as exc:
            parse_target_list(from_python(["a", 2]))
        assert "[2] = 2" in str(exc.value)

    @pytest.mark.parametrize("value", [NIL, Bool(True), Integer(3)])
    def test_wrong_kind(self, value):
        with pytest.raises(TypeMismatchError) as exc:
            parse_target_list(value, "excludes")
        assert "'excludes'" in str(exc.value)

    def test_required_empty(self):
        with pytest.raises(MissingFieldError):
            parse_target_list(from_python([]), required=True)

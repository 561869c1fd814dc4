"""
Target List Parser.

Resolves the "single path or list of paths" shape used by `targets`,
`excludes` and `templates` into an ordered list of path strings.

Accepted shapes:
    "path"                  -> ["path"]
    { "a", "b" }            -> ["a", "b"]

A list is strictly positional: any keyed entry is rejected.
"""

from typing import List

from mdot.diagnostics import MissingFieldError, ShapeError, TypeMismatchError
from mdot.values import ConfigValue, Integer, String, Table, describe_pair


def parse_target_list(value: ConfigValue, field_name: str = "targets", required: bool = False) -> List[str]:
    """
    Parse a TargetList value.

    Args:
        value: String or Table config value
        field_name: Field being parsed, used in error messages
        required: If True, an empty list is an error

    Returns:
        Paths in declaration order (never reordered or deduplicated)

    Raises:
        ShapeError: a table entry is not positional
        TypeMismatchError: wrong value kind, or a non-string entry
        MissingFieldError: required and empty
    """
    if isinstance(value, String):
        paths = [value.value]
    elif isinstance(value, Table):
        paths = []
        for key, item in value.pairs():
            if not isinstance(key, Integer):
                raise ShapeError(
                    f"'{field_name}' must be a list of paths, found {describe_pair(key, item)}"
                )
            if not isinstance(item, String):
                raise TypeMismatchError(
                    f"'{field_name}' element expected type 'String', found {describe_pair(key, item)}"
                )
            paths.append(item.value)
    else:
        raise TypeMismatchError(
            f"'{field_name}' expected type 'String' or 'Table', got '{value.kind}'"
        )

    if required and not paths:
        raise MissingFieldError(f"'{field_name}' must contain at least one path")
    return paths


__all__ = ["parse_target_list"]

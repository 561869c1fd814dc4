"""
Package Normalizer (Config Value Tree -> Package sequence).

Walks the table a configuration file evaluated to and builds one Package
per top-level entry.

Entry shapes:
    [1] = "fish"                      bare name, all defaults
    [2] = { "tmux", links = {...} }   name taken from the table itself
    git = { excludes = "*" }          name taken from the key

Name sources inside a table:
    - positional slot [1], when it holds a String
    - the `name` field
Exactly one may be given. When the entry already has a string key, the key
wins and any inner name only produces a warning.

Policy:
    - Fatal issues raise ManifestError subclasses; nothing is returned.
    - Unknown fields are ignored with a warning.
"""

import logging
from typing import Dict, List, Optional

from mdot.diagnostics import (
    DiagnosticKind,
    DiagnosticReporter,
    MissingFieldError,
    ShapeError,
    TypeMismatchError,
)
from mdot.links import extract_links
from mdot.model import Enabled, OSPackageName, Package
from mdot.targets import parse_target_list
from mdot.values import (
    Bool,
    ConfigValue,
    Function,
    Integer,
    String,
    Table,
    describe,
    describe_pair,
)

logger = logging.getLogger(__name__)

NAME_SLOT = Integer(1)


def _positional_name(tbl: Table) -> Optional[String]:
    # only a String in slot [1] names the package; anything else is a stray value
    value = tbl.get(NAME_SLOT)
    return value if isinstance(value, String) else None


def has_name(tbl: Table) -> bool:
    """True if the table declares a name at slot [1] or in `name`."""
    return _positional_name(tbl) is not None or not tbl.get("name").is_nil()


def _checked_name(value: ConfigValue, where: str) -> str:
    if not isinstance(value, String):
        raise TypeMismatchError(f"package name {where} expected type 'String', got '{value.kind}'")
    if not value.value:
        raise MissingFieldError(f"package name {where} must be non-empty")
    return value.value


def extract_name(tbl: Table) -> str:
    """
    Read a package name from the table itself.

    Raises:
        ShapeError: both [1] and `name` are given
        MissingFieldError: neither is given, or the name is empty
        TypeMismatchError: the name is not a String
    """
    positional = _positional_name(tbl)
    named = tbl.get("name")

    if positional is not None and not named.is_nil():
        raise ShapeError("provide 'name' OR [1] but not both")
    if positional is not None:
        return _checked_name(positional, "at [1]")
    if not named.is_nil():
        return _checked_name(named, "in 'name'")
    raise MissingFieldError("package must have a name (at index [1] or as 'name' field)")


def _package_name(value: ConfigValue) -> OSPackageName:
    if isinstance(value, Bool):
        return value.value
    if isinstance(value, String):
        return value.value
    if isinstance(value, Table):
        names: Dict[str, str] = {}
        for key, item in value.pairs():
            if not isinstance(key, String) or not isinstance(item, String):
                raise ShapeError(
                    f"'package_name' mapping expects os = \"name\" pairs, found {describe_pair(key, item)}"
                )
            names[key.value] = item.value
        return names
    raise TypeMismatchError(
        f"'package_name' expected type 'Boolean', 'String' or 'Table', got '{value.kind}'"
    )


def _enabled(value: ConfigValue) -> Enabled:
    if isinstance(value, Bool):
        return value.value
    if isinstance(value, Function):
        return value.func
    raise TypeMismatchError(f"'enabled' expected type 'Boolean' or 'Function', got '{value.kind}'")


def _depends(value: ConfigValue, reporter: DiagnosticReporter) -> List[Package]:
    tbl = value.as_table()
    if tbl is None:
        raise TypeMismatchError(f"'depends' expected type 'Table', got '{value.kind}'")
    return [normalize_entry(k, v, reporter) for k, v in tbl.pairs()]


def package_from_table(
    key_name: Optional[str], tbl: Table, reporter: Optional[DiagnosticReporter] = None
) -> Package:
    """
    Build a Package from its table definition.

    Args:
        key_name: The entry's string key, or None for positional entries
        tbl: Package definition table
        reporter: Receives warnings

    Returns:
        Package with every recognized field parsed

    Raises:
        ManifestError subclass on the first Fatal issue
    """
    if reporter is None:
        reporter = DiagnosticReporter()

    if key_name is not None:
        if not key_name:
            raise MissingFieldError("package key must be a non-empty name")
        if has_name(tbl):
            inner = [v.value for v in (_positional_name(tbl), tbl.get("name")) if isinstance(v, String)]
            if len(inner) == 1:
                message = f"key '{key_name}' overrides package name '{inner[0]}'"
            else:
                message = f"key '{key_name}' overrides the name given inside the table"
            reporter.warn(DiagnosticKind.AMBIGUITY, message)
        name = key_name
    else:
        name = extract_name(tbl)

    package = Package(name=name)

    for key, value in tbl.pairs():
        if key == NAME_SLOT and isinstance(value, String):
            continue
        if not isinstance(key, String):
            reporter.warn(
                DiagnosticKind.UNKNOWN_KEY,
                f"package '{name}': positional value {describe_pair(key, value)} is ignored",
            )
            continue

        field_name = key.value
        if field_name == "name":
            continue
        elif field_name == "links":
            links = value.as_table()
            if links is None:
                raise TypeMismatchError(
                    f"package '{name}': 'links' expected type 'Table', got '{value.kind}'"
                )
            package.links = extract_links(links, reporter)
        elif field_name in ("excludes", "templates"):
            setattr(package, field_name, parse_target_list(value, field_name))
        elif field_name == "package_name":
            package.package_name = _package_name(value)
        elif field_name == "enabled":
            package.enabled = _enabled(value)
        elif field_name == "depends":
            package.depends = _depends(value, reporter)
        else:
            reporter.warn(DiagnosticKind.UNKNOWN_KEY, f"package '{name}': key '{field_name}' is ignored")

    return package


def normalize_entry(
    key: ConfigValue, value: ConfigValue, reporter: Optional[DiagnosticReporter] = None
) -> Package:
    """
    Normalize one top-level (or `depends`) entry into a Package.

    Raises:
        ShapeError: unsupported key/value combination
        MissingFieldError / TypeMismatchError: from the field parsers
    """
    if isinstance(key, Integer) and isinstance(value, String):
        if not value.value:
            raise MissingFieldError(f"package at [{key.value}] has an empty name")
        return Package(name=value.value)
    if isinstance(key, Integer) and isinstance(value, Table):
        return package_from_table(None, value, reporter)
    if isinstance(key, String) and isinstance(value, Table):
        return package_from_table(key.value, value, reporter)
    raise ShapeError(f"Unsupported package format: {describe_pair(key, value)}")


def normalize_manifest(tree: ConfigValue, reporter: Optional[DiagnosticReporter] = None) -> List[Package]:
    """
    Normalize a whole manifest in a single pass.

    Args:
        tree: The value the configuration file evaluated to (must be a Table)
        reporter: Receives warnings in traversal order

    Returns:
        Packages in declaration order

    Raises:
        ManifestError subclass on the first Fatal issue. No partial
        result is returned.
    """
    if reporter is None:
        reporter = DiagnosticReporter()

    root = tree.as_table()
    if root is None:
        raise ShapeError(f"manifest must evaluate to a Table, got {describe(tree)}")

    packages = []
    for key, value in root.pairs():
        package = normalize_entry(key, value, reporter)
        logger.debug("normalized package '%s' (%d links)", package.name, len(package.links))
        packages.append(package)
    return packages


__all__ = [
    "normalize_manifest",
    "normalize_entry",
    "package_from_table",
    "extract_name",
    "has_name",
]

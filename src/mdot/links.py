"""
Link Normalizer.

Turns the table bound to a package's `links` field into LinkObjects.

Two entry forms are accepted, and may be mixed in one table:

    Object form (positional entry holding a table):
        { source = "src", targets = { "a", "b" }, overwrite = true }

    Map shorthand (the key is the source):
        ["bashrc.sh"] = "~/.bashrc"
        ["nvim"] = { "~/.config/nvim", "~/.vim" }

Shorthand has no slot for flags: overwrite and backup are always False.
"""

from typing import List, Optional

from mdot.diagnostics import (
    DiagnosticKind,
    DiagnosticReporter,
    MissingFieldError,
    ShapeError,
    TypeMismatchError,
)
from mdot.model import LinkObject
from mdot.targets import parse_target_list
from mdot.values import Bool, Integer, String, Table, describe, describe_pair

LINK_FIELDS = ("source", "targets", "overwrite", "backup")


def _flag(tbl: Table, field_name: str) -> bool:
    value = tbl.get(field_name)
    if value.is_nil():
        return False
    if not isinstance(value, Bool):
        raise TypeMismatchError(
            f"Link '{field_name}' expected type 'Boolean', got '{value.kind}'"
        )
    return value.value


def link_from_object(tbl: Table, reporter: Optional[DiagnosticReporter] = None) -> LinkObject:
    """
    Build a LinkObject from the object form.

    Raises:
        MissingFieldError: 'source' or 'targets' absent, or targets empty
        TypeMismatchError: a field has the wrong type
    """
    source = tbl.get("source")
    if source.is_nil():
        raise MissingFieldError("Link must contain 'source'")
    if not isinstance(source, String):
        raise TypeMismatchError(f"Link 'source' expected type 'String', got '{source.kind}'")

    targets = tbl.get("targets")
    if targets.is_nil():
        raise MissingFieldError(f"Link '{source.value}' must contain 'targets'")

    link = LinkObject(
        source=source.value,
        targets=parse_target_list(targets, "targets", required=True),
        overwrite=_flag(tbl, "overwrite"),
        backup=_flag(tbl, "backup"),
    )

    if reporter is None:
        reporter = DiagnosticReporter()
    for key, _ in tbl.pairs():
        if isinstance(key, String) and key.value in LINK_FIELDS:
            continue
        reporter.warn(
            DiagnosticKind.UNKNOWN_KEY,
            f"Link '{link.source}': key {describe(key)} is ignored",
        )
    return link


def extract_links(links: Table, reporter: Optional[DiagnosticReporter] = None) -> List[LinkObject]:
    """
    Normalize every entry of a `links` table.

    Args:
        links: The table bound to `links`
        reporter: Receives warnings for ignored link keys

    Returns:
        One LinkObject per entry, in declaration order.
        Links sharing a source or target are kept as separate entries.

    Raises:
        ShapeError: an entry matches neither form
        MissingFieldError / TypeMismatchError: from the entry parsers
    """
    result: List[LinkObject] = []
    for key, value in links.pairs():
        if isinstance(key, Integer) and isinstance(value, Table):
            result.append(link_from_object(value, reporter))
        elif isinstance(key, String) and isinstance(value, (String, Table)):
            result.append(LinkObject(
                source=key.value,
                targets=parse_target_list(value, "targets", required=True),
            ))
        else:
            raise ShapeError(f"expected Link element, found {describe_pair(key, value)}")
    return result


__all__ = ["extract_links", "link_from_object", "LINK_FIELDS"]

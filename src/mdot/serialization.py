"""
Serialization helpers for normalized packages (Package, LinkObject).

Provides JSON/YAML rendering via an intermediate dict representation.
Field order follows the model so dumps stay stable and diffable.

A deferred `enabled` predicate cannot be serialized; it is rendered as
DEFERRED and rejected when reading back.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List

import yaml

from mdot.model import LinkObject, Package

DEFERRED = "<deferred>"


def link_to_dict(link: LinkObject) -> Dict[str, Any]:
    return {
        "source": link.source,
        "targets": list(link.targets),
        "overwrite": link.overwrite,
        "backup": link.backup,
    }


def link_from_dict(d: Dict[str, Any]) -> LinkObject:
    return LinkObject(
        source=d["source"],
        targets=list(d["targets"]),
        overwrite=d.get("overwrite", False),
        backup=d.get("backup", False),
    )


def package_to_dict(p: Package) -> Dict[str, Any]:
    return {
        "name": p.name,
        "package_name": p.package_name,
        "enabled": DEFERRED if callable(p.enabled) else p.enabled,
        "depends": [package_to_dict(dep) for dep in p.depends],
        "links": [link_to_dict(link) for link in p.links],
        "excludes": list(p.excludes),
        "templates": list(p.templates),
    }


def package_from_dict(d: Dict[str, Any]) -> Package:
    enabled = d.get("enabled", True)
    if not isinstance(enabled, bool):
        raise TypeError(f"cannot restore 'enabled' value {enabled!r} for package '{d.get('name')}'")
    return Package(
        name=d["name"],
        package_name=d.get("package_name"),
        enabled=enabled,
        depends=[package_from_dict(dep) for dep in d.get("depends", [])],
        links=[link_from_dict(link) for link in d.get("links", [])],
        excludes=list(d.get("excludes", [])),
        templates=list(d.get("templates", [])),
    )


def packages_to_json(packages: List[Package]) -> str:
    return json.dumps([package_to_dict(p) for p in packages], indent=2)


def packages_from_json(s: str) -> List[Package]:
    return [package_from_dict(d) for d in json.loads(s)]


def packages_to_yaml(packages: List[Package]) -> str:
    return yaml.safe_dump([package_to_dict(p) for p in packages], sort_keys=False)


def packages_from_yaml(s: str) -> List[Package]:
    return [package_from_dict(d) for d in yaml.safe_load(s) or []]

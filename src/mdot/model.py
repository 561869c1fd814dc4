"""
Core Manifest Model Objects

Defines the validated, strongly typed result of normalizing a manifest.

These are pure data classes representing:
    - LinkObjects (source -> targets file-link declarations)
    - Packages (named deployment units)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about the config tree they were built from
        - Are built once, in a single pass, and not modified afterwards
        - Represent declarations, not deployment behavior
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Union

# OS install name: use the package name as-is (True), skip (False),
# a single install name, or a per-OS mapping such as {"arch": "hyprland"}
OSPackageName = Union[bool, str, Dict[str, str]]

# Either a fixed flag or a predicate evaluated later
Enabled = Union[bool, Callable[[], bool]]


@dataclass
class LinkObject:
    """
    A single file-link declaration.

    Properties:
        source:
            Path inside the package to link from

        targets:
            Destination paths, in declaration order.
            Never empty.

        overwrite:
            Replace an existing destination

        backup:
            Keep a copy of an existing destination before replacing it

    IMPORTANT:
        Two links may share a source or a destination.
        Conflicts are a deployment-time concern.
    """

    source: str
    targets: List[str]
    overwrite: bool = False
    backup: bool = False

    def __post_init__(self):
        if not self.targets:
            raise ValueError(f"link '{self.source}' must have at least one target")


@dataclass
class Package:
    """
    A named deployment unit.

    Properties:
        name:
            Non-empty package identifier

        package_name:
            OS install name (see OSPackageName). None when not declared.

        enabled:
            bool, or a zero-argument predicate deferred to deployment time

        depends:
            Nested packages, as declared.
            Parsed structurally only; never resolved or deduplicated by name.

        links:
            Link declarations in declaration order

        excludes:
            Path patterns to skip when deploying

        templates:
            Paths rendered as templates when deploying
    """

    name: str
    package_name: Optional[OSPackageName] = None
    enabled: Enabled = True
    depends: List["Package"] = field(default_factory=list)
    links: List[LinkObject] = field(default_factory=list)
    excludes: List[str] = field(default_factory=list)
    templates: List[str] = field(default_factory=list)

    def __post_init__(self):
        if not self.name:
            raise ValueError("package name must be non-empty")

    def is_enabled(self) -> bool:
        """
        Resolve the enabled flag, calling the predicate if there is one.

        Returns:
            True if the package should be deployed
        """
        if callable(self.enabled):
            return bool(self.enabled())
        return self.enabled

    def get_link(self, source: str) -> Optional[LinkObject]:
        """
        Retrieve the first link declared for a source path.

        Args:
            source: Link source path

        Returns:
            LinkObject or None if not found
        """
        for link in self.links:
            if link.source == source:
                return link
        return None

    def get_dependency(self, name: str) -> Optional["Package"]:
        """
        Retrieve a directly declared dependency by name.

        Args:
            name: Package name

        Returns:
            Package or None if not found
        """
        for dep in self.depends:
            if dep.name == name:
                return dep
        return None


def get_package(packages: List[Package], name: str) -> Optional[Package]:
    """Retrieve the first top-level package with the given name."""
    for package in packages:
        if package.name == name:
            return package
    return None

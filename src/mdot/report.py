"""
Manifest Report: inventory of a normalized package sequence.

Provides lightweight, read-only checks over Package objects:
    - Package / link / path counts
    - Duplicate top-level package names
    - Destinations claimed by more than one link
    - Packages that declare nothing to deploy

IMPORTANT: This does NOT modify, resolve or deduplicate anything.
Findings here are hints for the user, not normalization diagnostics.
"""

from __future__ import annotations

from collections import Counter, defaultdict
from dataclasses import dataclass, field
from typing import Dict, List

from mdot.model import Package


@dataclass
class ManifestReport:
    """Summary of a normalized manifest."""

    total_packages: int = 0
    total_links: int = 0
    total_targets: int = 0
    total_excludes: int = 0
    total_templates: int = 0
    total_dependencies: int = 0
    disabled_packages: List[str] = field(default_factory=list)

    duplicate_names: List[str] = field(default_factory=list)
    shared_targets: Dict[str, List[str]] = field(default_factory=dict)  # target -> "pkg:source" claims
    empty_packages: List[str] = field(default_factory=list)

    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        """Add a warning to the report."""
        if msg not in self.warnings:
            self.warnings.append(msg)


def analyze_packages(packages: List[Package]) -> ManifestReport:
    """
    Build a ManifestReport for top-level packages.

    Deferred `enabled` predicates are not evaluated; only packages with a
    literal `enabled = false` count as disabled.
    """
    report = ManifestReport(total_packages=len(packages))
    claims: Dict[str, List[str]] = defaultdict(list)

    for package in packages:
        report.total_links += len(package.links)
        report.total_excludes += len(package.excludes)
        report.total_templates += len(package.templates)
        report.total_dependencies += len(package.depends)
        if package.enabled is False:
            report.disabled_packages.append(package.name)
        if not package.links and not package.depends and package.package_name is None:
            report.empty_packages.append(package.name)

        for link in package.links:
            report.total_targets += len(link.targets)
            for target in link.targets:
                claims[target].append(f"{package.name}:{link.source}")

    counts = Counter(p.name for p in packages)
    report.duplicate_names = [name for name, n in counts.items() if n > 1]
    report.shared_targets = {t: who for t, who in claims.items() if len(who) > 1}

    if report.duplicate_names:
        report.add_warning(f"Duplicate package names: {', '.join(report.duplicate_names)}")

    for target, who in report.shared_targets.items():
        report.add_warning(f"Target '{target}' is linked more than once: {', '.join(who)}")

    return report

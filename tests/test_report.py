"""
Tests for the Manifest Report.

Tests verify that the report correctly:
    - Counts packages, links and paths
    - Flags duplicate names and shared destinations
    - Leaves the packages untouched
"""

from mdot.model import LinkObject, Package
from mdot.report import analyze_packages


def test_counts():
    packages = [
        Package(name="fish"),
        Package(
            name="alacritty",
            links=[LinkObject(source="src", targets=["tar", "hello"])],
            excludes=["a"],
            templates=["b", "c"],
            depends=[Package(name="fish")],
        ),
    ]
    report = analyze_packages(packages)

    assert report.total_packages == 2
    assert report.total_links == 1
    assert report.total_targets == 2
    assert report.total_excludes == 1
    assert report.total_templates == 2
    assert report.total_dependencies == 1
    assert report.empty_packages == ["fish"]
    assert report.warnings == []


def test_duplicate_names():
    packages = [Package(name="fish"), Package(name="fish")]
    report = analyze_packages(packages)

    assert report.duplicate_names == ["fish"]
    assert any("Duplicate package names" in w for w in report.warnings)
    # Nothing is deduplicated
    assert len(packages) == 2


def test_shared_targets():
    packages = [
        Package(name="a", links=[LinkObject(source="x", targets=["~/.bashrc"])]),
        Package(name="b", links=[LinkObject(source="y", targets=["~/.bashrc", "~/.other"])]),
    ]
    report = analyze_packages(packages)

    assert report.shared_targets == {"~/.bashrc": ["a:x", "b:y"]}
    assert len(report.warnings) == 1


def test_disabled_packages():
    packages = [
        Package(name="a", enabled=False),
        Package(name="b", enabled=lambda: False),
    ]
    report = analyze_packages(packages)
    assert report.disabled_packages == ["a"]


def test_empty_manifest():
    report = analyze_packages([])
    assert report.total_packages == 0
    assert report.warnings == []

"""
mdot Manifest Package

Turns the evaluated configuration of a dotfile/package deployment tool into
a validated, strongly typed list of Packages.

ARCHITECTURAL GUARANTEE:
------------------------
The normalizer contains ZERO knowledge of:
    - Filesystem linking or deployment
    - OS package managers
    - Dependency resolution
    - Hook execution

It defines WHAT was declared only.

Everything that acts on the declarations lives downstream.
"""

__version__ = "0.1.0"

"""
Diagnostics for manifest normalization.

Two severities:
    WARNING  recoverable; a documented fallback is applied and the pass continues
    FATAL    the pass is aborted; no partial package sequence is returned

Fatal issues are raised as ManifestError subclasses and propagate untouched
to the top-level caller. Warnings are handed to a DiagnosticReporter, which
records them in traversal order and logs them as they occur.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

logger = logging.getLogger(__name__)


class Severity(Enum):
    WARNING = "warning"
    FATAL = "fatal"


class DiagnosticKind(Enum):
    """What went wrong, independent of how it is handled."""

    SHAPE = "shape"                  # pair matches no recognized format
    MISSING_FIELD = "missing-field"  # required field absent
    TYPE_MISMATCH = "type-mismatch"  # field present with the wrong type
    AMBIGUITY = "ambiguity"          # two exclusive name sources supplied
    UNKNOWN_KEY = "unknown-key"      # unrecognized field key


@dataclass(frozen=True)
class Diagnostic:
    severity: Severity
    kind: DiagnosticKind
    message: str

    def __str__(self) -> str:
        return f"[{self.severity.value}] {self.message}"


class ManifestError(Exception):
    """Base class for Fatal normalization errors."""

    kind = DiagnosticKind.SHAPE

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def diagnostic(self) -> Diagnostic:
        return Diagnostic(Severity.FATAL, self.kind, self.message)


class ShapeError(ManifestError):
    """A key/value pair matches no recognized package or link format."""

    kind = DiagnosticKind.SHAPE


class MissingFieldError(ManifestError):
    """A required field (source, targets, or a name) is absent."""

    kind = DiagnosticKind.MISSING_FIELD


class TypeMismatchError(ManifestError):
    """A field is present but has the wrong type."""

    kind = DiagnosticKind.TYPE_MISMATCH


class DiagnosticReporter:
    """
    Collects warnings emitted during a single normalization pass.

    Each warning is logged immediately so its position in the log stream
    relative to other output tells which package/link it belongs to.
    """

    def __init__(self, log: Optional[logging.Logger] = None):
        self.diagnostics: List[Diagnostic] = []
        self._log = log or logger

    def warn(self, kind: DiagnosticKind, message: str) -> Diagnostic:
        diagnostic = Diagnostic(Severity.WARNING, kind, message)
        self.diagnostics.append(diagnostic)
        self._log.warning("%s", message)
        return diagnostic

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity is Severity.WARNING]

    def __len__(self) -> int:
        return len(self.diagnostics)


__all__ = [
    "Severity",
    "DiagnosticKind",
    "Diagnostic",
    "ManifestError",
    "ShapeError",
    "MissingFieldError",
    "TypeMismatchError",
    "DiagnosticReporter",
]

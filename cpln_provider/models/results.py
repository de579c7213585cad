"""
Result Models

Dataclass models for handler diagnostics and plan results.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List
from enum import Enum


class Severity(Enum):
    """Severity of a diagnostic."""

    ERROR = "error"
    WARNING = "warning"


@dataclass
class Diagnostic:
    """A single error or warning produced by a resource handler."""

    severity: Severity
    summary: str
    detail: str = ""
    attribute: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "severity": self.severity.value,
            "summary": self.summary,
        }
        if self.detail:
            result["detail"] = self.detail
        if self.attribute:
            result["attribute"] = self.attribute
        return result

    def __str__(self) -> str:
        prefix = f"{self.attribute}: " if self.attribute else ""
        if self.detail:
            return f"{prefix}{self.summary}: {self.detail}"
        return f"{prefix}{self.summary}"


class Diagnostics(list):
    """
    Ordered collection of diagnostics.

    An empty collection means the operation succeeded.
    """

    @classmethod
    def from_error(cls, error: Exception) -> "Diagnostics":
        """Wrap an exception as a single error diagnostic, text verbatim."""
        return cls([Diagnostic(Severity.ERROR, str(error))])

    @classmethod
    def error(
        cls, summary: str, detail: str = "", attribute: Optional[str] = None
    ) -> "Diagnostics":
        return cls([Diagnostic(Severity.ERROR, summary, detail, attribute)])

    def add_error(
        self, summary: str, detail: str = "", attribute: Optional[str] = None
    ) -> None:
        self.append(Diagnostic(Severity.ERROR, summary, detail, attribute))

    def add_warning(
        self, summary: str, detail: str = "", attribute: Optional[str] = None
    ) -> None:
        self.append(Diagnostic(Severity.WARNING, summary, detail, attribute))

    @property
    def has_error(self) -> bool:
        """Check if any diagnostic is an error."""
        return any(d.is_error for d in self)

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for d in self if d.is_error]

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self if not d.is_error]

    def __repr__(self) -> str:
        return f"Diagnostics(errors={len(self.errors)}, warnings={len(self.warnings)})"


class PlanAction(Enum):
    """Action planned for a single resource."""

    CREATE = "create"
    UPDATE = "update"
    REPLACE = "replace"
    DELETE = "delete"
    NO_OP = "no-op"


@dataclass
class PlannedChange:
    """Planned change for one resource address."""

    address: str
    action: PlanAction
    changed_fields: List[str] = field(default_factory=list)

    @property
    def is_no_op(self) -> bool:
        return self.action == PlanAction.NO_OP

    def to_dict(self) -> Dict[str, Any]:
        return {
            "address": self.address,
            "action": self.action.value,
            "changed_fields": self.changed_fields,
        }

    def __repr__(self) -> str:
        return f"PlannedChange(address={self.address}, action={self.action.value})"


@dataclass
class ApplyResult:
    """Result of applying a plan."""

    applied: List[PlannedChange] = field(default_factory=list)
    diagnostics: Diagnostics = field(default_factory=Diagnostics)

    @property
    def is_success(self) -> bool:
        """Check if every planned change was applied without errors."""
        return not self.diagnostics.has_error

    def __repr__(self) -> str:
        return f"ApplyResult(applied={len(self.applied)}, success={self.is_success})"

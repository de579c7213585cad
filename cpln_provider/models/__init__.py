"""
cpln-provider Domain Models

Clean dataclass-based models for type-safe data handling.
"""

from .results import (
    Severity,
    Diagnostic,
    Diagnostics,
    PlanAction,
    PlannedChange,
    ApplyResult,
)
from .base import (
    Base,
    Link,
)
from .domain import (
    Domain,
    DomainSpec,
    DomainPort,
    DomainRoute,
)
from .secret import Secret

__all__ = [
    # Results
    "Severity",
    "Diagnostic",
    "Diagnostics",
    "PlanAction",
    "PlannedChange",
    "ApplyResult",
    # Base
    "Base",
    "Link",
    # Domain
    "Domain",
    "DomainSpec",
    "DomainPort",
    "DomainRoute",
    # Secret
    "Secret",
]

"""
cpln-provider Services

Service layer for state persistence and the resource lifecycle.
"""

from .state_service import StateService
from .plan_service import PlanService, parse_address

__all__ = [
    "StateService",
    "PlanService",
    "parse_address",
]

"""
cpln-provider Base Command Classes

Abstract base classes for consistent command structure.
"""

from .base_command import BaseCommand
from .provider_command import ProviderCommand

__all__ = [
    "BaseCommand",
    "ProviderCommand",
]

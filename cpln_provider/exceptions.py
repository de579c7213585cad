"""
cpln-provider Exception Hierarchy

Clean exception hierarchy for consistent error handling across the provider.
"""

from typing import Optional


class CplnError(Exception):
    """Base exception for all cpln-provider errors."""

    def __init__(self, message: str, context: Optional[str] = None):
        self.message = message
        self.context = context
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format error message with optional context."""
        if self.context:
            return f"{self.message}\nContext: {self.context}"
        return self.message


class ConfigurationError(CplnError):
    """Raised when configuration is invalid or missing."""

    pass


class ValidationError(CplnError):
    """Raised when resource configuration fails schema validation."""

    pass


class StateError(CplnError):
    """Raised when state file operations fail."""

    pass


class APIError(CplnError):
    """Raised when the control-plane API answers with a non-success status."""

    def __init__(
        self, message: str, status_code: int = 0, context: Optional[str] = None
    ):
        self.status_code = status_code
        super().__init__(message, context)

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    @property
    def is_conflict(self) -> bool:
        return self.status_code == 409


class ResourceExistsError(APIError):
    """Raised when creating an object that already exists remotely."""

    def __init__(self, kind: str, name: str):
        self.kind = kind
        self.name = name
        message = f"{kind} '{name}' already exists"
        super().__init__(message, status_code=409)


class ResourceNotFoundError(APIError):
    """Raised when an object addressed by the caller does not exist."""

    def __init__(self, kind: str, name: str):
        self.kind = kind
        self.name = name
        message = f"{kind} '{name}' not found"
        super().__init__(message, status_code=404)


class UnknownResourceTypeError(ConfigurationError):
    """Raised when a config address names an unsupported resource type."""

    def __init__(self, resource_type: str, available_types: list[str]):
        self.resource_type = resource_type
        self.available_types = available_types
        message = f"Resource type '{resource_type}' is not supported"
        context = f"Available types: {', '.join(available_types)}"
        super().__init__(message, context)

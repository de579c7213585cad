"""
Base Resource Class

Abstract base for all resource handlers.
Provides common functionality and structure.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from cpln_provider.client import Client
from cpln_provider.exceptions import CplnError
from cpln_provider.models.results import Diagnostics
from cpln_provider.resource_data import ResourceData
from cpln_provider.schema import ResourceSchema


class BaseResource(ABC):
    """
    Abstract resource handler.

    Provides:
    - Schema access and config validation
    - ResourceData construction
    - Uniform error capture into diagnostics
    - Passthrough import (the import id becomes the resource id)
    """

    type_name: str = ""
    schema: ResourceSchema

    OPERATIONS = ("create", "read", "update", "delete")

    def __init__(self, client: Client):
        self.client = client

    def validate(self, config: Dict[str, Any]) -> Diagnostics:
        """Normalize and validate a config block against the schema."""
        return self.schema.validate(self.schema.normalize(config))

    def resource_data(
        self,
        state: Optional[Dict[str, Any]] = None,
        config: Optional[Dict[str, Any]] = None,
        resource_id: Optional[str] = None,
    ) -> ResourceData:
        return ResourceData(self.schema, state=state, config=config, resource_id=resource_id)

    @abstractmethod
    def create(self, d: ResourceData) -> Diagnostics:
        pass

    @abstractmethod
    def read(self, d: ResourceData) -> Diagnostics:
        pass

    @abstractmethod
    def update(self, d: ResourceData) -> Diagnostics:
        pass

    @abstractmethod
    def delete(self, d: ResourceData) -> Diagnostics:
        pass

    def import_state(self, d: ResourceData, import_id: str) -> Diagnostics:
        d.set_id(import_id)
        return Diagnostics()

    def run(self, operation: str, d: ResourceData) -> Diagnostics:
        """
        Run a CRUD operation with error capture.

        Args:
            operation: One of create, read, update, delete
            d: Resource data for the operation

        Returns:
            Diagnostics produced by the handler
        """
        if operation not in self.OPERATIONS:
            raise ValueError(f"Unknown operation: {operation}")

        try:
            return getattr(self, operation)(d) or Diagnostics()
        except CplnError as e:
            return Diagnostics.from_error(e)

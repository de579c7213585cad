"""
cpln-provider Resources

Registry of supported resource types.
"""

from typing import Dict, Type

from cpln_provider.client import Client
from cpln_provider.exceptions import UnknownResourceTypeError
from .base import BaseResource
from .domain_route import DomainRouteResource
from .secret import SecretResource

RESOURCE_TYPES: Dict[str, Type[BaseResource]] = {
    DomainRouteResource.type_name: DomainRouteResource,
    SecretResource.type_name: SecretResource,
}


def get_resource(resource_type: str, client: Client) -> BaseResource:
    """
    Instantiate the handler for a resource type.

    Raises:
        UnknownResourceTypeError: If the type is not supported
    """
    if resource_type not in RESOURCE_TYPES:
        raise UnknownResourceTypeError(resource_type, sorted(RESOURCE_TYPES))
    return RESOURCE_TYPES[resource_type](client)


__all__ = [
    "BaseResource",
    "DomainRouteResource",
    "SecretResource",
    "RESOURCE_TYPES",
    "get_resource",
]

"""
Domain Route Resource

Prefix-based routing rule attaching a workload to one port of a domain.
"""

import re
from typing import Optional

from cpln_provider.constants import DEFAULT_DOMAIN_PORT, RESOURCE_DOMAIN_ROUTE
from cpln_provider.exceptions import APIError
from cpln_provider.helpers import get_name_from_self_link
from cpln_provider.models.domain import DomainRoute
from cpln_provider.models.results import Diagnostics
from cpln_provider.resource_data import ResourceData
from cpln_provider.resources.base import BaseResource
from cpln_provider.schema import Field, FieldType, ResourceSchema

# {domain_link}_{domain_port}_{prefix}; prefixes always start with '/'
IMPORT_ID_PATTERN = re.compile(r"^(?P<link>.+)_(?P<port>\d+)_(?P<prefix>/.*)$")

DOMAIN_ROUTE_SCHEMA = ResourceSchema(
    {
        "domain_link": Field(FieldType.STRING, required=True, force_new=True),
        "domain_port": Field(
            FieldType.INT, optional=True, force_new=True, default=DEFAULT_DOMAIN_PORT
        ),
        "prefix": Field(FieldType.STRING, required=True, force_new=True),
        "replace_prefix": Field(FieldType.STRING, optional=True),
        "workload_link": Field(FieldType.STRING, required=True),
        "port": Field(FieldType.INT, optional=True),
    }
)


def domain_route_id(domain_link: str, domain_port: int, prefix: str) -> str:
    return f"{domain_link}_{domain_port}_{prefix}"


def _route_from_data(d: ResourceData) -> DomainRoute:
    return DomainRoute(
        prefix=d.get("prefix"),
        replace_prefix=d.get("replace_prefix") or None,
        workload_link=d.get("workload_link"),
        port=d.get("port"),
    )


def set_domain_route(
    d: ResourceData, domain_link: str, domain_port: int, route: Optional[DomainRoute]
) -> Diagnostics:
    if route is None:
        d.set_id("")
        return Diagnostics()

    d.set_id(domain_route_id(domain_link, domain_port, route.prefix))

    d.set("domain_link", domain_link)
    d.set("domain_port", domain_port)
    d.set("prefix", route.prefix)
    d.set("replace_prefix", route.replace_prefix)
    d.set("workload_link", route.workload_link)
    d.set("port", route.port)

    return Diagnostics()


class DomainRouteResource(BaseResource):
    """Handler for cpln_domain_route."""

    type_name = RESOURCE_DOMAIN_ROUTE
    schema = DOMAIN_ROUTE_SCHEMA

    def create(self, d: ResourceData) -> Diagnostics:
        domain_link = d.get("domain_link")
        domain_port = d.get("domain_port")
        route = _route_from_data(d)

        try:
            self.client.add_domain_route(
                get_name_from_self_link(domain_link), domain_port, route
            )
        except APIError as e:
            return Diagnostics.from_error(e)

        return set_domain_route(d, domain_link, domain_port, route)

    def read(self, d: ResourceData) -> Diagnostics:
        domain_link = d.get("domain_link")
        domain_port = d.get("domain_port")
        prefix = d.get("prefix")

        try:
            domain, _ = self.client.get_domain(get_name_from_self_link(domain_link))
        except APIError as e:
            if e.is_not_found:
                return set_domain_route(d, domain_link, domain_port, None)
            return Diagnostics.from_error(e)

        for port in (domain.spec.ports if domain.spec else None) or []:
            if port.number != domain_port or not port.routes:
                continue

            route = port.find_route(prefix)
            if route is not None:
                return set_domain_route(d, domain_link, domain_port, route)

        # Route removed outside of this provider
        return set_domain_route(d, domain_link, domain_port, None)

    def update(self, d: ResourceData) -> Diagnostics:
        if not d.has_changes("replace_prefix", "workload_link", "port"):
            return Diagnostics()

        domain_link = d.get("domain_link")
        domain_port = d.get("domain_port")
        route = _route_from_data(d)

        try:
            self.client.update_domain_route(
                get_name_from_self_link(domain_link), domain_port, route
            )
        except APIError as e:
            return Diagnostics.from_error(e)

        return set_domain_route(d, domain_link, domain_port, route)

    def delete(self, d: ResourceData) -> Diagnostics:
        domain_link = d.get("domain_link")
        domain_port = d.get("domain_port")
        prefix = d.get("prefix")

        try:
            self.client.remove_domain_route(
                get_name_from_self_link(domain_link), domain_port, prefix
            )
        except APIError as e:
            return Diagnostics.from_error(e)

        d.set_id("")
        return Diagnostics()

    def import_state(self, d: ResourceData, import_id: str) -> Diagnostics:
        match = IMPORT_ID_PATTERN.match(import_id)
        if not match:
            return Diagnostics.error(
                "Invalid import id",
                f"Expected '<domain_link>_<domain_port>_<prefix>', got: '{import_id}'",
            )

        d.set("domain_link", match.group("link"))
        d.set("domain_port", int(match.group("port")))
        d.set("prefix", match.group("prefix"))
        d.set_id(import_id)
        return Diagnostics()

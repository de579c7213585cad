"""
Domain Models

Dataclass models for domains, domain ports and routes.
Unknown route, port and spec keys are carried through so that a route change
does not drop settings the provider does not manage.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .base import Base

ROUTE_KEYS = ("prefix", "replacePrefix", "workloadLink", "port")


@dataclass
class DomainRoute:
    """Prefix-based route attaching a workload to a domain port."""

    prefix: Optional[str] = None
    replace_prefix: Optional[str] = None
    workload_link: Optional[str] = None
    port: Optional[int] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DomainRoute":
        return cls(
            prefix=data.get("prefix"),
            replace_prefix=data.get("replacePrefix"),
            workload_link=data.get("workloadLink"),
            port=data.get("port"),
            extra={k: v for k, v in data.items() if k not in ROUTE_KEYS},
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = dict(self.extra)
        if self.prefix is not None:
            result["prefix"] = self.prefix
        if self.replace_prefix is not None:
            result["replacePrefix"] = self.replace_prefix
        if self.workload_link is not None:
            result["workloadLink"] = self.workload_link
        if self.port is not None:
            result["port"] = self.port
        return result


@dataclass
class DomainPort:
    """A listening port of a domain and its routes."""

    number: Optional[int] = None
    routes: Optional[List[DomainRoute]] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DomainPort":
        routes = data.get("routes")
        return cls(
            number=data.get("number"),
            routes=[DomainRoute.from_dict(r) for r in routes]
            if routes is not None
            else None,
            extra={k: v for k, v in data.items() if k not in ("number", "routes")},
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = dict(self.extra)
        if self.number is not None:
            result["number"] = self.number
        if self.routes is not None:
            result["routes"] = [route.to_dict() for route in self.routes]
        return result

    def find_route(self, prefix: str) -> Optional[DomainRoute]:
        for route in self.routes or []:
            if route.prefix == prefix:
                return route
        return None


@dataclass
class DomainSpec:
    """Domain spec; only ports are modelled."""

    ports: Optional[List[DomainPort]] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DomainSpec":
        ports = data.get("ports")
        return cls(
            ports=[DomainPort.from_dict(p) for p in ports] if ports is not None else None,
            extra={k: v for k, v in data.items() if k != "ports"},
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = dict(self.extra)
        if self.ports is not None:
            result["ports"] = [port.to_dict() for port in self.ports]
        return result

    def find_port(self, number: int) -> Optional[DomainPort]:
        for port in self.ports or []:
            if port.number == number:
                return port
        return None


@dataclass
class Domain(Base):
    """Control-plane domain."""

    spec: Optional[DomainSpec] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Domain":
        spec = data.get("spec")
        return cls(
            spec=DomainSpec.from_dict(spec) if spec is not None else None,
            **Base.base_kwargs(data),
        )

    def spec_to_dict(self) -> Dict[str, Any]:
        """Serialize the domain spec for a full replacement patch."""
        if self.spec is None:
            return {}
        return self.spec.to_dict()

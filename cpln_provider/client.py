"""
Control Plane API Client

Thin HTTP client for the domain and secret endpoints used by the
resource handlers. Every call returns (object, status_code); non-success
responses raise APIError carrying the status code.
"""

from typing import Any, Dict, Optional, Tuple

import requests

from cpln_provider.config import ProviderConfig
from cpln_provider.exceptions import APIError, ResourceExistsError, ResourceNotFoundError
from cpln_provider.logger import OperationLogger
from cpln_provider.models.domain import Domain, DomainRoute
from cpln_provider.models.secret import Secret


class Client:
    """
    Control-plane API client bound to a single org.

    Responsibilities:
    - Authenticated JSON requests
    - Error translation into APIError
    - Domain route edits (read-modify-write of the domain spec)
    - Secret CRUD
    """

    def __init__(
        self,
        config: ProviderConfig,
        session: Optional[requests.Session] = None,
        logger: Optional[OperationLogger] = None,
    ):
        """
        Initialize API client.

        Args:
            config: Provider configuration (org, endpoint, token, timeout)
            session: Optional pre-built requests session
            logger: Optional operation logger for request lines
        """
        self.org = config.org
        self.base_url = f"{config.endpoint}/org/{config.org}"
        self.timeout = config.timeout
        self.logger = logger
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {config.require_token()}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            }
        )

    def _request(
        self, method: str, path: str, payload: Optional[Dict[str, Any]] = None
    ) -> Tuple[Optional[Dict[str, Any]], int]:
        """
        Send a request and decode the JSON body.

        Args:
            method: HTTP method
            path: Path below /org/{org}
            payload: Optional JSON body

        Returns:
            Tuple of (decoded body or None, status code)

        Raises:
            APIError: On transport failure or a non-2xx status
        """
        url = f"{self.base_url}{path}"

        try:
            response = self.session.request(
                method, url, json=payload, timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            raise APIError(f"Request failed: {method} {url}", context=str(e))

        if self.logger:
            self.logger.log_request(method, url, response.status_code)

        if response.status_code >= 400:
            raise APIError(
                f"API request failed with status {response.status_code}: "
                f"{self._error_message(response)}",
                status_code=response.status_code,
                context=f"{method} {url}",
            )

        if not response.content:
            return None, response.status_code

        try:
            return response.json(), response.status_code
        except ValueError:
            return None, response.status_code

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return response.text or response.reason or "unknown error"

    # Domains

    def get_domain(self, name: str) -> Tuple[Domain, int]:
        body, code = self._request("GET", f"/domain/{name}")
        return Domain.from_dict(body or {}), code

    def _replace_domain_spec(self, domain: Domain) -> int:
        _, code = self._request(
            "PATCH",
            f"/domain/{domain.name}",
            {"$replace/spec": domain.spec_to_dict()},
        )
        return code

    def _get_domain_port(self, domain_name: str, domain_port: int):
        domain, _ = self.get_domain(domain_name)
        port = domain.spec.find_port(domain_port) if domain.spec else None

        if port is None:
            raise APIError(
                f"domain port {domain_port} not found",
                status_code=404,
                context=f"Domain: {domain_name}",
            )

        if domain.name is None:
            domain.name = domain_name
        return domain, port

    def add_domain_route(
        self, domain_name: str, domain_port: int, route: DomainRoute
    ) -> Tuple[DomainRoute, int]:
        domain, port = self._get_domain_port(domain_name, domain_port)

        if port.find_route(route.prefix) is not None:
            raise ResourceExistsError("Domain route", f"{domain_name}:{domain_port}{route.prefix}")

        port.routes = (port.routes or []) + [route]
        return route, self._replace_domain_spec(domain)

    def update_domain_route(
        self, domain_name: str, domain_port: int, route: DomainRoute
    ) -> Tuple[DomainRoute, int]:
        domain, port = self._get_domain_port(domain_name, domain_port)

        existing = port.find_route(route.prefix)
        if existing is None:
            raise ResourceNotFoundError("Domain route", f"{domain_name}:{domain_port}{route.prefix}")

        route.extra = {**existing.extra, **route.extra}
        port.routes = [route if r.prefix == route.prefix else r for r in port.routes]
        return route, self._replace_domain_spec(domain)

    def remove_domain_route(
        self, domain_name: str, domain_port: int, prefix: str
    ) -> Tuple[None, int]:
        domain, port = self._get_domain_port(domain_name, domain_port)

        if port.find_route(prefix) is None:
            raise ResourceNotFoundError("Domain route", f"{domain_name}:{domain_port}{prefix}")

        port.routes = [r for r in port.routes if r.prefix != prefix]
        return None, self._replace_domain_spec(domain)

    # Secrets

    def get_secret(self, name: str) -> Tuple[Secret, int]:
        body, code = self._request("GET", f"/secret/{name}")
        return Secret.from_dict(body or {}), code

    def create_secret(self, secret: Secret) -> Tuple[Secret, int]:
        self._request("POST", "/secret", secret.to_dict())
        return self.get_secret(secret.name)

    def update_secret(self, secret: Secret) -> Tuple[Secret, int]:
        self._request("PATCH", f"/secret/{secret.name}", secret.to_dict())
        return self.get_secret(secret.name)

    def delete_secret(self, name: str) -> Tuple[None, int]:
        _, code = self._request("DELETE", f"/secret/{name}")
        return None, code

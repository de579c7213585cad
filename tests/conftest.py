"""Pytest configuration and fixtures for cpln-provider tests."""

import copy
import json

import pytest

from cpln_provider.client import Client
from cpln_provider.config import ProviderConfig
from cpln_provider.constants import (
    ENV_ENDPOINT,
    ENV_LOG_DIR,
    ENV_ORG,
    ENV_TIMEOUT,
    ENV_TOKEN,
)

ORG = "test-org"
DOMAIN_LINK = f"/org/{ORG}/domain/example.com"
WORKLOAD_LINK = f"/org/{ORG}/gvc/main/workload/api"


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code, body=None, reason="OK"):
        self.status_code = status_code
        self.reason = reason
        self._body = body
        self.content = b"" if body is None else json.dumps(body).encode()
        self.text = self.content.decode()

    def json(self):
        if self._body is None:
            raise ValueError("No JSON body")
        return self._body


class FakeControlPlane:
    """
    In-memory control-plane API, used as the client's requests session.

    Records every request as (method, path, payload).
    """

    def __init__(self, org=ORG):
        self.org = org
        self.headers = {}
        self.domains = {}
        self.secrets = {}
        self.requests = []

    def add_domain(self, name, ports):
        self.domains[name] = {
            "id": f"domain-{name}",
            "name": name,
            "kind": "domain",
            "spec": {"dnsMode": "cname", "ports": copy.deepcopy(ports)},
            "links": [{"rel": "self", "href": f"/org/{self.org}/domain/{name}"}],
        }

    def add_secret(self, name, secret_type, data, **extra):
        self.secrets[name] = {
            "id": f"secret-{name}",
            "name": name,
            "kind": "secret",
            "description": extra.get("description", name),
            "tags": extra.get("tags", {}),
            "type": secret_type,
            "data": copy.deepcopy(data),
            "links": [{"rel": "self", "href": f"/org/{self.org}/secret/{name}"}],
        }

    def patches(self, kind):
        return [p for m, path, p in self.requests if m == "PATCH" and path.startswith(kind)]

    def request(self, method, url, json=None, timeout=None):
        path = url.split(f"/org/{self.org}/", 1)[1]
        self.requests.append((method, path, copy.deepcopy(json)))
        kind, _, name = path.partition("/")
        return getattr(self, f"_{kind}")(method, name, json)

    @staticmethod
    def _not_found(kind, name):
        return FakeResponse(404, {"message": f"{kind} {name} not found"}, "Not Found")

    def _domain(self, method, name, payload):
        if name not in self.domains:
            return self._not_found("Domain", name)
        domain = self.domains[name]
        if method == "PATCH" and "$replace/spec" in payload:
            domain["spec"] = copy.deepcopy(payload["$replace/spec"])
        return FakeResponse(200, copy.deepcopy(domain))

    def _secret(self, method, name, payload):
        if method == "POST":
            name = payload["name"]
            if name in self.secrets:
                return FakeResponse(409, {"message": f"Secret {name} already exists"}, "Conflict")
            self.add_secret(name, payload["type"], payload["data"])
            stored = self.secrets[name]
            stored["description"] = payload.get("description")
            stored["tags"] = dict(payload.get("tags") or {}, **{"cpln/origin": "api"})
            return FakeResponse(201, copy.deepcopy(stored))

        if name not in self.secrets:
            return self._not_found("Secret", name)
        stored = self.secrets[name]

        if method == "DELETE":
            del self.secrets[name]
            return FakeResponse(204)

        if method == "PATCH":
            for key in ("description", "type"):
                if key in payload:
                    stored[key] = payload[key]
            for key, value in (payload.get("tags") or {}).items():
                if value is None:
                    stored["tags"].pop(key, None)
                else:
                    stored["tags"][key] = value
            if "$replace/data" in payload:
                data = payload["$replace/data"]
                if isinstance(data, dict):
                    data = {k: v for k, v in data.items() if v is not None}
                stored["data"] = copy.deepcopy(data)

        return FakeResponse(200, copy.deepcopy(stored))


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep host .env files and CPLN_* variables out of every test."""
    for key in (ENV_ORG, ENV_ENDPOINT, ENV_TOKEN, ENV_TIMEOUT, ENV_LOG_DIR):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def api():
    plane = FakeControlPlane()
    plane.add_domain(
        "example.com", [{"number": 443, "protocol": "http2", "routes": []}]
    )
    return plane


@pytest.fixture
def provider_config(tmp_path):
    return ProviderConfig(org=ORG, token="test-token", log_dir=tmp_path / "logs")


@pytest.fixture
def client(provider_config, api):
    return Client(provider_config, session=api)

"""Tests for API and result models."""

from cpln_provider.exceptions import APIError
from cpln_provider.models import (
    Diagnostics,
    Domain,
    DomainRoute,
    PlanAction,
    PlannedChange,
    Secret,
)

DOMAIN = {
    "id": "d-1",
    "name": "example.com",
    "kind": "domain",
    "version": 3,
    "lastModified": "2024-01-01T00:00:00Z",
    "links": [{"rel": "self", "href": "/org/acme/domain/example.com"}],
    "spec": {
        "dnsMode": "cname",
        "ports": [
            {
                "number": 443,
                "protocol": "http2",
                "tls": {"minProtocolVersion": "TLSV1_2"},
                "routes": [
                    {"prefix": "/", "replacePrefix": "/v1", "workloadLink": "/w", "port": 8080}
                ],
            }
        ],
    },
}


class TestDomain:
    def test_from_dict(self):
        domain = Domain.from_dict(DOMAIN)

        assert domain.last_modified == "2024-01-01T00:00:00Z"
        assert domain.self_link() == "/org/acme/domain/example.com"
        route = domain.spec.find_port(443).find_route("/")
        assert route == DomainRoute(prefix="/", replace_prefix="/v1", workload_link="/w", port=8080)

    def test_spec_round_trip_keeps_unmanaged_keys(self):
        domain = Domain.from_dict(DOMAIN)

        assert domain.spec_to_dict() == DOMAIN["spec"]

    def test_missing_spec(self):
        assert Domain.from_dict({"name": "bare"}).spec_to_dict() == {}

    def test_route_omits_unset_fields(self):
        assert DomainRoute(prefix="/api", workload_link="/w").to_dict() == {
            "prefix": "/api",
            "workloadLink": "/w",
        }

    def test_route_keeps_unmanaged_keys(self):
        data = {"prefix": "/", "workloadLink": "/w", "hostPrefix": "v1", "headers": {"x": "1"}}

        route = DomainRoute.from_dict(data)

        assert route.extra == {"hostPrefix": "v1", "headers": {"x": "1"}}
        assert route.to_dict() == data


class TestSecret:
    def test_to_dict_create(self):
        secret = Secret(name="db", description="db", tags={}, type="opaque", data={"payload": "p"})

        assert secret.to_dict() == {
            "name": "db",
            "description": "db",
            "tags": {},
            "type": "opaque",
            "data": {"payload": "p"},
        }

    def test_to_dict_update_uses_replace_key(self):
        secret = Secret(name="db", data_replace={"payload": "q"})

        assert secret.to_dict() == {"name": "db", "$replace/data": {"payload": "q"}}


class TestResults:
    def test_diagnostics_from_error(self):
        diags = Diagnostics.from_error(APIError("boom", status_code=500))

        assert diags.has_error
        assert diags[0].summary == "boom"

    def test_warnings_are_not_errors(self):
        diags = Diagnostics()
        diags.add_warning("heads up")

        assert not diags.has_error
        assert len(diags.warnings) == 1

    def test_diagnostic_str(self):
        diags = Diagnostics.error("Invalid value", "bad", attribute="cpln_secret.db.name")

        assert str(diags[0]) == "cpln_secret.db.name: Invalid value: bad"

    def test_planned_change_to_dict(self):
        change = PlannedChange("cpln_secret.db", PlanAction.NO_OP)

        assert change.is_no_op
        assert change.to_dict() == {
            "address": "cpln_secret.db",
            "action": "no-op",
            "changed_fields": [],
        }

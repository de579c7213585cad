"""Tests for the cpln_domain_route resource handler against a fake API."""

import pytest

from cpln_provider.resources.domain_route import DomainRouteResource, domain_route_id

DOMAIN_LINK = "/org/test-org/domain/example.com"
WORKLOAD_LINK = "/org/test-org/gvc/main/workload/api"
OTHER_WORKLOAD_LINK = "/org/test-org/gvc/main/workload/web"

ROUTE_CONFIG = {
    "domain_link": DOMAIN_LINK,
    "prefix": "/api",
    "workload_link": WORKLOAD_LINK,
}


@pytest.fixture
def resource(client):
    return DomainRouteResource(client)


def port_routes(api, number=443):
    for port in api.domains["example.com"]["spec"]["ports"]:
        if port["number"] == number:
            return port.get("routes")
    return None


def create(resource, config):
    d = resource.resource_data(config=config)
    diags = resource.run("create", d)
    return d, diags


class TestCreate:
    def test_create_adds_route_and_sets_id(self, resource, api):
        d, diags = create(resource, ROUTE_CONFIG)

        assert not diags
        state = d.state()
        assert state["id"] == f"{DOMAIN_LINK}_443_/api"
        assert state["domain_port"] == 443
        assert state["replace_prefix"] is None
        assert port_routes(api) == [{"prefix": "/api", "workloadLink": WORKLOAD_LINK}]

    def test_create_preserves_unmanaged_domain_settings(self, resource, api):
        create(resource, ROUTE_CONFIG)

        spec = api.domains["example.com"]["spec"]
        assert spec["dnsMode"] == "cname"
        assert spec["ports"][0]["protocol"] == "http2"

    def test_create_replaces_whole_spec(self, resource, api):
        create(resource, ROUTE_CONFIG)

        patch = api.patches("domain")[-1]
        assert list(patch) == ["$replace/spec"]

    def test_create_appends_to_existing_routes(self, resource, api):
        create(resource, ROUTE_CONFIG)
        _, diags = create(
            resource,
            dict(ROUTE_CONFIG, prefix="/web", workload_link=OTHER_WORKLOAD_LINK, port=8080),
        )

        assert not diags
        assert port_routes(api) == [
            {"prefix": "/api", "workloadLink": WORKLOAD_LINK},
            {"prefix": "/web", "workloadLink": OTHER_WORKLOAD_LINK, "port": 8080},
        ]

    def test_create_duplicate_prefix_fails(self, resource, api):
        create(resource, ROUTE_CONFIG)

        d, diags = create(resource, ROUTE_CONFIG)

        assert diags.has_error
        assert "already exists" in diags[0].summary
        assert d.state() is None
        assert len(port_routes(api)) == 1

    def test_create_on_missing_port_fails(self, resource):
        _, diags = create(resource, dict(ROUTE_CONFIG, domain_port=80))

        assert diags.has_error
        assert "domain port 80 not found" in diags[0].summary

    def test_create_on_port_without_routes_list(self, resource, api):
        api.add_domain("bare.example.com", [{"number": 443}])

        _, diags = create(
            resource, dict(ROUTE_CONFIG, domain_link="/org/test-org/domain/bare.example.com")
        )

        assert not diags
        assert api.domains["bare.example.com"]["spec"]["ports"][0]["routes"] == [
            {"prefix": "/api", "workloadLink": WORKLOAD_LINK}
        ]

    def test_create_keeps_unmanaged_keys_on_sibling_routes(self, resource, api):
        sibling = {
            "prefix": "/old",
            "workloadLink": OTHER_WORKLOAD_LINK,
            "hostPrefix": "v1",
            "headers": {"request": {"set": {"x-env": "prod"}}},
        }
        api.domains["example.com"]["spec"]["ports"][0]["routes"] = [dict(sibling)]

        _, diags = create(resource, ROUTE_CONFIG)

        assert not diags
        assert port_routes(api) == [
            sibling,
            {"prefix": "/api", "workloadLink": WORKLOAD_LINK},
        ]


class TestRead:
    def test_read_returns_route(self, resource):
        d, _ = create(resource, dict(ROUTE_CONFIG, replace_prefix="/"))
        d2 = resource.resource_data(state=d.state())

        diags = resource.run("read", d2)

        assert not diags
        state = d2.state()
        assert state["replace_prefix"] == "/"
        assert state["workload_link"] == WORKLOAD_LINK

    def test_read_route_removed_outside_clears_id(self, resource, api):
        d, _ = create(resource, ROUTE_CONFIG)
        api.domains["example.com"]["spec"]["ports"][0]["routes"] = []
        d2 = resource.resource_data(state=d.state())

        diags = resource.run("read", d2)

        assert not diags
        assert d2.state() is None

    def test_read_missing_domain_clears_id(self, resource):
        d = resource.resource_data(
            state={
                "id": "x",
                "domain_link": "/org/test-org/domain/missing.com",
                "prefix": "/api",
                "workload_link": WORKLOAD_LINK,
            }
        )

        diags = resource.run("read", d)

        assert not diags
        assert d.state() is None


class TestUpdate:
    def test_update_changes_route_in_place(self, resource, api):
        d, _ = create(resource, ROUTE_CONFIG)

        d2 = resource.resource_data(
            state=d.state(),
            config=dict(ROUTE_CONFIG, workload_link=OTHER_WORKLOAD_LINK, port=8080),
        )
        diags = resource.run("update", d2)

        assert not diags
        assert port_routes(api) == [
            {"prefix": "/api", "workloadLink": OTHER_WORKLOAD_LINK, "port": 8080}
        ]
        assert d2.state()["workload_link"] == OTHER_WORKLOAD_LINK

    def test_update_without_route_changes_sends_nothing(self, resource, api):
        d, _ = create(resource, ROUTE_CONFIG)
        sent = len(api.requests)

        d2 = resource.resource_data(state=d.state(), config=ROUTE_CONFIG)
        diags = resource.run("update", d2)

        assert not diags
        assert len(api.requests) == sent

    def test_update_missing_route_fails(self, resource, api):
        d, _ = create(resource, ROUTE_CONFIG)
        api.domains["example.com"]["spec"]["ports"][0]["routes"] = []

        d2 = resource.resource_data(
            state=d.state(), config=dict(ROUTE_CONFIG, replace_prefix="/")
        )
        diags = resource.run("update", d2)

        assert diags.has_error
        assert "not found" in diags[0].summary

    def test_update_keeps_unmanaged_keys_on_managed_route(self, resource, api):
        d, _ = create(resource, ROUTE_CONFIG)
        route = port_routes(api)[0]
        route["hostPrefix"] = "v1"
        route["headers"] = {"request": {"set": {"x-env": "prod"}}}

        d2 = resource.resource_data(
            state=d.state(), config=dict(ROUTE_CONFIG, replace_prefix="/")
        )
        diags = resource.run("update", d2)

        assert not diags
        assert port_routes(api) == [
            {
                "prefix": "/api",
                "replacePrefix": "/",
                "workloadLink": WORKLOAD_LINK,
                "hostPrefix": "v1",
                "headers": {"request": {"set": {"x-env": "prod"}}},
            }
        ]


class TestDelete:
    def test_delete_removes_only_this_route(self, resource, api):
        d, _ = create(resource, ROUTE_CONFIG)
        create(resource, dict(ROUTE_CONFIG, prefix="/web"))

        d2 = resource.resource_data(state=d.state())
        diags = resource.run("delete", d2)

        assert not diags
        assert port_routes(api) == [{"prefix": "/web", "workloadLink": WORKLOAD_LINK}]
        assert d2.state() is None


class TestImport:
    def test_import_parses_id_and_reads_route(self, resource):
        create(resource, ROUTE_CONFIG)
        import_id = domain_route_id(DOMAIN_LINK, 443, "/api")

        d = resource.resource_data(resource_id=import_id)
        diags = resource.import_state(d, import_id)
        diags.extend(resource.run("read", d))

        assert not diags
        state = d.state()
        assert state["domain_link"] == DOMAIN_LINK
        assert state["domain_port"] == 443
        assert state["prefix"] == "/api"
        assert state["workload_link"] == WORKLOAD_LINK

    def test_import_rejects_malformed_id(self, resource):
        d = resource.resource_data(resource_id="example.com")

        diags = resource.import_state(d, "example.com")

        assert diags.has_error
        assert diags[0].summary == "Invalid import id"

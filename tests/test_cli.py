"""Tests for the cpln-provider CLI."""

import json

import pytest
import yaml
from click.testing import CliRunner

from cpln_provider import __version__
from cpln_provider.client import Client
from cpln_provider.main import cli
from cpln_provider.services import StateService

CONFIG = {
    "resources": {
        "cpln_secret.db": {
            "name": "db-creds",
            "userpass": {"username": "admin", "password": "hunter2"},
        },
        "cpln_domain_route.api": {
            "domain_link": "/org/test-org/domain/example.com",
            "prefix": "/api",
            "workload_link": "/org/test-org/gvc/main/workload/api",
        },
    }
}


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def env(tmp_path, monkeypatch, api):
    """Provider settings from the environment and the fake API behind the client."""
    monkeypatch.setenv("CPLN_ORG", "test-org")
    monkeypatch.setenv("CPLN_TOKEN", "test-token")
    monkeypatch.setenv("CPLN_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setattr(
        "cpln_provider.base.provider_command.Client",
        lambda config, logger=None: Client(config, session=api, logger=logger),
    )
    return api


@pytest.fixture
def files(tmp_path):
    config_path = tmp_path / "cpln.yml"
    config_path.write_text(yaml.safe_dump(CONFIG, sort_keys=False))
    state_path = tmp_path / "cpln.state.yml"
    return ["-f", str(config_path), "-s", str(state_path)]


def write_config(tmp_path, config):
    (tmp_path / "cpln.yml").write_text(yaml.safe_dump(config, sort_keys=False))


class TestGroup:
    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self, runner):
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        for name in ("validate", "plan", "apply", "destroy", "import"):
            assert name in result.output


class TestValidate:
    def test_valid(self, runner, files):
        result = runner.invoke(cli, ["validate", *files])

        assert result.exit_code == 0
        assert "valid" in result.output

    def test_invalid_json(self, runner, files, tmp_path):
        write_config(
            tmp_path,
            {"resources": {"cpln_secret.db": {"name": "db-creds", "opaque": {"payload": "p"}, "gcp": "{}"}}},
        )

        result = runner.invoke(cli, ["validate", "--json", *files])

        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["valid"] is False
        assert "exactly one of" in data["diagnostics"][0]["detail"]

    def test_missing_config_file(self, runner, tmp_path):
        result = runner.invoke(cli, ["validate", "-f", str(tmp_path / "nope.yml")])

        assert result.exit_code == 1
        assert "File not found" in result.output


class TestPlan:
    def test_plan_json(self, runner, env, files):
        result = runner.invoke(cli, ["plan", "--json", *files])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [c["action"] for c in data["changes"]] == ["create", "create"]
        assert env.requests == []

    def test_plan_without_org(self, runner, files, monkeypatch):
        monkeypatch.delenv("CPLN_ORG", raising=False)

        result = runner.invoke(cli, ["plan", "--json", *files])

        assert result.exit_code == 1
        assert json.loads(result.output)["error"] == "Invalid provider configuration"

    def test_plan_table(self, runner, env, files):
        result = runner.invoke(cli, ["plan", *files])

        assert result.exit_code == 0
        assert "cpln_secret.db" in result.output
        assert "2 to add" in result.output


class TestApply:
    def test_apply_auto_approve(self, runner, env, files, tmp_path):
        result = runner.invoke(cli, ["apply", "--auto-approve", *files])

        assert result.exit_code == 0, result.output
        assert "Apply complete." in result.output
        assert "db-creds" in env.secrets
        assert StateService(tmp_path / "cpln.state.yml").addresses() == [
            "cpln_secret.db",
            "cpln_domain_route.api",
        ]
        assert list((tmp_path / "logs" / "test-org").rglob("*_apply.log"))

    def test_apply_declined(self, runner, env, files):
        result = runner.invoke(cli, ["apply", *files], input="n\n")

        assert result.exit_code == 0
        assert "Apply cancelled." in result.output
        assert env.secrets == {}

    def test_apply_confirmed(self, runner, env, files):
        result = runner.invoke(cli, ["apply", *files], input="y\n")

        assert result.exit_code == 0
        assert "db-creds" in env.secrets

    def test_apply_nothing_to_do(self, runner, env, files):
        runner.invoke(cli, ["apply", "--auto-approve", *files])

        result = runner.invoke(cli, ["apply", *files])

        assert result.exit_code == 0
        assert "No changes." in result.output

    def test_apply_failure_json(self, runner, env, files):
        env.add_secret("db-creds", "opaque", {"payload": "x"})

        result = runner.invoke(cli, ["apply", "--json", *files])

        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["applied"] == []
        assert data["diagnostics"][0]["summary"] == "Resource already exists"


class TestDestroy:
    def test_destroy(self, runner, env, files, tmp_path):
        runner.invoke(cli, ["apply", "--auto-approve", *files])

        result = runner.invoke(cli, ["destroy", "--auto-approve", *files])

        assert result.exit_code == 0
        assert "Destroy complete." in result.output
        assert env.secrets == {}
        assert StateService(tmp_path / "cpln.state.yml").addresses() == []

    def test_destroy_nothing(self, runner, env, files):
        result = runner.invoke(cli, ["destroy", *files])

        assert result.exit_code == 0
        assert "Nothing to destroy." in result.output


class TestImport:
    def test_import_secret(self, runner, env, files, tmp_path):
        env.add_secret("legacy", "opaque", {"payload": "p"})

        result = runner.invoke(cli, ["import", "cpln_secret.legacy", "legacy", *files])

        assert result.exit_code == 0
        assert StateService(tmp_path / "cpln.state.yml").has_resource("cpln_secret.legacy")

    def test_import_missing_json(self, runner, env, files):
        result = runner.invoke(cli, ["import", "--json", "cpln_secret.ghost", "ghost", *files])

        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["imported"] is False
        assert data["diagnostics"][0]["summary"] == "Cannot import non-existent remote object"

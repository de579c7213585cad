"""
Validate Command

Check every configured resource against its schema without calling the API.
"""

import click

from cpln_provider.base import ProviderCommand
from cpln_provider.constants import DEFAULT_CONFIG_FILE, DEFAULT_STATE_FILE
from cpln_provider.services import PlanService


class ValidateCommand(ProviderCommand):
    """Validate the config file."""

    def execute(self) -> None:
        config_doc = self.load_config_doc()
        resources = PlanService.resource_configs(config_doc)

        self.show_header(
            title="Validate",
            details={"Config": self.config_path, "Resources": len(resources)},
        )

        # Schema checks need no client
        diags = PlanService(None, self.state_service).validate(config_doc)

        if self.json_output:
            self.output_json(
                {
                    "valid": not diags.has_error,
                    "diagnostics": [d.to_dict() for d in diags],
                },
                exit_code=1 if diags.has_error else 0,
            )
            return

        self.report_diagnostics(diags)

        if diags.has_error:
            raise SystemExit(1)

        self.print_success("The configuration is valid.")


@click.command()
@click.option("-f", "--file", "config_file", default=DEFAULT_CONFIG_FILE, show_default=True, help="Config file")
@click.option("-s", "--state", "state_file", default=DEFAULT_STATE_FILE, show_default=True, help="State file")
@click.option("--verbose", "-v", is_flag=True, help="Show all log output")
@click.option("--json", "json_output", is_flag=True, help="Output in JSON format")
def validate(config_file, state_file, verbose, json_output):
    """
    Validate resource configuration

    Checks field names, types, required fields, value formats and the
    one-secret-shape rule. Does not contact the API.

    Examples:
        cpln-provider validate
        cpln-provider validate -f infra/cpln.yml --json
    """
    cmd = ValidateCommand(config_file, state_file, verbose=verbose, json_output=json_output)
    cmd.run()

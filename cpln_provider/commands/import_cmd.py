"""
Import Command

Adopt an existing remote object into state.
"""

import click

from cpln_provider.base import ProviderCommand
from cpln_provider.constants import DEFAULT_CONFIG_FILE, DEFAULT_STATE_FILE


class ImportCommand(ProviderCommand):
    """Import a remote object under a resource address."""

    def __init__(
        self,
        config_path,
        state_path,
        address: str,
        import_id: str,
        verbose: bool = False,
        json_output: bool = False,
    ):
        super().__init__(config_path, state_path, verbose=verbose, json_output=json_output)
        self.address = address
        self.import_id = import_id

    def execute(self) -> None:
        config = self.provider_config()

        self.show_header(
            title="Import",
            org=config.org,
            details={"Address": self.address, "ID": self.import_id},
        )

        plan_service = self.ensure_plan_service("import")
        diags = plan_service.import_resource(self.address, self.import_id)

        if self.json_output:
            self.output_json(
                {
                    "imported": not diags.has_error,
                    "address": self.address,
                    "diagnostics": [d.to_dict() for d in diags],
                },
                exit_code=1 if diags.has_error else 0,
            )
            return

        self.report_diagnostics(diags)
        if diags.has_error:
            raise SystemExit(1)

        self.print_success(f"Imported {self.address}")


@click.command(name="import")
@click.argument("address")
@click.argument("import_id")
@click.option("-f", "--file", "config_file", default=DEFAULT_CONFIG_FILE, show_default=True, help="Config file")
@click.option("-s", "--state", "state_file", default=DEFAULT_STATE_FILE, show_default=True, help="State file")
@click.option("--verbose", "-v", is_flag=True, help="Show all log output")
@click.option("--json", "json_output", is_flag=True, help="Output in JSON format")
def import_resource(address, import_id, config_file, state_file, verbose, json_output):
    """
    Import an existing object into state

    \b
    Secrets are imported by name; domain routes by
    <domain_link>_<domain_port>_<prefix>.

    Examples:
        cpln-provider import cpln_secret.db db-creds
        cpln-provider import cpln_domain_route.api /org/my-org/domain/example.com_443_/api
    """
    cmd = ImportCommand(
        config_file,
        state_file,
        address,
        import_id,
        verbose=verbose,
        json_output=json_output,
    )
    cmd.run()

"""
Destroy Command

Delete every remote object tracked in state.
"""

import click

from cpln_provider.base import ProviderCommand
from cpln_provider.constants import DEFAULT_CONFIG_FILE, DEFAULT_STATE_FILE


class DestroyCommand(ProviderCommand):
    """Destroy all managed resources."""

    def __init__(
        self,
        config_path,
        state_path,
        auto_approve: bool = False,
        verbose: bool = False,
        json_output: bool = False,
    ):
        super().__init__(config_path, state_path, verbose=verbose, json_output=json_output)
        self.auto_approve = auto_approve

    def execute(self) -> None:
        config = self.provider_config()
        addresses = self.state_service.addresses()

        self.show_header(
            title="Destroy",
            org=config.org,
            details={"State": self.state_path, "Resources": len(addresses)},
        )

        if not addresses:
            if self.json_output:
                self.output_json({"destroyed": [], "diagnostics": []})
                return
            self.print_success("Nothing to destroy.")
            return

        if not self.auto_approve and not self.json_output:
            for address in addresses:
                self.console.print(f"  [red]-[/red] {address}")
            self.console.print()
            if not self.confirm("[bold red]Destroy these resources?[/bold red]"):
                self.print_dim("Destroy cancelled.")
                return

        plan_service = self.ensure_plan_service("destroy")
        if self.logger:
            self.logger.step("Destroying resources")

        result = plan_service.destroy()

        if self.json_output:
            self.output_json(
                {
                    "destroyed": [c.address for c in result.applied],
                    "diagnostics": [d.to_dict() for d in result.diagnostics],
                },
                exit_code=0 if result.is_success else 1,
            )
            return

        for change in result.applied:
            if self.logger:
                self.logger.success(f"{change.address}: destroyed")

        self.report_diagnostics(result.diagnostics)
        if not result.is_success:
            self.print_error("Destroy stopped; remaining resources are still in state.")
            raise SystemExit(1)

        self.print_success("Destroy complete.")


@click.command()
@click.option("-f", "--file", "config_file", default=DEFAULT_CONFIG_FILE, show_default=True, help="Config file")
@click.option("-s", "--state", "state_file", default=DEFAULT_STATE_FILE, show_default=True, help="State file")
@click.option("--auto-approve", "-y", is_flag=True, help="Skip confirmation prompt")
@click.option("--verbose", "-v", is_flag=True, help="Show all log output")
@click.option("--json", "json_output", is_flag=True, help="Output in JSON format")
def destroy(config_file, state_file, auto_approve, verbose, json_output):
    """
    Destroy all managed resources

    Examples:
        cpln-provider destroy
        cpln-provider destroy --auto-approve
    """
    cmd = DestroyCommand(
        config_file,
        state_file,
        auto_approve=auto_approve,
        verbose=verbose,
        json_output=json_output,
    )
    cmd.run()

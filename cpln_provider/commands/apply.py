"""
Apply Command

Create, update, replace and delete remote objects to match the config.
"""

import click
from dataclasses import dataclass

from cpln_provider.base import ProviderCommand
from cpln_provider.constants import DEFAULT_CONFIG_FILE, DEFAULT_STATE_FILE
from cpln_provider.ui_components import render_plan


@dataclass
class ApplyOptions:
    """Options for apply command."""

    auto_approve: bool = False


class ApplyCommand(ProviderCommand):
    """Apply planned changes."""

    def __init__(
        self,
        config_path,
        state_path,
        options: ApplyOptions,
        verbose: bool = False,
        json_output: bool = False,
    ):
        super().__init__(config_path, state_path, verbose=verbose, json_output=json_output)
        self.options = options

    def execute(self) -> None:
        config_doc = self.load_config_doc()
        config = self.provider_config()

        self.show_header(title="Apply", org=config.org, details={"Config": self.config_path})

        plan_service = self.ensure_plan_service("apply")

        if not self.options.auto_approve and not self.json_output:
            changes, diags = plan_service.plan(config_doc)
            self.report_diagnostics(diags)
            if diags.has_error:
                raise SystemExit(1)
            if all(change.is_no_op for change in changes):
                self.print_success("No changes. Remote objects match the configuration.")
                return
            render_plan(changes, self.console)
            if not self.confirm("Apply these changes?"):
                self.print_dim("Apply cancelled.")
                return

        if self.logger:
            self.logger.step("Applying changes")

        result = plan_service.apply(config_doc)

        if self.json_output:
            self.output_json(
                {
                    "applied": [c.to_dict() for c in result.applied],
                    "diagnostics": [d.to_dict() for d in result.diagnostics],
                },
                exit_code=0 if result.is_success else 1,
            )
            return

        for change in result.applied:
            if self.logger and not change.is_no_op:
                self.logger.success(f"{change.address}: {change.action.value}")

        self.report_diagnostics(result.diagnostics)

        if not result.is_success:
            self.print_error(f"Apply stopped after {len(result.applied)} change(s); state saved.")
            if self.logger:
                self.console.print(f"\n[dim]Logs saved to:[/dim] {self.logger.log_path}\n")
            raise SystemExit(1)

        self.print_success("Apply complete.")


@click.command()
@click.option("-f", "--file", "config_file", default=DEFAULT_CONFIG_FILE, show_default=True, help="Config file")
@click.option("-s", "--state", "state_file", default=DEFAULT_STATE_FILE, show_default=True, help="State file")
@click.option("--auto-approve", "-y", is_flag=True, help="Skip confirmation prompt")
@click.option("--verbose", "-v", is_flag=True, help="Show all log output")
@click.option("--json", "json_output", is_flag=True, help="Output in JSON format")
def apply(config_file, state_file, auto_approve, verbose, json_output):
    """
    Apply the configuration

    Examples:
        cpln-provider apply
        cpln-provider apply --auto-approve
    """
    options = ApplyOptions(auto_approve=auto_approve)
    cmd = ApplyCommand(
        config_file, state_file, options, verbose=verbose, json_output=json_output
    )
    cmd.run()

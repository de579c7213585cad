"""
Plan Command

Show what apply would change.
"""

import click

from cpln_provider.base import ProviderCommand
from cpln_provider.constants import DEFAULT_CONFIG_FILE, DEFAULT_STATE_FILE
from cpln_provider.ui_components import render_plan


class PlanCommand(ProviderCommand):
    """
    Compute and display planned changes.

    Refreshes every resource in state before diffing, so drift made
    outside of this tool shows up as an update or a re-create.
    """

    def execute(self) -> None:
        config_doc = self.load_config_doc()
        config = self.provider_config()

        self.show_header(title="Plan", org=config.org, details={"Config": self.config_path})

        plan_service = self.ensure_plan_service("plan")
        if self.logger:
            self.logger.step("Refreshing state")

        changes, diags = plan_service.plan(config_doc)

        if self.json_output:
            self.output_json(
                {
                    "changes": [c.to_dict() for c in changes],
                    "diagnostics": [d.to_dict() for d in diags],
                },
                exit_code=1 if diags.has_error else 0,
            )
            return

        self.report_diagnostics(diags)
        if diags.has_error:
            raise SystemExit(1)

        if all(change.is_no_op for change in changes):
            self.print_success("No changes. Remote objects match the configuration.")
            return

        render_plan(changes, self.console)


@click.command()
@click.option("-f", "--file", "config_file", default=DEFAULT_CONFIG_FILE, show_default=True, help="Config file")
@click.option("-s", "--state", "state_file", default=DEFAULT_STATE_FILE, show_default=True, help="State file")
@click.option("--verbose", "-v", is_flag=True, help="Show all log output")
@click.option("--json", "json_output", is_flag=True, help="Output in JSON format")
def plan(config_file, state_file, verbose, json_output):
    """
    Show planned changes

    Examples:
        cpln-provider plan
        cpln-provider plan -f infra/cpln.yml -s infra/cpln.state.yml
    """
    cmd = PlanCommand(config_file, state_file, verbose=verbose, json_output=json_output)
    cmd.run()

"""
Base Command Class

Abstract base for all cpln-provider CLI commands.
Provides common functionality and structure.
"""

from abc import ABC, abstractmethod
from typing import Optional, Any, Dict
import json
from rich.console import Console

from cpln_provider.exceptions import CplnError
from cpln_provider.logger import OperationLogger
from cpln_provider.models.results import Diagnostics
from cpln_provider.ui_components import show_header, render_diagnostics


class BaseCommand(ABC):
    """
    Abstract base command class.

    Provides:
    - Logger initialization
    - Header display
    - Error handling
    - JSON output support
    """

    def __init__(self, verbose: bool = False, json_output: bool = False):
        self.verbose = verbose
        self.json_output = json_output
        self.console = Console()
        self.logger: Optional[OperationLogger] = None

    def init_logger(
        self,
        org: str,
        command_name: str,
        log_dir,
        details: Optional[Dict[str, str]] = None,
    ) -> Optional[OperationLogger]:
        """
        Initialize command logger (skip in JSON mode).

        Args:
            org: Control-plane org
            command_name: Command name
            log_dir: Root directory for log files
            details: Extra log header lines

        Returns:
            OperationLogger instance or None if JSON mode
        """
        if self.json_output:
            return None
        self.logger = OperationLogger(
            org, command_name, log_dir, verbose=self.verbose, details=details
        )
        return self.logger

    def output_json(self, data: Dict[str, Any], exit_code: int = 0) -> None:
        """
        Output data as JSON and exit.

        Args:
            data: Data to output as JSON
            exit_code: Exit code (0 for success, non-zero for error)
        """
        print(json.dumps(data, indent=2))
        if exit_code != 0:
            raise SystemExit(exit_code)

    def output_json_error(
        self, error: str, details: Optional[Dict[str, Any]] = None, exit_code: int = 1
    ) -> None:
        error_data = {"error": error}
        if details:
            error_data["details"] = details
        self.output_json(error_data, exit_code=exit_code)

    def show_header(
        self,
        title: str,
        subtitle: Optional[str] = None,
        org: Optional[str] = None,
        details: Optional[dict] = None,
    ) -> None:
        """Show command header (skip in JSON or verbose mode)."""
        if not self.verbose and not self.json_output:
            show_header(
                title=title,
                subtitle=subtitle,
                org=org,
                details=details,
                console=self.console,
            )

    def print_success(self, message: str) -> None:
        """Print success message (skip in JSON mode)."""
        if not self.json_output:
            self.console.print(f"[green]✓ {message}[/green]")

    def print_error(self, message: str) -> None:
        """Print error message (skip in JSON mode)."""
        if not self.json_output:
            self.console.print(f"[red]✗ {message}[/red]")

    def print_dim(self, message: str) -> None:
        """Print dim message (skip in JSON mode)."""
        if not self.json_output:
            self.console.print(f"[dim]{message}[/dim]")

    def confirm(self, question: str, default: bool = False) -> bool:
        """
        Ask for user confirmation.

        Args:
            question: Question to ask
            default: Default answer

        Returns:
            True if confirmed
        """
        default_str = "y" if default else "n"
        self.console.print(
            f"{question} [bold bright_white]\\[y/n][/bold bright_white] [dim]({default_str})[/dim]: ",
            end="",
        )
        answer = input().strip().lower()

        if not answer:
            return default

        return answer in ["y", "yes"]

    def report_diagnostics(self, diags: Diagnostics) -> None:
        """Print diagnostics and record errors in the log file."""
        if self.json_output:
            return
        render_diagnostics(diags, self.console)
        if self.logger:
            for diag in diags:
                self.logger.log(str(diag), "ERROR" if diag.is_error else "WARNING")
            if diags.has_error:
                self.logger.has_errors = True

    @abstractmethod
    def execute(self, **kwargs) -> None:
        """
        Execute command logic.

        Must be implemented by subclasses.
        """
        pass

    def run(self, **kwargs) -> None:
        """
        Run command with error handling.

        Args:
            **kwargs: Command arguments
        """
        try:
            self.execute(**kwargs)
        except KeyboardInterrupt:
            self.console.print("\n[yellow]⚠️  Operation cancelled by user[/yellow]")
            if self.logger:
                self.console.print(
                    f"\n[dim]Logs saved to:[/dim] {self.logger.log_path}\n"
                )
            raise SystemExit(130)
        except SystemExit:
            raise
        except CplnError as e:
            if self.json_output:
                self.output_json_error(
                    e.message, {"context": e.context} if e.context else None
                )
            if self.logger:
                self.logger.log_error(e.message, context=e.context)
                self.console.print(
                    f"[dim]Logs saved to:[/dim] {self.logger.log_path}\n"
                )
            else:
                self.console.print(f"\n[bold red]✗ {e.message}[/bold red]")
                if e.context:
                    self.console.print(f"  [color(208)]{e.context}[/color(208)]")
            raise SystemExit(1)
        except Exception as e:
            error_type = type(e).__name__
            self.console.print(f"\n[bold red]✗ {error_type}:[/bold red] {e}\n")
            if self.logger:
                self.logger.log_error(f"{error_type}: {e}")
                self.console.print(
                    f"[dim]Logs saved to:[/dim] {self.logger.log_path}\n"
                )
            raise SystemExit(1)
        finally:
            if self.logger:
                self.logger.close()

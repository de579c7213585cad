"""
Operation logging for cpln-provider.

Each API-backed command writes one log file per run; the console shows
only steps and results unless verbose.
"""

import re
from pathlib import Path
from datetime import datetime
from typing import Dict, Optional, TextIO
from rich.console import Console

console = Console()

ANSI_ESCAPE = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")


class OperationLogger:
    """
    Per-run log file plus console progress.

    API requests are recorded as method, url and status only; payloads
    carry secret data and are never written.
    """

    def __init__(
        self,
        org: str,
        operation: str,
        log_dir: Path,
        verbose: bool = False,
        details: Optional[Dict[str, str]] = None,
    ):
        """
        Args:
            org: Control-plane org the operation runs against
            operation: plan, apply, destroy or import
            log_dir: Root directory for log files
            verbose: Echo every log line to the console
            details: Extra header lines, e.g. endpoint and file paths
        """
        self.org = org
        self.operation = operation
        self.verbose = verbose
        self.details = details or {}
        self.log_file: Optional[TextIO] = None
        self.log_path: Optional[Path] = None
        self.current_step = ""
        self.has_errors = False

        # Structure: {log_dir}/{org}/{date}/{time}_{operation}.log
        now = datetime.now()
        date_str = now.strftime("%Y-%m-%d")
        time_str = now.strftime("%H-%M-%S")

        org_logs_dir = Path(log_dir) / org / date_str
        org_logs_dir.mkdir(parents=True, exist_ok=True)

        self.log_path = org_logs_dir / f"{time_str}_{operation}.log"

        # Line buffered for real-time tailing
        self.log_file = open(self.log_path, "w", buffering=1)

        self._write_log_header()

    def _write_log_header(self):
        lines = [
            "=" * 80,
            "cpln-provider Operation Log",
            "=" * 80,
            f"Org: {self.org}",
            f"Operation: {self.operation}",
        ]
        lines += [f"{key}: {value}" for key, value in self.details.items()]
        lines += [f"Started: {datetime.now().isoformat()}", "=" * 80]
        self.log_file.write("\n" + "\n".join(lines) + "\n\n")
        self.log_file.flush()

    def log(self, message: str, level: str = "INFO"):
        """
        Log a message to file and optionally console

        Args:
            message: Message to log
            level: Log level (INFO, WARNING, ERROR, DEBUG)
        """
        timestamp = datetime.now().strftime("%H:%M:%S")
        log_line = f"[{timestamp}] [{level}] {ANSI_ESCAPE.sub('', message)}\n"

        if self.log_file:
            self.log_file.write(log_line)
            self.log_file.flush()

        if self.verbose:
            if level == "ERROR":
                console.print(f"[red]{message}[/red]")
            elif level == "WARNING":
                console.print(f"[yellow]{message}[/yellow]")
            elif level == "DEBUG":
                console.print(f"[dim]{message}[/dim]")
            else:
                console.print(message)

    def log_request(self, method: str, url: str, status_code: int):
        """Log an API request line (never the body)"""
        self.log(f"{method} {url} -> {status_code}", "DEBUG")

    def log_error(self, error: str, context: Optional[str] = None):
        """
        Log an error with context

        Args:
            error: Error message
            context: Additional context (e.g., resource address)
        """
        self.has_errors = True

        error_block = f"""
{"!" * 80}
ERROR OCCURRED
{"!" * 80}
{error}
"""
        if context:
            error_block += f"\nContext: {context}\n"

        error_block += f"{'!' * 80}\n\n"

        if self.log_file:
            self.log_file.write(error_block)
            self.log_file.flush()

        if not self.verbose:
            console.print()

        console.print(f"[bold red]✗ {error}[/bold red]")
        if context:
            console.print(f"  [color(208)]{context}[/color(208)]")

    def step(self, step_name: str):
        """
        Start a new step

        Args:
            step_name: Name of the step
        """
        if self.current_step and not self.verbose:
            console.print()

        self.current_step = step_name
        self.log(f"Step: {step_name}", "INFO")

        if not self.verbose:
            console.print(f"[color(214)]▶[/color(214)] [white]{step_name}[/white]")

    def success(self, message: str):
        """Log a success message"""
        self.log(message, "INFO")

        if not self.verbose:
            console.print(f"  [dim]✓ {message}[/dim]")

    def warning(self, message: str):
        """Log a warning message"""
        self.log(message, "WARNING")

        if not self.verbose:
            console.print(f"  [yellow]⚠[/yellow] [dim]{message}[/dim]")

    def close(self):
        """Close log file"""
        if self.log_file:
            footer = f"""
{"=" * 80}
Completed: {datetime.now().isoformat()}
Status: {"FAILED" if self.has_errors else "SUCCESS"}
{"=" * 80}
"""
            self.log_file.write(footer)
            self.log_file.close()
            self.log_file = None

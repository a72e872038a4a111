"""Writes outputs to the GitHub Actions environment file."""
from pathlib import Path
from typing import Optional

from rich.console import Console

VALID_REGION_KEY = "VALID_REGION"
QUOTA_FAILED_KEY = "QUOTA_FAILED"


class GitHubEnvWriter:
    """Appends KEY=value lines for later workflow steps."""

    def __init__(self, path: Optional[str], console: Optional[Console] = None):
        self.path = Path(path) if path else None
        self.console = console or Console()

    def write(self, key: str, value: str) -> None:
        """Append a variable to the environment file.

        Without a configured file the line is only printed, so the run can
        still finish and report its result.
        """
        line = f"{key}={value}"
        if self.path is None:
            self.console.print(f"[yellow]Warning: GITHUB_ENV is not set, not exporting {line}[/yellow]")
            return
        with open(self.path, 'a') as f:
            f.write(line + "\n")

    def record_region(self, region: str) -> None:
        self.write(VALID_REGION_KEY, region)

    def record_failure(self) -> None:
        self.write(QUOTA_FAILED_KEY, "true")

"""Thin wrapper around the Azure CLI."""
import subprocess
from typing import List, Optional, Tuple

from rich.console import Console

console = Console()


def run_command(cmd: List[str], debug: bool = False, out: Optional[Console] = None) -> Tuple[int, str, str]:
    """Run a command and return (returncode, stdout, stderr).

    A missing executable is reported as return code 127 instead of raising,
    so callers only have to look at the return code.
    """
    out = out or console
    if debug:
        out.print(f"[cyan]Debug: Running command:[/cyan] {' '.join(cmd)}")
    try:
        result = subprocess.run(
            cmd,
            check=False,
            text=True,
            capture_output=True
        )
    except FileNotFoundError as e:
        return 127, "", str(e)
    return result.returncode, result.stdout, result.stderr

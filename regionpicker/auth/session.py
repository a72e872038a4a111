"""Azure CLI session handling."""
from typing import Optional

from rich.console import Console
from rich.markup import escape

from ..azcli import run_command
from ..config.schema import RunMode, SelectorConfig
from ..errors import AuthenticationError


class AzureCliSession:
    """Wraps the `az account` commands used to verify and select a session."""

    def __init__(self, debug: bool = False, console: Optional[Console] = None):
        self.debug = debug
        self.console = console or Console()

    def is_logged_in(self) -> bool:
        """Probe for an existing Azure CLI login. Output is discarded."""
        returncode, _, _ = run_command(["az", "account", "show"], debug=self.debug, out=self.console)
        return returncode == 0

    def set_subscription(self, subscription_id: str) -> None:
        """Make `subscription_id` the active subscription.

        Raises:
            AuthenticationError: If the CLI rejects the subscription.
        """
        cmd = ["az", "account", "set", "--subscription", subscription_id]
        returncode, _, stderr = run_command(cmd, debug=self.debug, out=self.console)
        if returncode != 0:
            if self.debug and stderr:
                self.console.print(f"[blue]Debug: {escape(stderr.strip())}[/blue]")
            raise AuthenticationError("Invalid subscription ID or insufficient permissions.")

    def _show(self, query: str) -> Optional[str]:
        cmd = ["az", "account", "show", "--query", query, "-o", "tsv"]
        returncode, stdout, _ = run_command(cmd, debug=self.debug, out=self.console)
        if returncode != 0:
            return None
        return stdout.strip() or None

    def subscription_name(self) -> Optional[str]:
        return self._show("name")

    def subscription_id(self) -> Optional[str]:
        return self._show("id")


def authenticate(config: SelectorConfig, session: AzureCliSession) -> None:
    """Prepare the Azure session for the configured run mode.

    In CI mode the caller is expected to be logged in already, so only the
    subscription is selected. In local mode an interactive `az login` must
    have happened beforehand.

    Raises:
        AuthenticationError: If the subscription cannot be set or no session exists.
    """
    console = session.console
    if config.run_mode == RunMode.CI:
        console.print("🔑 Using pre-authenticated Azure CLI session (CI mode)...")
        console.print("🔄 Setting Azure subscription...")
        session.set_subscription(config.subscription_id)
        console.print("[green]✅ Azure subscription set successfully.[/green]")
        return

    console.print("🔑 Using existing Azure CLI session (local mode)...")
    if not session.is_logged_in():
        raise AuthenticationError("Not logged in. Run 'az login' first.")
    console.print(f"[green]✅ Using subscription: {session.subscription_name() or '(unknown)'}[/green]")

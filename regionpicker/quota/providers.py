"""Usage providers returning per-region Cognitive Services quota listings."""
import json
from abc import ABC, abstractmethod
from typing import Any, Iterable, Optional

from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from .models import UsageListing, UsageRecord
from ..azcli import run_command
from ..config.schema import ProviderKind
from ..errors import ConfigurationError, ProviderUnavailableError


class UsageProvider(ABC):
    """Base class for usage providers."""

    def __init__(self, debug: bool = False, console: Optional[Console] = None):
        self.debug = debug
        self.console = console or Console()

    @abstractmethod
    def list_usage(self, region: str) -> UsageListing:
        """Fetch the usage listing for a region.

        Args:
            region: Azure region name.

        Returns:
            UsageListing: Records of the region, never empty.

        Raises:
            ProviderUnavailableError: If the listing is empty or cannot be retrieved.
        """
        pass

    def _build_listing(self, region: str, items: Iterable[Any]) -> UsageListing:
        records = []
        for item in items:
            try:
                records.append(UsageRecord.model_validate(item))
            except ValidationError as e:
                if self.debug:
                    self.console.print(f"[blue]Debug: Ignoring malformed usage entry in {region}: {escape(str(e))}[/blue]")
        listing = UsageListing(region, records)
        if not len(listing):
            raise ProviderUnavailableError(region, "empty usage listing")
        return listing


class AzureCliUsageProvider(UsageProvider):
    """Reads usage through `az cognitiveservices usage list`."""

    def list_usage(self, region: str) -> UsageListing:
        cmd = ["az", "cognitiveservices", "usage", "list", "--location", region, "--output", "json"]
        returncode, stdout, stderr = run_command(cmd, debug=self.debug, out=self.console)
        if returncode != 0:
            raise ProviderUnavailableError(region, stderr.strip() or f"az exited with code {returncode}")
        if not stdout.strip():
            raise ProviderUnavailableError(region, "no output from az")
        try:
            data = json.loads(stdout)
        except json.JSONDecodeError as e:
            raise ProviderUnavailableError(region, f"invalid JSON from az: {e}")
        if not isinstance(data, list):
            raise ProviderUnavailableError(region, "unexpected usage listing format")
        return self._build_listing(region, data)


class SdkUsageProvider(UsageProvider):
    """Reads usage through the Cognitive Services management SDK."""

    def __init__(self, subscription_id: str, debug: bool = False, console: Optional[Console] = None):
        """Initialize the provider.

        Args:
            subscription_id: Azure subscription ID.
        """
        super().__init__(debug=debug, console=console)
        self.subscription_id = subscription_id
        self._client = None

    def _get_client(self):
        if self._client is None:
            from azure.identity import DefaultAzureCredential
            from azure.mgmt.cognitiveservices import CognitiveServicesManagementClient

            self._client = CognitiveServicesManagementClient(DefaultAzureCredential(), self.subscription_id)
        return self._client

    def list_usage(self, region: str) -> UsageListing:
        from azure.core.exceptions import AzureError

        if self.debug:
            self.console.print(f"[cyan]Debug: Listing usages for {region} in subscription {self.subscription_id}[/cyan]")
        try:
            usages = list(self._get_client().usages.list(region))
        except AzureError as e:
            raise ProviderUnavailableError(region, str(e))
        return self._build_listing(region, [self._to_dict(u) for u in usages])

    @staticmethod
    def _to_dict(usage: Any) -> dict:
        name = getattr(usage, "name", None)
        unit = getattr(usage, "unit", None)
        return {
            "name": {
                "value": getattr(name, "value", None),
                "localizedValue": getattr(name, "localized_value", None),
            } if name is not None else None,
            "currentValue": getattr(usage, "current_value", None),
            "limit": getattr(usage, "limit", None),
            "unit": getattr(unit, "value", unit),
        }


def create_provider(
    kind: ProviderKind,
    subscription_id: Optional[str] = None,
    session=None,
    debug: bool = False,
    console: Optional[Console] = None,
) -> UsageProvider:
    """Create the usage provider for the configured kind.

    The SDK provider needs a subscription id; when none is configured it is
    read from the active Azure CLI session.
    """
    if kind == ProviderKind.SDK:
        subscription_id = subscription_id or (session.subscription_id() if session else None)
        if not subscription_id:
            raise ConfigurationError("No subscription available for the SDK usage provider")
        return SdkUsageProvider(subscription_id, debug=debug, console=console)
    return AzureCliUsageProvider(debug=debug, console=console)

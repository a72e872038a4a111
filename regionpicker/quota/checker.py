"""Region selection based on Cognitive Services quota."""
from typing import Mapping, Optional

from rich.console import Console

from .models import ModelCheck, RegionAnalysis, RegionResult, UsageListing
from .providers import UsageProvider
from ..config.schema import SelectorConfig
from ..errors import ProviderUnavailableError


class RegionQuotaSelector:
    """Finds the first region with enough quota for every required model."""

    def __init__(self, config: SelectorConfig, provider: UsageProvider, console: Optional[Console] = None):
        """Initialize the selector.

        Args:
            config: Immutable run configuration.
            provider: Source of per-region usage listings.
            console: Console used for progress output.
        """
        self.config = config
        self.provider = provider
        self.console = console or Console()
        self.requirements: Mapping[str, int] = config.requirements()

    def evaluate_region(self, region: str, listing: UsageListing) -> RegionResult:
        """Check every required model against a region's listing.

        A missing model fails the region but the remaining models are still
        checked. An insufficient model fails the region and stops the checks
        for it, so later models are not reported.
        """
        result = RegionResult(region)
        for model, required in self.requirements.items():
            record = listing.find(model)
            if record is None:
                self.console.print(f"   [yellow]⚠️  No quota info for: {model} in {region}. Skipping.[/yellow]")
                result.checks.append(ModelCheck(model=model, required=required, found=False))
                continue

            check = ModelCheck(
                model=model,
                required=required,
                found=True,
                current_usage=record.used,
                limit=record.capacity,
            )
            result.checks.append(check)
            summary = (
                f"{model} | Used: {check.current_usage} | Limit: {check.limit} "
                f"| Available: {check.available} | Need: {required}"
            )
            if not check.is_sufficient:
                self.console.print(f"   [red]❌ {summary}[/red]")
                break
            self.console.print(f"   [green]✅ {summary}[/green]")
        return result

    def check_region(self, region: str) -> RegionResult:
        """Fetch and evaluate one region. An unavailable listing fails only this region."""
        self.console.print("========================================")
        self.console.print(f"🔍 Checking region: {region}")
        try:
            listing = self.provider.list_usage(region)
        except ProviderUnavailableError as e:
            self.console.print(f"   [yellow]⚠️  Failed to retrieve quota for region {region}. Skipping.[/yellow]")
            return RegionResult(region, listing_available=False, error=e.reason)
        return self.evaluate_region(region, listing)

    def select_region(self) -> RegionAnalysis:
        """Scan the candidate regions in order and stop at the first valid one.

        Returns:
            RegionAnalysis: Results of every region queried; ``selected_region``
            is None when no region qualifies.
        """
        analysis = RegionAnalysis()
        for region in self.config.regions:
            result = self.check_region(region)
            analysis.results.append(result)
            if result.is_valid():
                analysis.selected_region = region
                self.console.print(f"   [bold green]🎉 Region '{region}' has sufficient quota for all models![/bold green]")
                break
        return analysis

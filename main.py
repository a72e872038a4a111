"""Azure OpenAI region picker CLI entrypoint."""
import os
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from regionpicker.auth.session import AzureCliSession, authenticate
from regionpicker.ci.github_env import GitHubEnvWriter
from regionpicker.config.loader import ConfigLoader
from regionpicker.config.schema import RunMode, SelectorConfig
from regionpicker.errors import AuthenticationError, ConfigurationError
from regionpicker.quota.checker import RegionQuotaSelector
from regionpicker.quota.models import RegionAnalysis
from regionpicker.quota.providers import create_provider

app = typer.Typer(
    help="Azure OpenAI region picker - finds the first region with enough model quota",
    add_completion=False,
)
console = Console()


def print_configuration(config: SelectorConfig) -> None:
    table = Table(title="📋 Configuration", show_header=False)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_row("Mode", config.run_mode.value)
    table.add_row("Image Model Choice", config.image_model.value)
    table.add_row("GPT Min Capacity", str(config.text_min_capacity))
    table.add_row("Image Model Min Capacity", str(config.image_min_capacity))
    table.add_row("Quota Provider", config.provider.value)
    table.add_row("Regions to check", " ".join(config.regions))
    console.print(table)

    image_quota_name = config.image_model.quota_name
    if image_quota_name:
        console.print(
            f"🖼️  Image model '{config.image_model.value}' added to quota check "
            f"(key: {image_quota_name}, min capacity: {config.image_min_capacity})"
        )
    else:
        console.print("ℹ️  Image model set to 'none', skipping image model quota check.")


def print_summary(analysis: RegionAnalysis) -> None:
    table = Table(title="Regions Quota Analysis")
    table.add_column("Region", style="cyan")
    table.add_column("Status")
    table.add_column("Models")
    for result in analysis.results:
        if not result.listing_available:
            status = "[yellow]UNAVAILABLE[/]"
        elif result.is_valid():
            status = "[green]✓ VIABLE[/]"
        else:
            status = "[red]❌ INSUFFICIENT QUOTA[/]"
        models = []
        for check in result.checks:
            color = "green" if check.is_sufficient else "red"
            detail = f"{check.required}/{check.available}" if check.found else "missing"
            models.append(f"{check.model}: [{color}]{detail}[/]")
        table.add_row(result.region, status, "\n".join(models))
    console.print(table)


def run(
    image_model: Optional[str] = None,
    output: Optional[str] = None,
    provider: Optional[str] = None,
    debug: bool = False,
) -> int:
    """Run the quota check and return the process exit code."""
    session = AzureCliSession(debug=debug, console=console)
    try:
        config = ConfigLoader.load(os.environ, session, image_model_arg=image_model, provider=provider)
        if config.run_mode == RunMode.CI and image_model:
            console.print(f"[yellow]Ignoring image model argument '{escape(image_model)}' in CI mode; using IMAGE_MODEL_CHOICE.[/yellow]")

        authenticate(config, session)
        print_configuration(config)

        usage_provider = create_provider(
            config.provider,
            subscription_id=config.subscription_id,
            session=session,
            debug=debug,
            console=console,
        )
        analysis = RegionQuotaSelector(config, usage_provider, console=console).select_region()
    except (ConfigurationError, AuthenticationError) as e:
        console.print(f"[bold red]❌ ERROR: {escape(str(e))}[/]")
        return 1

    if output:
        analysis.save(output)
        console.print(f"[green]Quota analysis saved to {output}[/]")

    console.print("")
    print_summary(analysis)

    writer = GitHubEnvWriter(config.github_env, console=console)
    if analysis.selected_region is None:
        console.print("[bold red]❌ No region with sufficient quota found![/]")
        console.print(f"   Image Model: {config.image_model.value}")
        console.print(f"   Checked regions: {' '.join(config.regions)}")
        console.print("\n[yellow]To request a quota increase, visit:[/]")
        console.print("[link]https://portal.azure.com/#blade/Microsoft_Azure_Capacity/QuotaMenuBlade/myQuotas[/link]")
        # CI reports the failure through GITHUB_ENV so later steps can branch on it
        if config.run_mode == RunMode.CI:
            writer.record_failure()
            return 0
        return 1

    console.print(f"[bold green]✅ Recommended Region: {analysis.selected_region}[/]")
    if config.run_mode == RunMode.CI:
        writer.record_region(analysis.selected_region)
    return 0


@app.command()
def check(
    image_model: Optional[str] = typer.Argument(
        None, help="Image model to include: gpt-image-1, gpt-image-1.5 or none (local mode only)"
    ),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write the quota analysis to this JSON file"),
    provider: Optional[str] = typer.Option(
        None, "--provider", help="Usage provider: cli (Azure CLI) or sdk (Azure SDK). Defaults to QUOTA_PROVIDER or cli"
    ),
    debug: bool = typer.Option(False, "--debug", help="Print verbose debug information including all Azure CLI commands"),
):
    """Check Azure OpenAI quota and recommend a region."""
    try:
        code = run(image_model=image_model, output=output, provider=provider, debug=debug)
    except Exception as e:
        console.print(f"[bold red]Error: {escape(str(e))}[/]")
        code = 1
    raise typer.Exit(code=code)


if __name__ == "__main__":
    app()

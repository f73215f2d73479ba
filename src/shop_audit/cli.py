"""CLI interface for shop-audit."""

import json
import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich import box

from . import __version__
from .auditor import COMPLIANCE_MAX_SCORE, SEO_MAX_SCORE, audit_store
from .config import Settings
from .gemini import GeminiClient
from .models import AuditOutcome, ContentRequest, PolicyRequest, RemediationResult
from .remediation import apply_content, apply_policies
from .shopify import ShopifyAdmin, StoreSession


console = Console()


def configure_logging(level: str = "WARNING") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def score_color(score: int, max_score: int = 100) -> str:
    """Get color for a score value."""
    pct = (score * 100) // max_score if max_score > 0 else 0
    if pct >= 80:
        return "green"
    elif pct >= 60:
        return "yellow"
    elif pct >= 40:
        return "orange1"
    else:
        return "red"


def print_score_bar(score: int, max_score: int = 100, width: int = 20) -> Text:
    """Create a visual score bar."""
    filled = (score * width) // max_score if max_score > 0 else 0
    empty = width - filled
    color = score_color(score, max_score)

    bar = Text()
    bar.append("█" * filled, style=color)
    bar.append("░" * empty, style="dim")
    bar.append(f" {score}/{max_score}", style=f"bold {color}")
    return bar


def print_audit(outcome: AuditOutcome, shop: str) -> None:
    """Print audit scorecards to console."""
    result = outcome.audit_data

    console.print()
    console.print(Panel(f"[bold]{shop}[/bold]", title="🔍 Store Audit", border_style="blue"))

    for error in outcome.errors:
        console.print(f"\n[red]Error:[/red] {error}")

    console.print()
    console.print("  Health Score: ", end="")
    console.print(print_score_bar(result.total_score, width=25))
    console.print()

    table = Table(box=box.SIMPLE, show_header=True, header_style="bold")
    table.add_column("Check", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Status")

    missing = [name for name, present in result.compliance_status.items() if not present]
    table.add_row(
        "Compliance",
        f"[{score_color(result.compliance_score, COMPLIANCE_MAX_SCORE)}]"
        f"{result.compliance_score}/{COMPLIANCE_MAX_SCORE}[/]",
        f"[red]{len(missing)} missing[/red]" if missing else "[green]OK[/green]",
    )
    seo = result.seo_status
    table.add_row(
        "Product SEO",
        f"[{score_color(result.seo_score, SEO_MAX_SCORE)}]{result.seo_score}/{SEO_MAX_SCORE}[/]",
        f"{seo.optimized}/{seo.checked} optimized ({seo.total_products} products)",
    )
    console.print(table)

    if result.recommendations:
        console.print("\n[bold]🎯 Recommendations:[/bold]\n")
        for i, recommendation in enumerate(result.recommendations, 1):
            console.print(f"  {i}. {recommendation}")
        console.print()

    console.print("[dim]─" * 50 + "[/dim]")
    console.print(f"[dim]shop-audit v{__version__}[/dim]")
    console.print()


def print_remediation(result: RemediationResult, title: str) -> None:
    console.print()
    style = "green" if result.success else "red"
    console.print(Panel(result.message or ("Done" if result.success else "Failed"),
                        title=title, border_style=style))

    if result.degraded:
        console.print("[yellow]⚠ Placeholder content: GEMINI_API_KEY is not set[/yellow]")
    for error in result.errors:
        console.print(f"  [red]✗[/red] {error}")
    for page in result.policy_results:
        console.print(f"  [green]✓[/green] {page.policy}: [cyan]{page.url}[/cyan]")
    if result.product_name:
        console.print(f"  [green]✓[/green] New title: [bold]{result.product_name}[/bold]")
        console.print(f"    [dim]{result.new_meta_description}[/dim]")
    console.print()


def build_store(ctx: click.Context) -> ShopifyAdmin:
    settings: Settings = ctx.obj["settings"]
    shop = ctx.obj["shop"] or settings.shop
    token = ctx.obj["token"] or settings.access_token
    if not shop or not token:
        raise click.UsageError("Set SHOPIFY_SHOP and SHOPIFY_ACCESS_TOKEN (or pass --shop/--token).")
    return ShopifyAdmin(StoreSession(shop=shop, access_token=token), settings.shopify)


def finish(result_ok: bool) -> None:
    if not result_ok:
        sys.exit(1)


@click.group(invoke_without_command=True)
@click.option("--shop", help="Shop domain, e.g. example.myshopify.com")
@click.option("--token", help="Admin API access token")
@click.option("--log-level", default="WARNING", help="Logging level")
@click.pass_context
@click.version_option(version=__version__)
def cli(ctx, shop: str | None, token: str | None, log_level: str):
    """Shop Audit - policy compliance and product SEO audit with AI remediation.

    \b
    Quick start:
        shop-audit audit
        shop-audit policies --business-name "Acme" --contact-email hi@acme.test
        shop-audit rewrite gid://shopify/Product/123 --name "Desk Chair"
    """
    configure_logging(log_level)
    ctx.ensure_object(dict)
    ctx.obj.setdefault("settings", Settings.from_env())
    ctx.obj["shop"] = shop
    ctx.obj["token"] = token
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def audit(ctx, json_output: bool):
    """Score policy compliance and product SEO coverage."""
    store = build_store(ctx)
    with console.status(f"[bold blue]Auditing {store.shop}...[/bold blue]"):
        outcome = audit_store(store)

    if json_output:
        click.echo(json.dumps({
            "success": outcome.success,
            "errors": outcome.errors,
            "audit_data": outcome.audit_data.to_dict(),
        }, indent=2))
    else:
        print_audit(outcome, store.shop)
    finish(outcome.success)


@cli.command()
@click.option("--business-name", required=True, help="Legal business name")
@click.option("--contact-email", required=True, help="Customer contact email")
@click.option("--jurisdiction", default="EU_GDPR", show_default=True,
              help="EU_GDPR, UK_GDPR, US_CCPA, CA_PIPEDA, AU_PRIVACY or free text")
@click.option("--refund-days", default="30", show_default=True, help="Refund window in days")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def policies(ctx, business_name: str, contact_email: str, jurisdiction: str,
             refund_days: str, json_output: bool):
    """Generate Privacy, Terms and Refund policies and publish them as pages."""
    settings: Settings = ctx.obj["settings"]
    store = build_store(ctx)
    request = PolicyRequest(
        business_name=business_name,
        contact_email=contact_email,
        jurisdiction=jurisdiction,
        refund_days=refund_days,
    )
    with console.status("[bold blue]Generating policies...[/bold blue]"):
        result = apply_policies(
            request,
            generator=GeminiClient(settings.gemini),
            store=store,
            allow_placeholder=settings.gemini.allow_placeholder,
        )

    if json_output:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        print_remediation(result, "📜 Policy Generator")
    finish(result.success)


@cli.command()
@click.argument("product_id")
@click.option("--name", "product_name", help="Current product title")
@click.option("--description", "product_description", help="Current product description (HTML)")
@click.option("--tags", "product_tags", help="Comma-separated product tags")
@click.option("--tone", default="Professional", show_default=True,
              help="Professional, Casual, Luxury, Minimalist or free text")
@click.option("--language", "target_language", default="English", show_default=True)
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def rewrite(ctx, product_id: str, product_name: str | None, product_description: str | None,
            product_tags: str | None, tone: str, target_language: str, json_output: bool):
    """Rewrite a product's title, description and meta description."""
    settings: Settings = ctx.obj["settings"]
    store = build_store(ctx)
    request = ContentRequest(
        product_id=product_id,
        product_name=product_name,
        product_description=product_description,
        product_tags=product_tags,
        tone=tone,
        target_language=target_language,
    )
    with console.status("[bold blue]Rewriting product content...[/bold blue]"):
        result = apply_content(
            request,
            generator=GeminiClient(settings.gemini),
            store=store,
            allow_placeholder=settings.gemini.allow_placeholder,
        )

    if json_output:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        print_remediation(result, "✍️ Content Writer")
    finish(result.success)


def main():
    cli()


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
AEO Intelligence CLI - SEO Health Checks & AI Visibility Scoring

Usage:
    aeo health https://example.com
    aeo visibility "Acme CRM" https://acme.com -q "best CRM for startups" -c HubSpot
    aeo check
"""

import asyncio
import json
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import click
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

import config
from ai_client import get_ai_client
from fetcher import InvalidURLError, normalize_url
from generation import generate_questions_and_competitors
from health_service import HealthAggregator
from models import Competitor, Product, QuestionOrigin, TestQuestion
from oracle import LLMMentionOracle
from scoring import CATEGORY_LABELS, calculate_visibility_band
from visibility_scorer import VisibilityScorer

console = Console()

STATUS_COLORS = {"excellent": "green", "good": "cyan", "fair": "yellow", "poor": "red", "critical": "red"}
PRIORITY_COLORS = {"critical": "bold red", "high": "red", "medium": "yellow", "low": "dim"}


def _score_color(score: int) -> str:
    if score >= 80:
        return "green"
    if score >= 60:
        return "cyan"
    if score >= 40:
        return "yellow"
    return "red"


def _save(data: dict, output_path: str) -> None:
    Path(output_path).write_text(json.dumps(data, indent=2, default=str))
    console.print(f"\n[dim]Saved to:[/dim] [cyan]{output_path}[/cyan]")


@click.group()
@click.version_option(version="1.0.0")
def cli():
    """
    AEO Intelligence - SEO Health Checks & AI Visibility Scoring
    """
    pass


@cli.command()
@click.argument("url")
@click.option("--output", "-o", default=None, help="Output file (json)")
@click.option("--verbose", "-v", is_flag=True, help="Show category details")
def health(url: str, output: Optional[str], verbose: bool):
    """
    Run the five-category SEO health check on a website.

    Example:
        aeo health https://example.com
    """
    console.print()
    console.print(Panel(
        f"[bold cyan]AEO Intelligence - SEO Health Check[/bold cyan]\n\n"
        f"URL: [green]{url}[/green]",
        border_style="cyan"
    ))

    async def run_check():
        with Progress(SpinnerColumn(), TextColumn("[progress.description]{task.description}"), console=console) as progress:
            progress.add_task("[cyan]Running probes...", total=None)
            return await HealthAggregator().check(url)

    try:
        report = asyncio.run(run_check())
    except InvalidURLError as e:
        console.print(f"\n[red]Invalid URL:[/red] {e}")
        sys.exit(1)

    color = STATUS_COLORS.get(report.status, "white")
    console.print()
    console.print(Panel(
        f"[bold]Score:[/bold] [{color}]{report.overall_score}/100[/{color}]  "
        f"[bold]Status:[/bold] [{color}]{report.status}[/{color}]",
        title="[bold green]Results[/bold green]",
        border_style="green"
    ))

    table = Table(title="Categories", show_header=True, header_style="bold")
    table.add_column("Category", style="cyan", width=18)
    table.add_column("Score", justify="right", width=8)
    table.add_column("Status", width=10)
    table.add_column("Issues")
    for category in report.categories:
        cat_color = STATUS_COLORS.get(category.status, "white")
        table.add_row(
            CATEGORY_LABELS[category.name],
            f"[{cat_color}]{category.score}[/{cat_color}]",
            f"[{cat_color}]{category.status}[/{cat_color}]",
            "\n".join(category.issues) if verbose else str(len(category.issues)),
        )
    console.print(table)

    if report.action_items:
        console.print()
        console.print("[bold]Priority Actions:[/bold]")
        for idx, item in enumerate(report.action_items, 1):
            p_color = PRIORITY_COLORS.get(item.priority, "white")
            console.print(f"  {idx}. [{p_color}]{item.priority.upper()}[/{p_color}] {item.title} - [dim]{item.description}[/dim]")

    if output:
        _save(report.model_dump(mode="json", by_alias=True), output)
    console.print()


@cli.command()
@click.argument("product_name")
@click.argument("website")
@click.option("--category", "-k", default="software", help="Product category (default: software)")
@click.option("--region", "-r", default="global", help="Region for generated questions")
@click.option("--question", "-q", "questions", multiple=True, help="Test question (repeatable)")
@click.option("--competitor", "-c", "competitors", multiple=True, help="Competitor name (repeatable)")
@click.option("--output", "-o", default=None, help="Output file (json)")
def visibility(product_name: str, website: str, category: str, region: str,
               questions: Tuple[str, ...], competitors: Tuple[str, ...], output: Optional[str]):
    """
    Score simulated AI assistant visibility for a product.

    Questions and competitors are generated with the configured LLM when
    none are given.

    Example:
        aeo visibility "Acme CRM" https://acme.com -q "best CRM for startups" -c HubSpot -c Pipedrive
    """
    try:
        website = normalize_url(website)
    except InvalidURLError as e:
        console.print(f"\n[red]Invalid URL:[/red] {e}")
        sys.exit(1)

    console.print()
    console.print(Panel(
        f"[bold cyan]AEO Intelligence - AI Visibility[/bold cyan]\n\n"
        f"Product: [green]{product_name}[/green]\n"
        f"Website: [green]{website}[/green]\n"
        f"Provider: [green]{config.LLM_PROVIDER}[/green]",
        border_style="cyan"
    ))

    ai_client = get_ai_client()
    product = Product(name=product_name, website=website, category=category)

    async def run_scoring():
        test_questions: List[TestQuestion] = [
            TestQuestion(text=text, region=region, origin=QuestionOrigin.MANUAL) for text in questions
        ]
        rivals: List[Competitor] = [
            Competitor(name=name, category=category, rank=idx) for idx, name in enumerate(competitors, 1)
        ]

        with Progress(SpinnerColumn(), TextColumn("[progress.description]{task.description}"), console=console) as progress:
            task = progress.add_task("[cyan]Preparing questions...", total=None)
            if not test_questions or not rivals:
                generated_questions, generated_competitors = await generate_questions_and_competitors(
                    ai_client, product_name, category, region=region, website_url=website
                )
                test_questions = test_questions or generated_questions
                rivals = rivals or generated_competitors

            progress.update(task, description=f"[cyan]Scoring {len(test_questions)} questions...")
            scorer = VisibilityScorer(LLMMentionOracle(ai_client))
            return await scorer.score(product, test_questions, rivals)

    try:
        result = asyncio.run(run_scoring())
    except Exception as e:
        console.print(f"\n[red]Error:[/red] {e}")
        sys.exit(1)

    color = _score_color(result.overall_score)
    band, _ = calculate_visibility_band(result.overall_score)
    console.print()
    console.print(Panel(
        f"[bold]Visibility:[/bold] [{color}]{result.overall_score}%[/{color}]  "
        f"[bold]Band:[/bold] {band}\n\n"
        f"[bold]Mentions:[/bold] {result.total_mentions}  "
        f"[bold]Citations:[/bold] {result.total_citations}  "
        f"[bold]Questions:[/bold] {result.questions_evaluated}",
        title="[bold green]Results[/bold green]",
        border_style="green"
    ))

    table = Table(title="Platforms", show_header=True, header_style="bold")
    table.add_column("Platform", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Mentions", justify="right")
    table.add_column("Citations", justify="right")
    table.add_column("Errors", justify="right")
    for p in result.platform_performance:
        table.add_row(p.platform_name, f"{p.score}%", str(p.mention_count), str(p.citation_count), str(p.errors))
    console.print(table)

    if result.competitor_breakdown:
        comp_table = Table(title="Competitors", show_header=True, header_style="bold")
        comp_table.add_column("Rank", justify="right", width=6)
        comp_table.add_column("Name", style="cyan")
        comp_table.add_column("Visibility", justify="right")
        comp_table.add_column("Mentions", justify="right")
        for c in result.competitor_breakdown:
            comp_table.add_row(str(c.rank), c.name, f"{c.visibility}%", str(c.mentions))
        console.print(comp_table)

    if output:
        _save(result.model_dump(mode="json", by_alias=True), output)
    console.print()


@cli.command()
def check():
    """Check LLM provider configuration."""
    console.print()
    console.print("[bold cyan]AEO Intelligence - Configuration Check[/bold cyan]")
    console.print()

    table = Table(show_header=False)
    table.add_column("Setting", style="dim")
    table.add_column("Status")
    table.add_row("LLM_PROVIDER", config.LLM_PROVIDER)
    for provider, configured in get_ai_client().configured_providers().items():
        key_name = f"{provider.upper()}_API_KEY"
        table.add_row(key_name, "[green]Set[/green]" if configured else "[red]Not set[/red]")
    table.add_row("PDF_SERVICE_URL", config.PDF_SERVICE_URL)
    console.print(table)
    console.print()


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()

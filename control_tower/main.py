"""
Control Tower analytics — CLI Entrypoint.

Usage:
    python -m control_tower.main generate    # Write synthetic data store snapshots
    python -m control_tower.main pipeline    # Print revenue windows and rollups
    python -m control_tower.main overview    # Print the full overview for a view state
    python -m control_tower.main run-all     # generate + pipeline + overview
"""

import click
from rich.console import Console

from control_tower.contracts.schemas import (
    CATEGORY_WEIGHTS,
    FILTER_DIMENSIONS,
    GRANULARITIES,
    TIME_RANGES,
    WILDCARD,
)

console = Console()


@click.group()
def cli():
    """Control Tower analytics aggregation layer."""
    pass


@cli.command()
def generate():
    """Write synthetic data store snapshots to data/raw."""
    console.rule("[bold]Step 1: Data Generation[/bold]")
    from control_tower.data_generator.generate import main
    main()
    console.print("[green]Data generation complete.[/green]\n")


@cli.command()
def pipeline():
    """Resolve windows and roll up revenue."""
    console.rule("[bold]Step 2: Revenue Pipeline[/bold]")
    from control_tower.pipeline.__main__ import main as pipeline_main
    pipeline_main()
    console.print("[green]Pipeline complete.[/green]\n")


@cli.command()
@click.option("--continent", default=WILDCARD, show_default=True)
@click.option("--country", default=WILDCARD, show_default=True)
@click.option("--category", "region_category", default=WILDCARD, show_default=True,
              help="Region category filter.")
@click.option("--seller-type", default=WILDCARD, show_default=True)
@click.option("--shipping-mode", default=WILDCARD, show_default=True)
@click.option("--time-range", type=click.Choice(TIME_RANGES), default="month", show_default=True)
@click.option("--granularity", type=click.Choice(GRANULARITIES), default="weekly", show_default=True)
@click.option("--weight", "weight_category", type=click.Choice(list(CATEGORY_WEIGHTS)),
              default="all", show_default=True, help="Category weight for the revenue series.")
def overview(continent, country, region_category, seller_type, shipping_mode,
             time_range, granularity, weight_category):
    """Print KPIs, revenue series and the regional rollup."""
    console.rule("[bold]Step 3: Overview[/bold]")
    from control_tower.analytics.__main__ import main as overview_main

    filters = dict(zip(FILTER_DIMENSIONS, [continent, country, region_category, seller_type, shipping_mode]))
    overview_main(filters=filters, time_range=time_range, granularity=granularity, category=weight_category)


@cli.command(name="run-all")
@click.pass_context
def run_all(ctx):
    """Run generation, pipeline and overview end-to-end."""
    console.rule("[bold cyan]Control Tower Analytics[/bold cyan]")
    console.print("Running full end-to-end flow...\n")

    generate.callback()
    pipeline.callback()
    ctx.invoke(overview)

    console.rule("[bold green]Done[/bold green]")
    console.print("\nSnapshots: data/raw/*.parquet")


if __name__ == "__main__":
    cli()

"""Command line interface."""

import asyncio
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from sitepager.builder import SiteBuilder
from sitepager.config import SitepagerConfig
from sitepager.exceptions import SitepagerError
from sitepager.logging_setup import configure_logging

app = typer.Typer(name="sitepager", help="Aggregate and paginate static site content.")

console = Console()


@app.callback()
def main(
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level (defaults to SITEPAGER_LOG_LEVEL)."),
):
    """
    Aggregate and paginate static site content.
    """
    configure_logging(log_level)


@app.command()
def build(
    site_root: Path = typer.Option(Path("."), "--site-root", help="Site root containing .sitepager.toml."),
    output: Path | None = typer.Option(None, "--output", help="Override the configured output directory."),
):
    """
    Render every page and its synthetic pagination pages.
    """
    try:
        config = SitepagerConfig.load(site_root.resolve())
        if output is not None:
            config.paths.output_dir = output.resolve()
        builder = SiteBuilder(config)
        results = asyncio.run(builder.build())
    except SitepagerError as exc:
        console.print(f"[bold red]Build failed:[/] {exc}")
        raise typer.Exit(code=1) from exc

    table = Table(title="Rendered pages")
    table.add_column("Page", style="cyan")
    table.add_column("Output")
    table.add_column("Synthetic", justify="center")
    for result in results:
        table.add_row(
            result.path.pathname,
            str(builder.output_path(result.path.pathname)),
            "yes" if result.synthetic else "",
        )
    console.print(table)
    console.print(f"\n[bold green]Built {len(results)} pages.[/bold green]")

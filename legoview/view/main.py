"""CLI entry point for browsing LEGO deals and sales.

Loads configuration, bootstraps the view controller against the API, replays
the requested filter/sort/favorite selections as view events and prints the
resulting projection.
"""

import asyncio
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import click
from rich.console import Console
from rich.table import Table

from legoview import __version__
from legoview.fetcher.http_client import AsyncHTTPClient
from legoview.fetcher.lego_api import LegoApiClient
from legoview.fetcher.retry_handler import RetryPolicy
from legoview.models.config import ConfigManager, ViewerConfig
from legoview.models.data_models import FilterCriterion, Pagination, Record, SortCriterion
from legoview.monitoring.logger import StructuredLogger
from legoview.view.controller import ViewController
from legoview.view.events import (
    FavoriteToggled,
    FavoritesOnlyToggled,
    FilterToggled,
    ModeChanged,
    PageChanged,
    PageSizeChanged,
    SortChanged,
)
from legoview.view.output import ProjectionFormatter


console = Console()


class RichRenderer:
    """Rendering collaborator keeping the latest projection for display."""
    
    def __init__(self):
        self.records: List[Record] = []
        self.pagination: Optional[Pagination] = None
        self.renders = 0
    
    def __call__(self, records: List[Record], pagination: Pagination) -> None:
        self.records = records
        self.pagination = pagination
        self.renders += 1
    
    def render(self, controller: ViewController) -> None:
        state = controller.state
        title = "Vinted Sales" if state.set_id else "Deals"
        if state.set_id:
            title += f" for set {state.set_id}"
        
        if not self.records:
            console.print(f"[yellow]No {title.lower()} available[/yellow]")
        else:
            table = Table(title=title)
            table.add_column("", width=1)
            table.add_column("Id", style="cyan")
            table.add_column("Title")
            table.add_column("Price", justify="right", style="green")
            table.add_column("Discount", justify="right")
            table.add_column("🔥", justify="right", style="red")
            table.add_column("💬", justify="right")
            table.add_column("Date", style="magenta")
            table.add_column("Uuid", style="dim")
            
            for record in self.records:
                table.add_row(
                    "★" if controller.favorites.has(record.uuid) else "☆",
                    record.id,
                    record.title,
                    f"{record.price} €" if record.price is not None else "?",
                    f"{record.discount or 0}%",
                    str(record.temperature or 0),
                    str(record.comments or 0),
                    record.published.date().isoformat() if record.has_known_date else "Invalid Date",
                    record.uuid,
                )
            console.print(table)
        
        pagination = self.pagination or state.pagination
        console.print(
            f"Page {pagination.current_page}/{pagination.page_count}"
            f" · {pagination.count} {'sales' if state.set_id else 'deals'}"
            f" · {len(self.records)} shown"
        )
        set_ids = controller.available_set_ids()
        if set_ids:
            console.print(f"[dim]Set ids on this page: {', '.join(set_ids)}[/dim]")


async def browse(
    config: ViewerConfig,
    renderer: RichRenderer,
    page: int,
    size: Optional[int],
    set_id: Optional[str],
    filter_name: Optional[str],
    sort_name: Optional[str],
    favorites: Tuple[str, ...],
    favorites_only: bool,
) -> ViewController:
    """
    Run one browsing session and return the settled controller.
    
    Events are dispatched in the order a user would click through the page:
    bootstrap, page size, set selection, page, then filter/sort/favorites.
    """
    logger = StructuredLogger(level=config.log_level, structured=config.structured_logging)
    retry_policy = RetryPolicy(
        max_retries=config.max_retries,
        base_delay=config.retry_base_delay,
        max_delay=config.retry_max_delay,
        jitter_max=config.retry_jitter_max,
        retryable_status_codes=config.retryable_status_codes,
    )
    
    async with AsyncHTTPClient(
        base_url=config.api_base_url,
        connect_timeout=config.connect_timeout,
        read_timeout=config.read_timeout,
    ) as http_client:
        source = LegoApiClient(http_client, retry_policy=retry_policy, logger=logger)
        controller = ViewController(
            source,
            on_projection_ready=renderer,
            page_size=config.default_page_size,
            logger=logger,
        )
        
        await controller.start()
        if size is not None:
            await controller.dispatch(PageSizeChanged(size))
        if set_id:
            await controller.dispatch(ModeChanged(set_id))
        if page != 1:
            await controller.dispatch(PageChanged(page))
        
        for uuid in favorites:
            await controller.dispatch(FavoriteToggled(uuid))
        if filter_name:
            await controller.dispatch(FilterToggled(filter_name))
        if sort_name:
            await controller.dispatch(SortChanged(sort_name))
        if favorites_only:
            await controller.dispatch(FavoritesOnlyToggled())
    
    return controller


@click.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(path_type=Path),
    default="config/config.yaml",
    help="Path to configuration YAML file",
)
@click.option("--base-url", help="API base URL (overrides config)")
@click.option("--page", "-p", type=click.IntRange(min=1), default=1, show_default=True, help="Page to show")
@click.option("--size", "-s", type=click.IntRange(min=1), help="Records per page (overrides config)")
@click.option("--set-id", help="Show Vinted sales for this LEGO set id instead of deals")
@click.option(
    "--filter",
    "filter_name",
    type=click.Choice([c.value for c in FilterCriterion if c is not FilterCriterion.NONE]),
    help="Filter to activate",
)
@click.option(
    "--sort",
    "sort_name",
    type=click.Choice([c.value for c in SortCriterion]),
    help="Sort order",
)
@click.option("--favorite", "-f", "favorites", multiple=True, help="Mark a record uuid as favorite")
@click.option("--favorites-only", is_flag=True, help="Only show favorited records")
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    help="Also save the projection as JSON to this path",
)
@click.option("--save", is_flag=True, help="Save the projection as JSON to the configured output path")
@click.option(
    "--log-level",
    "-l",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging level (overrides config)",
)
@click.version_option(version=__version__, prog_name="legoview")
def main(
    config: Path,
    base_url: Optional[str],
    page: int,
    size: Optional[int],
    set_id: Optional[str],
    filter_name: Optional[str],
    sort_name: Optional[str],
    favorites: Tuple[str, ...],
    favorites_only: bool,
    output: Optional[Path],
    save: bool,
    log_level: Optional[str],
) -> None:
    """
    LEGO deals and Vinted sales browser.
    
    Fetches a page of deals (or the sales of one set), applies the selected
    filter, sort and favorites, and prints the result.
    
    Examples:
    
        # First page of deals
        $ legoview
        
        # Hot deals, cheapest first, 12 per page
        $ legoview --filter hot-deals --sort price-asc --size 12
        
        # Vinted sales for set 42151, newest first
        $ legoview --set-id 42151 --sort date-desc
    """
    try:
        cli_overrides = {
            "api_base_url": base_url,
            "log_level": log_level.upper() if log_level else None,
        }
        viewer_config = ConfigManager(config).load_config(cli_overrides)
        
        renderer = RichRenderer()
        controller = asyncio.run(browse(
            viewer_config,
            renderer,
            page=page,
            size=size,
            set_id=set_id,
            filter_name=filter_name,
            sort_name=sort_name,
            favorites=favorites,
            favorites_only=favorites_only,
        ))
        
        renderer.render(controller)
        
        if save and not output:
            output = viewer_config.output_path
        if output:
            ProjectionFormatter().save(controller.state, controller.favorites, str(output))
            console.print(f"[bold]Projection saved to:[/bold] {output}")
        
        sys.exit(0)
        
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)
    except ValueError as e:
        console.print(f"\n[red]Configuration error:[/red] {e}", style="bold red")
        sys.exit(1)


if __name__ == "__main__":
    main()

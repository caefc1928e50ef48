"""Typer-based CLI entry point."""

from __future__ import annotations

import functools
import logging
from pathlib import Path
from typing import Optional

import typer
from rich import print
from rich.console import Console
from rich.table import Table

from .appctx import AppContext
from .catalog.builder import write_manifest
from .catalog.loader import load_catalog
from .config import DEFAULT_MANIFEST_PATH, NONE_INDEX
from .core.routing import RouteCodec, encode
from .core.search import SearchIndex
from .core.selection import SelectionStateMachine
from .domain.models import Catalog, Coordinate, ItemMatch, SubcategoryMatch
from .errors import CatalogLoadError, HeroDexError, ManifestBuildError
from .infrastructure.services.image_cache import FileImageLoader, ImageCache
from .infrastructure.services.prefetcher import Prefetcher, plan_prefetch
from .utils.logging import ensure_console_logger, get_logger

app = typer.Typer(help="Browse, search and pin entries of a HeroDex catalog")
favorites_app = typer.Typer(help="Manage pinned items")
app.add_typer(favorites_app, name="favorites")

console = Console()


def _handle_errors(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (CatalogLoadError, ManifestBuildError) as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(1) from exc
        except HeroDexError as exc:
            typer.echo(f"Unexpected error: {exc}", err=True)
            raise typer.Exit(1) from exc

    return wrapper


@app.callback()
def main(
    ctx: typer.Context,
    settings: Optional[Path] = typer.Option(None, "--settings", help="Path to settings.json"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output"),
) -> None:
    """Set up logging and the shared application context."""

    ensure_console_logger(
        get_logger(), "herodex-cli", level=logging.DEBUG if verbose else logging.WARNING
    )
    ctx.obj = AppContext.from_settings_path(settings)


def _load(context: AppContext, site_root: Path) -> Catalog:
    return load_catalog(site_root, context.settings.get("manifest_path", DEFAULT_MANIFEST_PATH))


def _summary(info: Optional[str]) -> str:
    lines = (info or "").strip().splitlines()
    return lines[0] if lines else ""


@app.command()
@_handle_errors
def build(site_root: Path = typer.Argument(Path.cwd())) -> None:
    """Scan ``database/`` and write the catalog manifest."""

    out_path = write_manifest(site_root)
    catalog = load_catalog(site_root)
    print(f"[green]Indexed {len(catalog.categories)} categories and {catalog.item_count} items")
    print(f"Wrote {out_path}")


@app.command()
@_handle_errors
def show(
    ctx: typer.Context,
    site_root: Path = typer.Argument(Path.cwd(), exists=True),
    route: str = typer.Option("", "--route", "-r", help="Location fragment such as #0/1/2"),
) -> None:
    """List the items a route points at."""

    context: AppContext = ctx.obj
    catalog = _load(context, site_root)
    selection = SelectionStateMachine(catalog, context.favorites)
    codec = RouteCodec(catalog, context.favorites)
    codec.apply(route, selection)

    coordinate = selection.coordinate
    if coordinate.is_favorites:
        title = "Favorites"
    else:
        parts = (selection.current_category(), selection.current_subcategory())
        title = " / ".join(part.name for part in parts if part is not None)

    items = selection.current_items()
    if not items:
        print(f"[yellow]Nothing to show at {codec.encode(coordinate)}")
        return

    table = Table(title=f"{title} {codec.encode(coordinate)}")
    table.add_column("#", justify="right")
    table.add_column("Name")
    table.add_column("Pinned", justify="center")
    table.add_column("Info")
    for index, item in enumerate(items):
        if coordinate.is_favorites:
            pinned = True
        else:
            pinned = context.favorites.is_pinned(
                Coordinate(coordinate.category, coordinate.subcategory, index)
            )
        table.add_row(
            f"> {index}" if index == coordinate.item else str(index),
            item.name,
            "*" if pinned else "",
            _summary(item.info),
        )
    console.print(table)


@app.command()
@_handle_errors
def search(
    ctx: typer.Context,
    site_root: Path = typer.Argument(..., exists=True),
    query: str = typer.Argument(...),
    limit: Optional[int] = typer.Option(None, "--limit", min=1, help="Maximum item matches"),
) -> None:
    """Search names, paths and descriptions across the whole catalog."""

    context: AppContext = ctx.obj
    catalog = _load(context, site_root)
    results = SearchIndex(catalog).search(query, context.favorites, limit=limit)
    if not results:
        print(f"[yellow]No matches for {query!r}")
        return

    codec = RouteCodec(catalog, context.favorites)
    table = Table(title=f"Results for {query!r}")
    table.add_column("Route")
    table.add_column("Name")
    table.add_column("Pinned", justify="center")
    for result in results:
        if isinstance(result, SubcategoryMatch):
            subcategory = catalog.subcategory(result.category_index, result.subcategory_index)
            first = 0 if result.item_count else NONE_INDEX
            target = Coordinate(result.category_index, result.subcategory_index, first)
            table.add_row(
                codec.encode(target),
                f"[bold]{subcategory.name}[/bold] ({result.item_count} items)",
                "",
            )
        elif isinstance(result, ItemMatch):
            table.add_row(
                codec.encode(result.coordinate),
                result.item.name,
                "*" if result.pinned else "",
            )
    console.print(table)


@app.command()
@_handle_errors
def prefetch(
    ctx: typer.Context,
    site_root: Path = typer.Argument(Path.cwd(), exists=True),
    route: str = typer.Option("", "--route", "-r", help="Load this route's images first"),
) -> None:
    """Decode every referenced image once and report the missing ones."""

    context: AppContext = ctx.obj
    catalog = _load(context, site_root)
    selection = SelectionStateMachine(catalog, context.favorites)
    RouteCodec(catalog, context.favorites).apply(route, selection)

    plan = plan_prefetch(catalog, selection.coordinate)
    cache = ImageCache(
        FileImageLoader(site_root),
        max_workers=1,
        max_entries=int(context.settings.get("images.max_cached", 0)),
        event_bus=context.event_bus,
    )
    try:
        report = Prefetcher(cache, plan).run()
    finally:
        cache.shutdown(wait=True)
    colour = "green" if not report.unavailable else "yellow"
    print(
        f"[{colour}]Prefetched {report.loaded} of {len(plan)} images "
        f"({len(plan.priority)} priority), {report.unavailable} unavailable"
    )


@favorites_app.command("list")
@_handle_errors
def favorites_list(ctx: typer.Context) -> None:
    """List pinned items in pin order."""

    context: AppContext = ctx.obj
    entries = context.favorites.entries()
    if not entries:
        print("[yellow]No favorites pinned")
        return
    table = Table(title="Favorites")
    table.add_column("#", justify="right")
    table.add_column("Route")
    table.add_column("Name")
    table.add_column("Pinned at")
    for index, entry in enumerate(entries):
        table.add_row(str(index), encode(entry.coordinate), entry.name, entry.pinned_at)
    console.print(table)


@favorites_app.command("toggle")
@_handle_errors
def favorites_toggle(
    ctx: typer.Context,
    site_root: Path = typer.Argument(..., exists=True),
    route: str = typer.Argument(..., help="Route of the item, such as #0/1/2"),
) -> None:
    """Pin the item at ROUTE, or unpin it if it is already pinned."""

    context: AppContext = ctx.obj
    catalog = _load(context, site_root)
    selection = SelectionStateMachine(catalog, context.favorites)
    RouteCodec(catalog, context.favorites).apply(route, selection)

    coordinate = selection.coordinate
    item = selection.current_item()
    if item is None:
        typer.echo(f"Error: no item at {route}", err=True)
        raise typer.Exit(1)
    if coordinate.is_favorites:
        entry = context.favorites.entry_at(coordinate.item)
        coordinate, item = entry.coordinate, entry.item

    outcome = context.favorites.toggle_pin(coordinate, item)
    if not context.favorites.persist():
        typer.echo("Warning: favorites could not be saved", err=True)
    verb = "Pinned" if outcome.added else "Unpinned"
    print(f"[green]{verb} {outcome.name}")


if __name__ == "__main__":  # pragma: no cover
    app()

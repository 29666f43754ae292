# listing_search/cli/runner.py

"""Headless CLI runner that drives a SearchSession and prints the outcome."""

import json
import logging
import sys
from typing import Any

from rich.console import Console
from rich.table import Table

from listing_search.geo.bounds import has_valid_coords
from listing_search.geo.labels import country_name
from listing_search.models.product import ProductRecord
from listing_search.services.catalog_client import CatalogClient
from listing_search.services.errors import NetworkError
from listing_search.services.events import SearchEvent, SearchFailed
from listing_search.services.position import FixedPositionProvider
from listing_search.services.search_orchestrator import SearchOrchestrator
from listing_search.services.search_session import SearchSession

logger = logging.getLogger("listing_search.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def parse_bounds(raw: str) -> dict[str, float]:
    """Parse ``minLat,maxLat,minLng,maxLng`` into a bounds mapping.

    Raises ``ValueError`` on anything other than four numbers.
    """
    parts = [p.strip() for p in raw.split(",") if p.strip()]
    if len(parts) != 4:
        msg = "Expected minLat,maxLat,minLng,maxLng"
        raise ValueError(msg)
    min_lat, max_lat, min_lng, max_lng = (float(p) for p in parts)
    return {
        "minLat": min_lat,
        "maxLat": max_lat,
        "minLng": min_lng,
        "maxLng": max_lng,
    }


def _print_table(products: list[ProductRecord], label: str) -> None:
    """Render a Rich table of listings in display order."""
    table = Table(
        title=f"Resultados — {label}",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Title", max_width=50)
    table.add_column("Category", style="magenta")
    table.add_column("Location")
    table.add_column("Pinned", justify="center")

    for idx, p in enumerate(products, 1):
        location = ", ".join(x for x in (p.city, p.state, p.country) if x)
        table.add_row(
            str(idx),
            p.title[:50] or "—",
            p.category or "—",
            location or "—",
            "✓" if has_valid_coords(p) else "",
        )

    Console().print(table)


def _report_failure(event: SearchEvent) -> None:
    """Echo failure notifications to stderr as they are published."""
    if isinstance(event, SearchFailed):
        colour = "yellow" if event.error_kind == "no_results" else "red"
        _err.print(f"[{colour}]{event.message}[/{colour}]")


async def cli_search(
    mode: str,
    argument: str | None,
    output_format: str,
    lat: float | None = None,
    lng: float | None = None,
) -> int:
    """Run one search and return an exit code (0=results, 1=none/fail)."""
    async with CatalogClient() as client:
        orchestrator = SearchOrchestrator(
            client=client,
            position_provider=FixedPositionProvider(lat, lng),
        )
        session = SearchSession(orchestrator)
        session.channel.subscribe(_report_failure)

        _err.print(f"[bold]{mode}:[/bold] {argument or ''}")
        if mode == "text":
            result = await session.text_search(argument or "")
        elif mode == "address":
            result = await session.address_search(argument or "")
        elif mode == "gps":
            result = await session.gps_search()
        elif mode == "region":
            try:
                bounds: Any = parse_bounds(argument or "")
            except ValueError as exc:
                _err.print(f"[red]Invalid bounds: {exc}[/red]")
                return 1
            result = await session.region_search(bounds)
        elif mode == "country":
            result = await session.country_filter(argument or "")
        else:
            msg = f"Unknown mode: {mode}"
            raise ValueError(msg)

    if result is None:
        return 1

    _err.print(
        f"[green]✓ {len(session.products)} listings — "
        f"{result.applied_label}[/green]"
    )
    logger.info(
        "CLI %s finished via stages %s",
        mode,
        [s.value for s in result.stages],
    )

    if output_format == "table":
        _print_table(session.products, result.applied_label)
    else:
        json.dump(
            {
                "label": result.applied_label,
                "country": result.applied_country,
                "priority_keys": result.priority_keys,
                "categories": [
                    {"label": label, "count": count}
                    for label, count in session.category_options
                ],
                "items": [p.to_dict() for p in session.products],
            },
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")
    return 0


async def run_list_countries(output_format: str) -> int:
    """Print the countries that currently have listings."""
    async with CatalogClient() as client:
        orchestrator = SearchOrchestrator(client=client)
        try:
            counts = await orchestrator.list_active_countries()
        except NetworkError as exc:
            logger.error("Country listing failed: %s", exc)
            _err.print("[red]Falha ao carregar países.[/red]")
            return 1

    if not counts:
        _err.print("[yellow]Não foi possível carregar os países.[/yellow]")
        return 1

    if output_format == "table":
        table = Table(title="Países ativos", title_style="bold cyan")
        table.add_column("Code", style="bold")
        table.add_column("Country")
        table.add_column("Listings", justify="right", style="green")
        for c in counts:
            table.add_row(c.country, country_name(c.country), f"{c.total:,}")
        Console().print(table)
    else:
        json.dump(
            [
                {
                    "country": c.country,
                    "label": country_name(c.country),
                    "total": c.total,
                }
                for c in counts
            ],
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")
    return 0

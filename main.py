# main.py

"""Entry point for the listing_search headless CLI."""

import argparse
import asyncio
import logging
import sys

from listing_search.config.logging_config import setup_logging

logger = logging.getLogger("listing_search.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="listing_search",
        description=(
            "Classifieds search with geo-scoped fallbacks and "
            "deduplicated results."
        ),
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Echo INFO logs to stderr.",
    )
    sub = parser.add_subparsers(dest="mode", required=True)

    text = sub.add_parser("text", help="Free-text search.")
    text.add_argument("query", help="Search text.")

    address = sub.add_parser("address", help="Search around an address.")
    address.add_argument("address", help="Address or city.")

    gps = sub.add_parser("gps", help="Search near a coordinate.")
    gps.add_argument("--lat", type=float, required=True)
    gps.add_argument("--lng", type=float, required=True)

    region = sub.add_parser("region", help="Search a bounding box.")
    region.add_argument(
        "bounds", help="minLat,maxLat,minLng,maxLng"
    )

    country = sub.add_parser("country", help="Filter by country.")
    country.add_argument("code", help="ISO code or country name.")

    sub.add_parser("countries", help="List countries with listings.")
    return parser


def main() -> None:
    """Parse arguments and run the requested search."""
    parser = _build_parser()
    args = parser.parse_args()

    log_file = setup_logging(
        logging.INFO if args.verbose else logging.WARNING
    )
    logger.info("listing_search starting — log file: %s", log_file)

    from listing_search.cli.runner import cli_search, run_list_countries

    if args.mode == "countries":
        exit_code = asyncio.run(run_list_countries(args.output_format))
    else:
        argument = {
            "text": getattr(args, "query", None),
            "address": getattr(args, "address", None),
            "region": getattr(args, "bounds", None),
            "country": getattr(args, "code", None),
        }.get(args.mode)
        exit_code = asyncio.run(
            cli_search(
                mode=args.mode,
                argument=argument,
                output_format=args.output_format,
                lat=getattr(args, "lat", None),
                lng=getattr(args, "lng", None),
            )
        )
    sys.exit(exit_code)


if __name__ == "__main__":
    main()

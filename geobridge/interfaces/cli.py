"""
interfaces/cli.py
──────────────────────────────────────────────────────────────────────────────
Command-line interface for the geocoder.

Usage:
  # Forward geocode with the default provider
  python -m geobridge.interfaces.cli "1600 Pennsylvania Ave NW, Washington, DC"

  # Specific provider, at most 3 results
  python -m geobridge.interfaces.cli "Wien" --provider nominatim --limit 3

  # Reverse geocode
  python -m geobridge.interfaces.cli --reverse 38.897957 -77.036560

  # Dump as GeoJSON / WKT / KML
  python -m geobridge.interfaces.cli "Seattle, WA" --format geojson

  # Via installed entry-point (pyproject.toml [project.scripts])
  geobridge-geocode "Seattle, WA" --json

Exit codes:
  0 — success
  1 — lookup or configuration error
  2 — argument error
"""
from __future__ import annotations

import argparse
import json
import logging
import sys

from geobridge.domain.exceptions import GeocoderError
from geobridge.domain.models import Address
from geobridge.services.container import get_geocoder

logger = logging.getLogger(__name__)


# ── Argument parser ────────────────────────────────────────────────────────

def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="geobridge-geocode",
        description="Geocode an address or reverse-geocode coordinates.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument(
        "address",
        nargs="?",
        help="Address (or IP address) to geocode.",
    )
    p.add_argument(
        "--reverse", "-r",
        nargs=2,
        type=float,
        metavar=("LAT", "LON"),
        help="Reverse-geocode a latitude/longitude pair.",
    )
    p.add_argument(
        "--provider", "-p",
        metavar="NAME",
        help="Provider to use. (default: GEOCODER_DEFAULT_PROVIDER or first registered)",
    )
    p.add_argument(
        "--limit", "-l",
        type=int,
        metavar="N",
        help="Maximum number of results.",
    )
    p.add_argument(
        "--format", "-f",
        metavar="FORMAT",
        dest="dump_format",
        help="Dump results in a format (geojson, wkt, kml).",
    )
    p.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Output results as JSON.",
    )
    p.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging.",
    )
    return p


# ── Formatting helpers ─────────────────────────────────────────────────────

def _print_results_text(results: list[Address]) -> None:
    if not results:
        print("No results.")
        return
    for i, address in enumerate(results, start=1):
        print(f"  #{i}  {address.formatted_address or address.locality or '—'}")
        if address.coordinates:
            c = address.coordinates
            print(f"       Coordinates: {c.latitude}, {c.longitude}")
        if address.country:
            print(f"       Country: {address.country.name} ({address.country.code})")
        print(f"       Provider: {address.provided_by}")


def _print_results_json(results: list[Address]) -> None:
    print(json.dumps([a.to_dict() for a in results], indent=2, ensure_ascii=False))


# ── Main logic ─────────────────────────────────────────────────────────────

def run(args: argparse.Namespace) -> int:
    """Execute one lookup for the given arguments.

    Returns:
        Exit code (0 = success, 1 = error, 2 = bad arguments).
    """
    if not args.address and not args.reverse:
        print("ERROR: provide an address or --reverse LAT LON", file=sys.stderr)
        return 2
    if args.limit is not None and args.limit < 1:
        print("ERROR: --limit must be a positive integer", file=sys.stderr)
        return 2

    try:
        geocoder = get_geocoder()
        if args.provider:
            geocoder = geocoder.using(args.provider)
        if args.limit:
            geocoder = geocoder.limit(args.limit)

        if args.reverse:
            request = geocoder.reverse(*args.reverse)
        else:
            request = geocoder.geocode(args.address)

        if args.dump_format:
            for line in request.dump(args.dump_format):
                print(line)
            return 0

        results = request.get()
    except (GeocoderError, ValueError) as exc:
        logger.exception("Lookup failed")
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    printer = _print_results_json if args.json_output else _print_results_text
    printer(results)
    return 0


def main() -> None:
    """Entry point for the geobridge-geocode console script."""
    parser = _build_parser()
    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )

    sys.exit(run(args))


if __name__ == "__main__":
    main()

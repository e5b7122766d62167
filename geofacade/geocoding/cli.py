#!/usr/bin/env python3
"""
Command-line interface for the geocoding module.

Usage:
    python -m geofacade.geocoding.cli --address "1 Market St, San Francisco"
    python -m geofacade.geocoding.cli --address "1 Market St" --service google --alternative native
    python -m geofacade.geocoding.cli --reverse 37.7936,-122.3950 --service here
    python -m geofacade.geocoding.cli --address "Brandenburger Tor" --json
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Optional, List

from geofacade.core import settings
from geofacade.geocoding import (
    AddressRecord,
    GeocodeService,
    GeocodingError,
    ProviderKind,
)

logger = logging.getLogger(__name__)

SERVICE_CHOICES = [kind.value for kind in ProviderKind]


def parse_coordinate(value: str):
    """Parse "lat,lng" into a (lat, lng) tuple for argparse."""
    try:
        lat, lng = (float(part) for part in value.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected LAT,LNG, got {value!r}")
    return lat, lng


def print_records(records: List[AddressRecord], verbose: bool = False) -> None:
    """Print geocoding results in a readable form."""
    if not records:
        print("✗ No results")
        return

    print(f"✓ {len(records)} result(s) via {records[0].provider}")
    for i, record in enumerate(records, 1):
        print(f"\n[{i}] {record.formatted_address or '(no formatted address)'}")
        if record.coordinate:
            print(f"  Lat/Lng:  {record.coordinate.latitude:.6f}, {record.coordinate.longitude:.6f}")
        if record.locality:
            print(f"  Locality: {record.locality}")
        if record.postal_code:
            print(f"  Postal:   {record.postal_code}")
        if record.country:
            print(f"  Country:  {record.country} ({record.iso_country_code or '?'})")
        if verbose and record.raw_source is not None:
            print(f"  Raw Source: {record.raw_source}")


async def run_lookup(
    address: Optional[str],
    coordinate: Optional[tuple],
    service: str,
    alternative: Optional[str],
    as_json: bool = False,
    verbose: bool = False,
) -> int:
    """Run one lookup and print the outcome. Returns a process exit code."""
    geocoder = GeocodeService.from_settings(settings)

    if coordinate is not None:
        print(f"\nReverse geocoding: {coordinate[0]}, {coordinate[1]}", file=sys.stderr)
        request = geocoder.reverse_geocode(coordinate, service, alternative_service=alternative)
    else:
        print(f"\nGeocoding: {address}", file=sys.stderr)
        request = geocoder.geocode(address, service, alternative_service=alternative)

    print(f"Service: {service}" + (f" (fallback: {alternative})" if alternative else ""), file=sys.stderr)
    print("-" * 50, file=sys.stderr)

    try:
        records = await request
    except GeocodingError as e:
        print(f"✗ {e.__class__.__name__}: {e}")
        return 1

    if as_json:
        print(json.dumps([record.as_dict for record in records], indent=2, ensure_ascii=False))
    else:
        print_records(records, verbose=verbose)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Geocode an address or reverse geocode a coordinate"
    )

    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument(
        "--address", "-a",
        type=str,
        help="Geocode a single address"
    )
    target.add_argument(
        "--reverse", "-r",
        type=parse_coordinate,
        metavar="LAT,LNG",
        help="Reverse geocode a coordinate"
    )
    parser.add_argument(
        "--service", "-s",
        type=str,
        default=ProviderKind.NATIVE.value,
        choices=SERVICE_CHOICES,
        help="Geocoding provider to use"
    )
    parser.add_argument(
        "--alternative",
        type=str,
        choices=SERVICE_CHOICES,
        help="Provider to try once if the first one fails"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print results as JSON"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    return asyncio.run(run_lookup(
        address=args.address,
        coordinate=args.reverse,
        service=args.service,
        alternative=args.alternative,
        as_json=args.json,
        verbose=args.verbose,
    ))


if __name__ == "__main__":
    sys.exit(main())

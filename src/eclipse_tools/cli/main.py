"""CLI entry point: eclipse-tools totality|path subcommands."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import NoReturn, cast

from eclipse_tools.angle_utils import format_latlon
from eclipse_tools.config import get_max_step_km
from eclipse_tools.elements import ECLIPSE_2026_AUG_12, load_elements
from eclipse_tools.geometry import contains_point, polygon_bounds, signed_area
from eclipse_tools.path import centerline, closest_centerline_point, load_path, path_polygon
from eclipse_tools.totality import calculate_totality

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool = False) -> None:
    """Configure logging for CLI (stderr, level from --verbose or ECLIPSE_TOOLS_LOG)."""
    level = logging.DEBUG if verbose else logging.WARNING
    env_level = os.environ.get('ECLIPSE_TOOLS_LOG', '').upper()
    if env_level in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
        level = getattr(logging, env_level)
    logging.basicConfig(
        level=level,
        format='%(levelname)s: %(name)s: %(message)s',
        stream=sys.stderr,
    )


def _totality_cmd(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    """Compute local circumstances of totality (totality subcommand).

    Parameters:
        parser: Argument parser (unused).
        args: Parsed args; lat, lon, altitude, year or elements file.

    Returns:
        Exit code 0 on success, 1 on error.
    """
    try:
        if args.elements:
            elements = load_elements(args.elements)
        elif args.year is not None:
            elements = load_elements(args.year)
        else:
            elements = ECLIPSE_2026_AUG_12
        result = calculate_totality(
            args.lat,
            args.lon,
            elements,
            args.altitude,
            enforce_validity=args.enforce_validity,
        )
    except (ValueError, OSError) as e:
        logger.error('Totality calculation failed for (%s, %s): %s', args.lat, args.lon, e)
        print(f'Error: {e}', file=sys.stderr)
        return 1
    print(json.dumps(result.to_dict(), indent=2))
    return 0


def _path_cmd(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    """Densify a path table and summarize its polygon (path subcommand).

    Parameters:
        parser: Argument parser (unused).
        args: Parsed args; file, max_step_km, optional point.

    Returns:
        Exit code 0 on success, 1 on error.
    """
    max_step_km = args.max_step_km if args.max_step_km is not None else get_max_step_km()
    try:
        samples = load_path(args.file)
        polygon = path_polygon(samples, max_step_km)
    except (ValueError, OSError) as e:
        logger.error('Could not build path polygon from %s: %s', args.file, e)
        print(f'Error: {e}', file=sys.stderr)
        return 1

    print(f'Samples:   {len(samples)}')
    print(f'Vertices:  {len(polygon)}')
    print(f'Area:      {signed_area(polygon):.6f} deg^2')
    bounds = polygon_bounds(polygon)
    if bounds is not None:
        print(
            f'Bounds:    N {bounds.north:.4f}  S {bounds.south:.4f}  '
            f'E {bounds.east:.4f}  W {bounds.west:.4f}'
        )
    if args.point is not None:
        lat, lon = args.point
        inside = contains_point(polygon, lat, lon)
        print(f'Point:     {format_latlon(lat, lon)}')
        print(f'In path:   {"yes" if inside else "no"}')
        closest = closest_centerline_point(lat, lon, centerline(samples))
        if closest is not None:
            point, km = closest
            print(f'Centerline: {km:.1f} km (nearest {format_latlon(point.lat, point.lon)})')
    return 0


def main() -> int:
    """Entry point for eclipse-tools CLI (totality | path).

    Returns:
        Exit code 0 on success, 1 on failure.
    """
    parser = argparse.ArgumentParser(
        prog='eclipse-tools',
        description='Solar eclipse totality calculator and path-of-totality tools.',
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    tot_parser = subparsers.add_parser('totality', help='Local circumstances of totality')
    tot_parser.add_argument('lat', type=float, help='Latitude in degrees (north positive)')
    tot_parser.add_argument('lon', type=float, help='Longitude in degrees (east positive)')
    tot_parser.add_argument(
        '--altitude', type=float, default=0.0, help='Observer altitude in meters (default 0)'
    )
    source = tot_parser.add_mutually_exclusive_group()
    source.add_argument(
        '--year', type=int, default=None, help='Eclipse year; env: ECLIPSE_DATA_PATH'
    )
    source.add_argument(
        '--elements', type=str, default=None, help='Eclipse JSON file with Besselian elements'
    )
    tot_parser.add_argument(
        '--enforce-validity',
        action='store_true',
        help='Fail instead of extrapolating outside the elements validity window',
    )
    tot_parser.add_argument('-v', '--verbose', action='store_true', help='Show DEBUG logs')
    tot_parser.set_defaults(func=_totality_cmd)

    path_parser = subparsers.add_parser('path', help='Path polygon summary')
    path_parser.add_argument('file', type=str, help='Eclipse JSON file or year')
    path_parser.add_argument(
        '--max-step-km',
        type=float,
        default=None,
        help='Densification step in km; env: ECLIPSE_MAX_STEP_KM (default 20)',
    )
    path_parser.add_argument(
        '--point',
        type=float,
        nargs=2,
        metavar=('LAT', 'LON'),
        default=None,
        help='Report whether this location is inside the path',
    )
    path_parser.add_argument('-v', '--verbose', action='store_true', help='Show DEBUG logs')
    path_parser.set_defaults(func=_path_cmd)

    args = parser.parse_args()
    _configure_logging(verbose=args.verbose)
    return cast(int, args.func(parser, args))


def cli_main() -> NoReturn:
    """Entry point for console_scripts; calls main() and exits with its return code."""
    sys.exit(main())


if __name__ == '__main__':
    sys.exit(main())

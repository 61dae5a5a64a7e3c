"""Shared fixtures: a synthetic straight path of totality and its JSON document."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from eclipse_tools.models import GeoPoint, PathSample

# Centerline lat = 42 - 0.3 * (lon + 10); limits 0.9 deg either side; lon -10..5.
HALF_WIDTH = 0.9


def center_lat(lon: float) -> float:
    """Centerline latitude of the synthetic path at a longitude."""
    return 42.0 - 0.3 * (lon + 10.0)


def _sample(lon: float) -> PathSample:
    lat = center_lat(lon)
    return PathSample(
        central=GeoPoint(lat, lon),
        northern=GeoPoint(lat + HALF_WIDTH, lon),
        southern=GeoPoint(lat - HALF_WIDTH, lon),
        time=f'18:{int(lon) + 30:02d}',
    )


@pytest.fixture
def straight_path() -> tuple[PathSample, ...]:
    """Sixteen samples, one per degree of longitude, west to east."""
    return tuple(_sample(float(lon)) for lon in range(-10, 6))


def _row(sample: PathSample) -> dict[str, Any]:
    def point(p: GeoPoint | None) -> dict[str, Any]:
        if p is None:
            return {'lat': None, 'lon': None}
        return {'lat': p.lat, 'lon': p.lon}

    return {
        'time': sample.time,
        'northern': point(sample.northern),
        'central': point(sample.central),
        'southern': point(sample.southern),
        'ratio': 1.04,
        'sunAltitude': 10.0,
        'sunAzimuth': 280.0,
        'pathWidth': 290.0,
        'duration': '01m40.0s',
    }


@pytest.fixture
def eclipse_document(straight_path: tuple[PathSample, ...]) -> dict[str, Any]:
    """Eclipse data document with 2026 Aug 12 elements and the synthetic path."""
    return {
        'eclipse': {'date': '2026-08-12', 'type': 'Total'},
        'besselianElements': {
            'elements': {
                't0': 18.0,
                'deltaT': 71.4,
                'x': [0.475593, 0.5189288, -0.0000773, -0.0000088],
                'y': [0.771161, -0.2301664, -0.0001245, 0.0000037],
                'd': [14.79667, -0.012065, -0.000003],
                'l1': [0.537954, 0.000094, -0.0000121],
                'l2': [-0.008142, 0.0000935, -0.0000121],
                'mu': [88.74776, 15.003093],
                'tanF1': 0.0046141,
                'tanF2': 0.0045911,
                'validFrom': 15.0,
                'validTo': 21.0,
            }
        },
        'path': [_row(s) for s in straight_path],
    }


@pytest.fixture
def eclipse_file(tmp_path: Path, eclipse_document: dict[str, Any]) -> Path:
    """eclipse-2026.json written under tmp_path."""
    path = tmp_path / 'eclipse-2026.json'
    path.write_text(json.dumps(eclipse_document), encoding='utf-8')
    return path

"""Tests for path densification, polygon assembly, centerline queries and loading."""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path

import pytest

from eclipse_tools.geometry import contains_point, signed_area
from eclipse_tools.models import GeoPoint, PathSample
from eclipse_tools.path import (
    build_polygon,
    centerline,
    closest_centerline_distance,
    closest_centerline_point,
    densify,
    filter_by_longitude,
    haversine_km,
    load_path,
    path_polygon,
    sample_from_dict,
)


def test_haversine_km() -> None:
    """One degree of latitude is about 111.2 km; identical points are 0 km apart."""
    assert haversine_km(0.0, 0.0, 1.0, 0.0) == pytest.approx(111.19, abs=0.01)
    assert haversine_km(43.36, -5.85, 43.36, -5.85) == 0.0


def test_densify_step_limit(straight_path: tuple[PathSample, ...]) -> None:
    """Consecutive central points are never farther apart than the step."""
    dense = densify(straight_path, 20.0)
    assert len(dense) > len(straight_path)
    for a, b in zip(dense, dense[1:]):
        assert haversine_km(a.central.lat, a.central.lon, b.central.lat, b.central.lon) <= 20.0
    assert dense[0].central == straight_path[0].central
    assert dense[-1] == straight_path[-1]


def test_densify_segment_count() -> None:
    """A 111 km meridian segment at 20 km steps splits into 6 pieces."""
    samples = (
        PathSample(central=GeoPoint(0.0, 0.0), time='A'),
        PathSample(central=GeoPoint(1.0, 0.0), time='B'),
    )
    dense = densify(samples, 20.0)
    assert len(dense) == 7
    assert [s.time for s in dense] == ['A'] * 6 + ['B']
    assert dense[3].central.lat == pytest.approx(0.5)


def test_densify_points_lie_on_segments(straight_path: tuple[PathSample, ...]) -> None:
    """Interpolated centers stay on the straight centerline."""
    for s in densify(straight_path, 5.0):
        assert s.central.lat == pytest.approx(42.0 - 0.3 * (s.central.lon + 10.0))
        assert s.northern is not None
        assert s.northern.lat - s.central.lat == pytest.approx(0.9)


def test_densify_missing_limits() -> None:
    """A limit is interpolated only where both segment ends define it."""
    samples = (
        PathSample(central=GeoPoint(0.0, 0.0), northern=GeoPoint(0.5, 0.0)),
        PathSample(central=GeoPoint(1.0, 0.0), northern=None),
    )
    dense = densify(samples, 20.0)
    assert len(dense) == 7
    assert all(s.northern is None for s in dense)


def test_densify_short_and_invalid() -> None:
    """Short inputs pass through; non-positive steps are rejected."""
    one = (PathSample(central=GeoPoint(0.0, 0.0)),)
    assert densify(one, 20.0) == one
    assert densify((), 20.0) == ()
    for step in (0.0, -5.0, math.nan, math.inf):
        with pytest.raises(ValueError):
            densify(one, step)


def test_build_polygon_order(straight_path: tuple[PathSample, ...]) -> None:
    """Northern limits run forward, then southern limits backward."""
    polygon = build_polygon(straight_path)
    n = len(straight_path)
    assert len(polygon) == 2 * n
    assert polygon[0] == straight_path[0].northern
    assert polygon[n - 1] == straight_path[-1].northern
    assert polygon[n] == straight_path[-1].southern
    assert polygon[-1] == straight_path[0].southern


def test_build_polygon_skips_samples_without_limits(
    straight_path: tuple[PathSample, ...],
) -> None:
    """Samples lacking a limit are dropped from the outline."""
    partial = (PathSample(central=GeoPoint(50.0, -20.0)),) + straight_path
    assert build_polygon(partial) == build_polygon(straight_path)
    assert build_polygon(partial[:1]) == ()


def test_path_polygon_is_clockwise(straight_path: tuple[PathSample, ...]) -> None:
    """The assembled outline is clockwise and contains the centerline."""
    polygon = path_polygon(straight_path, 20.0)
    assert signed_area(polygon) < 0
    # 15 degrees of longitude by 1.8 degrees of latitude.
    assert abs(signed_area(polygon)) == pytest.approx(27.0)
    assert contains_point(polygon, 40.35, -4.5)
    assert not contains_point(polygon, 43.0, -4.5)


def test_closest_centerline(straight_path: tuple[PathSample, ...]) -> None:
    """The nearest vertex and its distance are reported; empty lines give None/inf."""
    line = centerline(straight_path)
    found = closest_centerline_point(40.5, -5.1, line)
    assert found is not None
    point, km = found
    assert point == GeoPoint(40.5, -5.0)
    assert km == pytest.approx(haversine_km(40.5, -5.1, 40.5, -5.0))
    assert closest_centerline_point(0.0, 0.0, ()) is None
    assert closest_centerline_distance(0.0, 0.0, ()) == math.inf


def test_filter_by_longitude(straight_path: tuple[PathSample, ...]) -> None:
    """Samples with any point in range are kept."""
    kept = filter_by_longitude(straight_path, -2.5, 0.5)
    assert [s.central.lon for s in kept] == [-2.0, -1.0, 0.0]


def test_sample_from_dict_null_limits() -> None:
    """Null limit coordinates become None; camelCase fields are mapped."""
    sample = sample_from_dict(
        {
            'time': '17:30',
            'northern': {'lat': None, 'lon': None},
            'central': {'lat': 65.2, 'lon': -25.1},
            'southern': {'lat': 64.0, 'lon': -26.0},
            'sunAltitude': 24.0,
            'pathWidth': 294.0,
            'isLimit': True,
        }
    )
    assert sample is not None
    assert sample.northern is None
    assert sample.southern == GeoPoint(64.0, -26.0)
    assert sample.sun_altitude == 24.0
    assert sample.path_width_km == 294.0
    assert sample.is_limit
    assert not sample.has_limits
    assert sample_from_dict({'central': {'lat': None, 'lon': 3.0}}) is None


def test_load_path(eclipse_file: Path) -> None:
    """Path rows load in file order."""
    samples = load_path(eclipse_file)
    assert len(samples) == 16
    assert samples[0].central.lon == -10.0
    assert samples[0].has_limits


def test_load_path_skips_bad_rows(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    """Rows without a central point are skipped with a warning."""
    path = tmp_path / 'p.json'
    rows = [
        {'central': {'lat': 1.0, 'lon': 2.0}},
        {'central': {'lat': None, 'lon': None}},
        'garbage',
    ]
    path.write_text(json.dumps({'path': rows}), encoding='utf-8')
    with caplog.at_level(logging.WARNING, logger='eclipse_tools.path'):
        samples = load_path(path)
    assert len(samples) == 1
    assert 'Skipping path row 1' in caplog.text


def test_load_path_missing(tmp_path: Path) -> None:
    """A document without a path list is rejected."""
    path = tmp_path / 'p.json'
    path.write_text(json.dumps({'eclipse': {}}), encoding='utf-8')
    with pytest.raises(ValueError, match='No eclipse path found'):
        load_path(path)


def test_sample_from_dict_duration_forms() -> None:
    """Durations load from table strings, plain numbers, or placeholders."""
    central = {'lat': 43.0, 'lon': -6.0}
    text = sample_from_dict({'central': central, 'duration': '01m40.0s'})
    number = sample_from_dict({'central': central, 'duration': 100})
    placeholder = sample_from_dict({'central': central, 'duration': '-'})
    assert text is not None and number is not None and placeholder is not None
    assert text.duration_s == pytest.approx(100.0)
    assert number.duration_s == 100.0
    assert placeholder.duration_s is None
    with pytest.raises(ValueError, match='Invalid duration'):
        sample_from_dict({'central': central, 'duration': 'about two minutes'})


def test_sample_from_dict_table_coordinates() -> None:
    """Degree-minute strings are accepted; '-' marks an undefined limit."""
    sample = sample_from_dict(
        {
            'central': {'lat': '43 21.6N', 'lon': '005 51.0W'},
            'northern': {'lat': '-', 'lon': '-'},
            'southern': {'lat': 42.5, 'lon': -6.2},
        }
    )
    assert sample is not None
    assert sample.central.lat == pytest.approx(43.36)
    assert sample.central.lon == pytest.approx(-5.85)
    assert sample.northern is None
    assert sample.southern == GeoPoint(42.5, -6.2)


def test_load_path_skips_unparseable_rows(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    """A row with a malformed number is skipped with a warning instead of aborting."""
    path = tmp_path / 'p.json'
    rows = [
        {'central': {'lat': 1.0, 'lon': 2.0}, 'duration': '02m05.5s'},
        {'central': {'lat': 1.5, 'lon': 2.5}, 'duration': 'n/a'},
        {'central': {'lat': 2.0, 'lon': 3.0}, 'sunAltitude': 'high'},
        {'central': {'lat': 2.5, 'lon': 3.5}, 'duration': 95.0},
    ]
    path.write_text(json.dumps({'path': rows}), encoding='utf-8')
    with caplog.at_level(logging.WARNING, logger='eclipse_tools.path'):
        samples = load_path(path)
    assert [s.duration_s for s in samples] == [pytest.approx(125.5), 95.0]
    assert 'Skipping path row 1' in caplog.text
    assert 'Skipping path row 2' in caplog.text


def test_load_path_fixture_durations(eclipse_file: Path) -> None:
    """The fixture's string durations load as seconds."""
    samples = load_path(eclipse_file)
    assert all(s.duration_s == pytest.approx(100.0) for s in samples)

"""Besselian element sets: embedded reference eclipse and JSON loading."""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Any

from eclipse_tools.config import get_eclipse_file
from eclipse_tools.errors import InvalidInputError
from eclipse_tools.models import BesselianElements

logger = logging.getLogger(__name__)

_POLY_NAMES = ('x', 'y', 'd', 'l1', 'l2', 'mu')
_POLY_DEGREE = 3

# Total Solar Eclipse of 2026 Aug 12.
# Source: https://eclipse.gsfc.nasa.gov/SEbeselm/SEbeselm2001/SE2026Aug12Tbeselm.html
# Eclipse Predictions by Fred Espenak and Chris O'Byrne (NASA's GSFC)
ECLIPSE_2026_AUG_12 = BesselianElements(
    date='2026-08-12',
    t0=18.0,
    delta_t=71.4,
    x=(0.475593, 0.5189288, -0.0000773, -0.0000088),
    y=(0.771161, -0.2301664, -0.0001245, 0.0000037),
    d=(14.79667, -0.012065, -0.000003, 0.0),
    l1=(0.537954, 0.0000940, -0.0000121, 0.0),
    l2=(-0.008142, 0.0000935, -0.0000121, 0.0),
    mu=(88.74776, 15.003093, 0.0, 0.0),
    tan_f1=0.0046141,
    tan_f2=0.0045911,
    k1=0.272488,
    k2=0.272281,
    valid_from=15.0,
    valid_to=21.0,
)


def _coefficients(name: str, raw: Any) -> tuple[float, ...]:
    """Return a 4-term coefficient tuple, zero-padding shorter lists."""
    if not isinstance(raw, (list, tuple)) or not raw:
        raise ValueError(f'Besselian element {name!r} must be a non-empty list')
    if len(raw) > _POLY_DEGREE + 1:
        raise ValueError(f'Besselian element {name!r} has {len(raw)} terms; at most 4 allowed')
    values = [float(v) for v in raw]
    values.extend([0.0] * (_POLY_DEGREE + 1 - len(values)))
    return tuple(values)


def _optional_float(data: dict[str, Any], *keys: str) -> float | None:
    for key in keys:
        value = data.get(key)
        if value is not None:
            return float(value)
    return None


def _required_float(data: dict[str, Any], *keys: str) -> float:
    value = _optional_float(data, *keys)
    if value is None:
        raise ValueError(f'Besselian elements missing {keys[0]!r}')
    return value


def elements_from_dict(data: dict[str, Any], date: str | None = None) -> BesselianElements:
    """Build BesselianElements from a JSON-style dict.

    Accepts the camelCase keys written by the path fetcher (deltaT, tanF1,
    tanF2, validFrom, validTo) as well as the snake_case field names.

    Parameters:
        data: Mapping with t0, deltaT, x, y, d, l1, l2, mu, tanF1, tanF2.
        date: Fallback eclipse date when data has none.

    Returns:
        Validated BesselianElements.

    Raises:
        ValueError: If a required field is missing or malformed.
        InvalidInputError: If any numeric field is not finite.
    """
    eclipse_date = data.get('date') or date
    if not eclipse_date:
        raise ValueError('Besselian elements have no date')
    t0 = _required_float(data, 't0')
    delta_t = _required_float(data, 'deltaT', 'delta_t')
    tan_f1 = _required_float(data, 'tanF1', 'tan_f1')
    tan_f2 = _required_float(data, 'tanF2', 'tan_f2')
    polys = {name: _coefficients(name, data.get(name)) for name in _POLY_NAMES}
    elements = BesselianElements(
        date=str(eclipse_date),
        t0=t0,
        delta_t=delta_t,
        tan_f1=tan_f1,
        tan_f2=tan_f2,
        k1=_optional_float(data, 'k1'),
        k2=_optional_float(data, 'k2'),
        valid_from=_optional_float(data, 'validFrom', 'valid_from'),
        valid_to=_optional_float(data, 'validTo', 'valid_to'),
        **polys,
    )
    validate_elements(elements)
    return elements


def validate_elements(elements: BesselianElements) -> None:
    """Raise InvalidInputError if any coefficient or constant is not finite."""
    scalars = {
        't0': elements.t0,
        'delta_t': elements.delta_t,
        'tan_f1': elements.tan_f1,
        'tan_f2': elements.tan_f2,
    }
    for name, value in scalars.items():
        if not math.isfinite(value):
            raise InvalidInputError(f'Besselian element {name} is not finite: {value!r}')
    for name in _POLY_NAMES:
        coeffs = getattr(elements, name)
        if not all(math.isfinite(c) for c in coeffs):
            raise InvalidInputError(f'Besselian element {name} has non-finite terms: {coeffs!r}')


def resolve_source(source: int | str | Path) -> Path:
    """Map a year (int or digit string) or a file path to the data file path."""
    if isinstance(source, int):
        return get_eclipse_file(source)
    text = str(source)
    if text.isdigit():
        return get_eclipse_file(int(text))
    return Path(text)


def load_document(source: int | str | Path) -> tuple[Path, dict[str, Any]]:
    """Read an eclipse JSON document.

    Returns:
        (resolved path, parsed JSON object).

    Raises:
        OSError: If the file cannot be read.
        ValueError: If the file is not a JSON object.
    """
    path = resolve_source(source)
    with open(path, encoding='utf-8') as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f'Eclipse data file {path} is not a JSON object')
    return path, data


def load_elements(source: int | str | Path) -> BesselianElements:
    """Load Besselian elements from an eclipse data file.

    Parameters:
        source: Eclipse year (resolved under ECLIPSE_DATA_PATH) or a .json path.

    Returns:
        BesselianElements from besselianElements.elements; the date falls back
        to eclipse.date.

    Raises:
        ValueError: If the file has no Besselian elements.
    """
    path, data = load_document(source)
    bessel = data.get('besselianElements') or {}
    raw = bessel.get('elements') if isinstance(bessel, dict) else None
    if not raw:
        raise ValueError(f'No Besselian elements found in {path}')
    eclipse = data.get('eclipse') or {}
    elements = elements_from_dict(raw, date=eclipse.get('date'))
    logger.debug('Loaded Besselian elements for %s from %s', elements.date, path)
    return elements

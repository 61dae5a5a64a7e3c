"""Value types shared by the path, geometry, and totality layers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from eclipse_tools.angle_utils import format_duration


@dataclass(frozen=True)
class GeoPoint:
    """Geographic point in degrees (north and east positive)."""

    lat: float
    lon: float


@dataclass(frozen=True)
class PathSample:
    """One instant along the eclipse track.

    An umbral limit that is undefined at this instant (e.g. beyond the polar
    cutoff or near the path ends) is None rather than a point.
    """

    central: GeoPoint
    northern: GeoPoint | None = None
    southern: GeoPoint | None = None
    time: str | None = None
    ratio: float | None = None
    sun_altitude: float | None = None
    sun_azimuth: float | None = None
    path_width_km: float | None = None
    duration_s: float | None = None
    is_limit: bool = False

    @property
    def has_limits(self) -> bool:
        """True when both the northern and southern limits are defined."""
        return self.northern is not None and self.southern is not None


Polygon = tuple[GeoPoint, ...]


@dataclass(frozen=True)
class BesselianElements:
    """Polynomial Besselian elements for one eclipse.

    Each coefficient tuple holds (a0, a1, a2, a3) for a0 + a1*t + a2*t^2 + a3*t^3,
    where t is hours from t0 (TDT). d and mu are in degrees.
    """

    date: str  # YYYY-MM-DD
    t0: float  # reference time, TDT hours
    delta_t: float  # TDT - UT, seconds
    x: tuple[float, ...]
    y: tuple[float, ...]
    d: tuple[float, ...]
    l1: tuple[float, ...]
    l2: tuple[float, ...]
    mu: tuple[float, ...]
    tan_f1: float
    tan_f2: float
    k1: float | None = None
    k2: float | None = None
    valid_from: float | None = None  # TDT hours
    valid_to: float | None = None  # TDT hours

    def in_validity_window(self, t: float) -> bool:
        """True if t (hours from t0) lies inside [valid_from, valid_to], or no window is set."""
        tdt = self.t0 + t
        if self.valid_from is not None and tdt < self.valid_from:
            return False
        if self.valid_to is not None and tdt > self.valid_to:
            return False
        return True


@dataclass(frozen=True)
class ObserverConstants:
    """Geocentric reduction of a surface point (per query, never cached)."""

    lat_rad: float
    lon_west_rad: float
    altitude_m: float
    rho_sin_phi: float
    rho_cos_phi: float


@dataclass(frozen=True)
class TileBounds:
    """Axis-aligned rectangle in degrees."""

    north: float
    south: float
    east: float
    west: float

    @property
    def center(self) -> GeoPoint:
        return GeoPoint((self.north + self.south) / 2.0, (self.east + self.west) / 2.0)


@dataclass(frozen=True)
class Band:
    """Latitude interval covered by a polygon at one longitude."""

    north_lat: float
    south_lat: float


@dataclass(frozen=True)
class SolverResult:
    """Outcome of an iterative solve: value plus whether tolerance was reached."""

    value: float
    converged: bool
    iterations: int


@dataclass(frozen=True)
class TotalityResult:
    """Local circumstances of totality for one observer.

    Outside the umbra only magnitude is set; inside, start/end/mid are
    ISO-8601 UTC strings and duration_seconds is rounded to 0.1 s.
    """

    in_totality: bool
    lat: float
    lon: float
    magnitude: float | None = None
    start: str | None = None
    end: str | None = None
    mid: str | None = None
    duration_seconds: float | None = None
    converged: bool = True

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON shape used by the command line and downstream consumers."""
        out: dict[str, Any]
        if not self.in_totality:
            out = {
                'inTotality': False,
                'lat': self.lat,
                'lon': self.lon,
                'magnitude': self.magnitude,
                'message': 'Location is not in the path of totality',
            }
        else:
            out = {
                'inTotality': True,
                'lat': self.lat,
                'lon': self.lon,
                'start': self.start,
                'end': self.end,
                'mid': self.mid,
                'durationSeconds': self.duration_seconds,
                'durationFormatted': format_duration(self.duration_seconds or 0.0),
            }
        if not self.converged:
            out['converged'] = False
        return out

"""Local circumstances of totality from Besselian elements.

Follows the method of the NASA Solar Eclipse Explorer (Espenak and O'Byrne):
the observer is reduced to geocentric (rho sin phi', rho cos phi') terms,
projected into the fundamental plane at time t, and the time of closest
approach to the shadow axis is found by fixed-point iteration. Inside the
umbra, the second and third contacts are seeded analytically from the
mid-eclipse geometry and refined independently.

All functions are pure; every query recomputes its observer constants.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from eclipse_tools.constants import (
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_TOLERANCE_HOURS,
    DELTA_T_HOUR_ANGLE_DIVISOR,
    EARTH_ECCENTRICITY_SQ,
    EARTH_EQUATORIAL_RADIUS_M,
    SECONDS_PER_HOUR,
)
from eclipse_tools.elements import ECLIPSE_2026_AUG_12, validate_elements
from eclipse_tools.errors import InvalidInputError, OutsideValidityError
from eclipse_tools.models import (
    BesselianElements,
    ObserverConstants,
    SolverResult,
    TotalityResult,
)
from eclipse_tools.time_utils import hours_to_iso

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ElementValues:
    """Besselian elements and first derivatives at one instant (d, mu in radians)."""

    x: float
    y: float
    d: float
    l1: float
    l2: float
    mu: float
    dx: float
    dy: float
    dd: float
    dmu: float
    dl1: float
    dl2: float


@dataclass(frozen=True)
class Circumstances:
    """Observer-relative shadow geometry at time t (hours from t0)."""

    t: float
    u: float
    v: float
    a: float
    b: float
    l1_prime: float
    l2_prime: float
    n2: float
    m: float
    h: float
    xi: float
    eta: float
    zeta: float


def _poly(coeffs: tuple[float, ...], t: float) -> float:
    """a0 + a1*t + a2*t^2 + a3*t^3."""
    result = 0.0
    t_power = 1.0
    for c in coeffs:
        result += c * t_power
        t_power *= t
    return result


def _poly_deriv(coeffs: tuple[float, ...], t: float) -> float:
    """a1 + 2*a2*t + 3*a3*t^2."""
    result = 0.0
    t_power = 1.0
    for k, c in enumerate(coeffs[1:], start=1):
        result += k * c * t_power
        t_power *= t
    return result


def _check_finite(name: str, value: float) -> None:
    if not math.isfinite(value):
        raise InvalidInputError(f'{name} must be finite, got {value!r}')


def observer_constants(lat: float, lon: float, altitude: float = 0.0) -> ObserverConstants:
    """Reduce a geodetic position to geocentric terms on the oblate Earth.

    Parameters:
        lat: Latitude in degrees (north positive).
        lon: Longitude in degrees (east positive).
        altitude: Height above the ellipsoid in meters.

    Returns:
        ObserverConstants with west-positive longitude in radians.

    Raises:
        InvalidInputError: If any input is non-finite or latitude is outside [-90, 90].
    """
    _check_finite('latitude', lat)
    _check_finite('longitude', lon)
    _check_finite('altitude', altitude)
    if abs(lat) > 90.0:
        raise InvalidInputError(f'latitude must be within [-90, 90], got {lat!r}')

    lat_rad = math.radians(lat)
    sin_lat = math.sin(lat_rad)
    cos_lat = math.cos(lat_rad)
    c = 1.0 / math.sqrt(1.0 - EARTH_ECCENTRICITY_SQ * sin_lat * sin_lat)
    s = (1.0 - EARTH_ECCENTRICITY_SQ) * c
    h = altitude / EARTH_EQUATORIAL_RADIUS_M
    return ObserverConstants(
        lat_rad=lat_rad,
        lon_west_rad=-math.radians(lon),
        altitude_m=altitude,
        rho_sin_phi=(s + h) * sin_lat,
        rho_cos_phi=(c + h) * cos_lat,
    )


def evaluate_elements(elements: BesselianElements, t: float) -> ElementValues:
    """Evaluate the element polynomials and their derivatives at t hours from t0."""
    return ElementValues(
        x=_poly(elements.x, t),
        y=_poly(elements.y, t),
        d=math.radians(_poly(elements.d, t)),
        l1=_poly(elements.l1, t),
        l2=_poly(elements.l2, t),
        mu=math.radians(_poly(elements.mu, t)),
        dx=_poly_deriv(elements.x, t),
        dy=_poly_deriv(elements.y, t),
        dd=math.radians(_poly_deriv(elements.d, t)),
        dmu=math.radians(_poly_deriv(elements.mu, t)),
        dl1=_poly_deriv(elements.l1, t),
        dl2=_poly_deriv(elements.l2, t),
    )


def circumstances(
    obs: ObserverConstants, elements: BesselianElements, t: float
) -> Circumstances:
    """Project the observer into the fundamental plane at time t.

    Parameters:
        obs: Observer constants from observer_constants().
        elements: Besselian elements.
        t: Hours relative to t0.

    Returns:
        Circumstances: (u, v) offset from the shadow axis, (a, b) its rate,
        umbral/penumbral radii at the observer's zeta, n^2 and m.
    """
    el = evaluate_elements(elements, t)
    h = el.mu - obs.lon_west_rad - elements.delta_t / DELTA_T_HOUR_ANGLE_DIVISOR
    sin_h = math.sin(h)
    cos_h = math.cos(h)
    sin_d = math.sin(el.d)
    cos_d = math.cos(el.d)

    xi = obs.rho_cos_phi * sin_h
    eta = obs.rho_sin_phi * cos_d - obs.rho_cos_phi * cos_h * sin_d
    zeta = obs.rho_sin_phi * sin_d + obs.rho_cos_phi * cos_h * cos_d
    dxi = el.dmu * obs.rho_cos_phi * cos_h
    deta = el.dmu * xi * sin_d - zeta * el.dd

    u = el.x - xi
    v = el.y - eta
    a = el.dx - dxi
    b = el.dy - deta
    return Circumstances(
        t=t,
        u=u,
        v=v,
        a=a,
        b=b,
        l1_prime=el.l1 - zeta * elements.tan_f1,
        l2_prime=el.l2 - zeta * elements.tan_f2,
        n2=a * a + b * b,
        m=math.sqrt(u * u + v * v),
        h=h,
        xi=xi,
        eta=eta,
        zeta=zeta,
    )


def _closest_approach_step(c: Circumstances) -> float:
    """Correction (hours) toward the instant of minimum distance to the shadow axis."""
    return (c.u * c.a + c.v * c.b) / c.n2


def _half_chord(c: Circumstances) -> float:
    """sqrt(1 - tau^2) * l2' / n, with tau clamped to the unit interval."""
    n = math.sqrt(c.n2)
    tau = (c.a * c.v - c.u * c.b) / n / c.l2_prime
    return math.sqrt(max(0.0, 1.0 - tau * tau)) * c.l2_prime / n


def solve_mid_eclipse(
    obs: ObserverConstants,
    elements: BesselianElements,
    *,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    tolerance: float = DEFAULT_TOLERANCE_HOURS,
) -> SolverResult:
    """Find the time of closest approach of the observer to the shadow axis.

    Starts at t = 0 and applies t -= (u*a + v*b) / n^2 until the correction
    drops below tolerance or max_iterations corrections have been applied.

    Returns:
        SolverResult with t in hours from t0; converged is False when the cap
        was reached, in which case value is the last estimate.
    """
    t = 0.0
    for iteration in range(max_iterations):
        step = _closest_approach_step(circumstances(obs, elements, t))
        if abs(step) < tolerance:
            return SolverResult(value=t, converged=True, iterations=iteration)
        t -= step
    return SolverResult(value=t, converged=False, iterations=max_iterations)


def _refine_contact(
    obs: ObserverConstants,
    elements: BesselianElements,
    t: float,
    second_contact: bool,
    max_iterations: int,
    tolerance: float,
) -> SolverResult:
    for iteration in range(max_iterations):
        c = circumstances(obs, elements, t)
        # Sign of the half-chord term flips with the umbra/antumbra (l2' < 0 is total).
        if second_contact:
            sign = 1.0 if c.l2_prime < 0 else -1.0
        else:
            sign = -1.0 if c.l2_prime < 0 else 1.0
        correction = _closest_approach_step(c) - sign * _half_chord(c)
        if abs(correction) < tolerance:
            return SolverResult(value=t, converged=True, iterations=iteration)
        t -= correction
    return SolverResult(value=t, converged=False, iterations=max_iterations)


def solve_contact_times(
    obs: ObserverConstants,
    elements: BesselianElements,
    mid_t: float,
    *,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    tolerance: float = DEFAULT_TOLERANCE_HOURS,
) -> tuple[SolverResult, SolverResult]:
    """Refine the second and third contacts (start and end of totality).

    Seeds are mid_t -/+ sqrt(1 - tau^2) * |l2'| / n evaluated at mid-eclipse;
    each contact is then iterated on its own.

    Parameters:
        obs: Observer constants.
        elements: Besselian elements.
        mid_t: Mid-eclipse time (hours from t0); the observer must be inside the umbra.

    Returns:
        (C2, C3) solver results in hours from t0.
    """
    mid = circumstances(obs, elements, mid_t)
    dtau = abs(_half_chord(mid))
    c2 = _refine_contact(obs, elements, mid_t - dtau, True, max_iterations, tolerance)
    c3 = _refine_contact(obs, elements, mid_t + dtau, False, max_iterations, tolerance)
    return (c2, c3)


def calculate_totality(
    lat: float,
    lon: float,
    elements: BesselianElements = ECLIPSE_2026_AUG_12,
    altitude: float = 0.0,
    *,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    tolerance: float = DEFAULT_TOLERANCE_HOURS,
    enforce_validity: bool = False,
) -> TotalityResult:
    """Compute whether a location sees totality and, if so, when.

    Parameters:
        lat: Latitude in degrees (north positive).
        lon: Longitude in degrees (east positive).
        elements: Besselian elements of the eclipse.
        altitude: Observer height in meters.
        max_iterations: Iteration cap for each solver.
        tolerance: Convergence threshold in hours.
        enforce_validity: Raise instead of warning when mid-eclipse falls
            outside the elements' validity window.

    Returns:
        TotalityResult. Outside the umbra only magnitude is set. converged is
        False if any solver hit its iteration cap.

    Raises:
        InvalidInputError: On non-finite coordinates, altitude, or elements.
        OutsideValidityError: If enforce_validity and mid-eclipse lies outside
            [valid_from, valid_to].
    """
    obs = observer_constants(lat, lon, altitude)
    validate_elements(elements)

    mid = solve_mid_eclipse(obs, elements, max_iterations=max_iterations, tolerance=tolerance)
    if not mid.converged:
        logger.warning(
            'Mid-eclipse did not converge in %d iterations at (%.4f, %.4f); using last estimate',
            max_iterations,
            lat,
            lon,
        )
    if not elements.in_validity_window(mid.value):
        msg = (
            f'Mid-eclipse at TDT {elements.t0 + mid.value:.3f} h is outside the validity window '
            f'[{elements.valid_from}, {elements.valid_to}] of the {elements.date} elements'
        )
        if enforce_validity:
            raise OutsideValidityError(msg)
        logger.warning('%s; extrapolating', msg)

    at_mid = circumstances(obs, elements, mid.value)
    if at_mid.m >= abs(at_mid.l2_prime):
        magnitude = (at_mid.l1_prime - at_mid.m) / (at_mid.l1_prime + at_mid.l2_prime)
        return TotalityResult(
            in_totality=False,
            lat=lat,
            lon=lon,
            magnitude=magnitude,
            converged=mid.converged,
        )

    c2, c3 = solve_contact_times(
        obs, elements, mid.value, max_iterations=max_iterations, tolerance=tolerance
    )
    for label, result in (('C2', c2), ('C3', c3)):
        if not result.converged:
            logger.warning(
                '%s did not converge in %d iterations at (%.4f, %.4f); using last estimate',
                label,
                max_iterations,
                lat,
                lon,
            )
    duration = (c3.value - c2.value) * SECONDS_PER_HOUR
    logger.debug(
        'Totality at (%.4f, %.4f): mid t=%.6f h (%d iter), duration %.1f s',
        lat,
        lon,
        mid.value,
        mid.iterations,
        duration,
    )
    return TotalityResult(
        in_totality=True,
        lat=lat,
        lon=lon,
        start=hours_to_iso(c2.value, elements),
        end=hours_to_iso(c3.value, elements),
        mid=hours_to_iso(mid.value, elements),
        duration_seconds=round(duration * 10.0) / 10.0,
        converged=mid.converged and c2.converged and c3.converged,
    )

"""Exceptions raised by the eclipse computation layer."""

from __future__ import annotations


class InvalidInputError(ValueError):
    """Non-finite or out-of-range numeric input (coordinates, altitude, coefficients)."""


class OutsideValidityError(ValueError):
    """Query time falls outside the fitted window of the Besselian polynomials."""

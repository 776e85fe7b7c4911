"""Exceptions raised while assembling a kinetics mechanism.

All errors are construction-time errors. Evaluation of rate coefficients and
third-body corrections never raises; degenerate inputs surface as inf/NaN.
"""


class KineticsError(Exception):
    """Base class for kinetics errors."""


class ConfigurationError(KineticsError, ValueError):
    """Malformed or unknown coefficient, unit, species or reaction data."""


class UnsupportedRateLawError(KineticsError, TypeError):
    """A reaction references a rate law that has no classification rule."""

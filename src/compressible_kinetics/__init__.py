"""Rate coefficients and third-body corrections for multi-temperature kinetics.

Key components:
- rate_laws_types: Rate law variants (Arrhenius, rational forms, constant)
- rate_laws_utils: Rate law construction from schema entries and units
- temperature_selectors: Rate-controlling temperatures per reaction type
- rate_law_groups: Batched evaluation of rate laws and equilibrium constants
- rate_manager: ln(kf)/ln(kb) of a whole mechanism
- thirdbody_manager: Third-body efficiencies applied to rates of progress
- chemistry_utils: Mechanism loading from JSON
"""

import jax

# Rate coefficients span hundreds of orders of magnitude.
jax.config.update("jax_enable_x64", True)

from .errors import ConfigurationError, KineticsError, UnsupportedRateLawError
from .rate_laws_types import (
    Arrhenius,
    ConstantRate,
    RateLaw,
    RateLawKind,
    RationalCubicExponential,
    RationalExponential,
)
from .rate_laws_utils import RateLawUnits, build_rate_law
from .temperature_selectors import ReactionType, TemperatureSelector
from .thermodynamics_types import SpeciesGroups, ThermoState, Thermodynamics
from .chemistry_types import Reaction
from .rate_manager import RateManager
from .thirdbody_manager import ThirdbodyManager
from .chemistry_utils import build_thirdbody_manager, load_reactions_from_json

__all__ = [
    "ConfigurationError",
    "KineticsError",
    "UnsupportedRateLawError",
    "Arrhenius",
    "ConstantRate",
    "RateLaw",
    "RateLawKind",
    "RationalCubicExponential",
    "RationalExponential",
    "RateLawUnits",
    "build_rate_law",
    "ReactionType",
    "TemperatureSelector",
    "SpeciesGroups",
    "ThermoState",
    "Thermodynamics",
    "Reaction",
    "RateManager",
    "ThirdbodyManager",
    "build_thirdbody_manager",
    "load_reactions_from_json",
]

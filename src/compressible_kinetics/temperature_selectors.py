"""Rate-controlling temperatures for multi-temperature kinetics.

Park's model (Park 1993; Gnoffo TP-2867, Eq. 45):
    - Heavy-particle impact dissociation: T_d = sqrt(T * T_v)
    - Electron impact processes: T_e
    - All other reactions: T

The forward and reverse branch of a reaction may be controlled by different
temperatures, e.g. dissociation at sqrt(T * T_v) but recombination at T.
"""

from __future__ import annotations

import enum

import numpy as np

from compressible_kinetics.errors import ConfigurationError
from compressible_kinetics.thermodynamics_types import ThermoState


class TemperatureSelector(enum.Enum):
    """Which temperature of the state a rate is evaluated at."""

    T = "T"
    TE = "Te"
    PARK = "park"

    def temperature(self, state: ThermoState) -> float:
        """Select the rate-controlling temperature [K] from a state."""
        match self:
            case TemperatureSelector.T:
                return state.T
            case TemperatureSelector.TE:
                return state.Te
            case TemperatureSelector.PARK:
                # NaN for a negative product
                with np.errstate(invalid="ignore"):
                    return np.sqrt(np.float64(state.T) * state.Tv)


class ReactionType(enum.IntEnum):
    """Reaction categories that determine the rate-controlling temperatures.

    Suffix _E denotes electron impact, _M heavy-particle impact.
    """

    ASSOCIATIVE_IONIZATION = 0
    DISSOCIATIVE_RECOMBINATION = 1
    ASSOCIATIVE_DETACHMENT = 2
    DISSOCIATIVE_ATTACHMENT = 3
    DISSOCIATION_E = 4
    RECOMBINATION_E = 5
    DISSOCIATION_M = 6
    RECOMBINATION_M = 7
    IONIZATION_E = 8
    ION_RECOMBINATION_E = 9
    IONIZATION_M = 10
    ION_RECOMBINATION_M = 11
    ELECTRONIC_ATTACHMENT_M = 12
    ELECTRONIC_DETACHMENT_M = 13
    ELECTRONIC_ATTACHMENT_E = 14
    ELECTRONIC_DETACHMENT_E = 15
    EXCHANGE = 16
    EXCITATION_M = 17
    EXCITATION_E = 18
    BND_BND_EMISSION = 19


_T = TemperatureSelector.T
_TE = TemperatureSelector.TE
_PARK = TemperatureSelector.PARK

_NON_DEFAULT_SELECTORS = {
    ReactionType.ASSOCIATIVE_IONIZATION: (_T, _TE),
    ReactionType.DISSOCIATIVE_RECOMBINATION: (_TE, _T),
    ReactionType.ASSOCIATIVE_DETACHMENT: (_T, _TE),
    ReactionType.DISSOCIATIVE_ATTACHMENT: (_TE, _T),
    ReactionType.DISSOCIATION_E: (_TE, _TE),
    ReactionType.RECOMBINATION_E: (_TE, _TE),
    ReactionType.DISSOCIATION_M: (_PARK, _T),
    ReactionType.RECOMBINATION_M: (_T, _PARK),
    ReactionType.IONIZATION_E: (_TE, _TE),
    ReactionType.ION_RECOMBINATION_E: (_TE, _TE),
    ReactionType.ELECTRONIC_ATTACHMENT_M: (_TE, _T),
    ReactionType.ELECTRONIC_DETACHMENT_M: (_T, _TE),
    ReactionType.ELECTRONIC_ATTACHMENT_E: (_TE, _TE),
    ReactionType.ELECTRONIC_DETACHMENT_E: (_TE, _TE),
    ReactionType.EXCITATION_E: (_TE, _TE),
}

# (forward, reverse) selectors indexed by ReactionType; (T, T) by default.
RATE_SELECTORS: tuple[tuple[TemperatureSelector, TemperatureSelector], ...] = tuple(
    _NON_DEFAULT_SELECTORS.get(reaction_type, (_T, _T))
    for reaction_type in ReactionType
)


def select_temperatures(
    reaction_type: ReactionType,
) -> tuple[TemperatureSelector, TemperatureSelector]:
    """Return the (forward, reverse) selectors of a reaction type."""
    return RATE_SELECTORS[reaction_type]


def parse_reaction_type(name: str | ReactionType) -> ReactionType:
    """Look up a reaction type by (case-insensitive) name."""
    if isinstance(name, ReactionType):
        return name
    try:
        return ReactionType[name.upper()]
    except KeyError:
        raise ConfigurationError(
            f"Unknown reaction type {name!r}. "
            f"Available: {[t.name.lower() for t in ReactionType]}"
        ) from None

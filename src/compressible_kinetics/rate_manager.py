"""Forward and reverse rate coefficients of a reaction mechanism.

Every reaction is classified once into rate law groups according to its rate
law variant and the (forward, reverse) rate-controlling temperatures of its
reaction type. An update then

    1. evaluates all groups, writing ln(kf) and, where the reverse temperature
       differs from the forward one, ln(kb) at the reverse temperature,
    2. copies ln(kf) into ln(kb) for reversible reactions whose forward and
       reverse temperatures coincide,
    3. subtracts ln(K_c) at the reverse temperature from ln(kb).

ln(kf), ln(kb) and the species Gibbs energies share one contiguous buffer.
"""

import logging
from typing import Sequence

import numpy as np
from jaxtyping import Float

from compressible_kinetics import rate_laws
from compressible_kinetics.chemistry_types import Reaction
from compressible_kinetics.errors import ConfigurationError
from compressible_kinetics.rate_law_groups import EquilibriumGroup, RateLawGroupMap
from compressible_kinetics.temperature_selectors import (
    TemperatureSelector,
    select_temperatures,
)
from compressible_kinetics.thermodynamics_types import ThermoState, Thermodynamics

logger = logging.getLogger(__name__)


def _read_only(view: np.ndarray) -> np.ndarray:
    out = view.view()
    out.flags.writeable = False
    return out


class RateManager:
    """Evaluates ln(kf) and ln(kb) for all reactions of a mechanism.

    Args:
        n_species: Number of species in the mixture.
        reactions: Ordered reactions; reaction i owns slot i of ln(kf)/ln(kb).

    Note:
        Rational cubic exponential rate laws are evaluated without a
        logarithm, so their ln(kf) and ln(kb) slots hold the raw rational
        value (minus ln(K_c) for ln(kb)).

    Raises:
        UnsupportedRateLawError: If a reaction's rate law is not a registered
            variant.
        ConfigurationError: If a reaction references a species index outside
            [0, n_species).
    """

    def __init__(self, n_species: int, reactions: Sequence[Reaction]):
        self.n_species = n_species
        self.n_reactions = len(reactions)

        self.rate_groups = RateLawGroupMap()
        self._equilibrium_groups: dict[TemperatureSelector, EquilibriumGroup] = {}
        self._to_copy: list[int] = []
        self._irreversible: list[int] = []

        for i, reaction in enumerate(reactions):
            self._add_reaction(i, reaction)

        # One block for ln(kf) [0, nr), ln(kb) [nr, 2nr) and G/RT [2nr, 2nr+ns)
        nr = self.n_reactions
        self._buffer = np.zeros(2 * nr + n_species)
        self._rates = self._buffer[: 2 * nr]
        self._ln_kf = self._buffer[:nr]
        self._ln_kb = self._buffer[nr : 2 * nr]
        self._gibbs = self._buffer[2 * nr :]

        self._to_copy_array = np.asarray(self._to_copy, dtype=int)

        logger.debug(
            "RateManager: %d reactions in %d rate law groups, %d reverse rates "
            "copied, %d irreversible",
            nr,
            len(self.rate_groups),
            len(self._to_copy),
            len(self._irreversible),
        )

    def _add_reaction(self, i: int, reaction: Reaction) -> None:
        kind = rate_laws.rate_law_kind(reaction.rate_law)

        invalid = [s for s in reaction.species_indices() if not 0 <= s < self.n_species]
        if invalid:
            raise ConfigurationError(
                f"Reaction {i} ({reaction.formula}) references species indices "
                f"{sorted(invalid)} outside [0, {self.n_species})."
            )

        forward, reverse = select_temperatures(reaction.reaction_type)
        self.rate_groups.add_rate_law(forward, i, reaction.rate_law)

        if not reaction.reversible:
            self._irreversible.append(i)
            return

        if forward is reverse:
            self._to_copy.append(i)
        else:
            # ln(kb) of reaction i lives at slot nr + i of the rate block
            self.rate_groups.add_rate_law(reverse, self.n_reactions + i, reaction.rate_law)

        if reverse not in self._equilibrium_groups:
            self._equilibrium_groups[reverse] = EquilibriumGroup(selector=reverse)
        self._equilibrium_groups[reverse].add_reaction(
            i, reaction.net_stoichiometry(self.n_species)
        )
        logger.debug(
            "Reaction %d (%s): %s, forward %s, reverse %s",
            i,
            reaction.formula,
            kind.value,
            forward.value,
            reverse.value,
        )

    @property
    def ln_kf(self) -> Float[np.ndarray, " n_reactions"]:
        """ln of the forward rate coefficients (read-only view).

        Slots of rational cubic exponential rate laws hold the raw value.
        """
        return _read_only(self._ln_kf)

    @property
    def ln_kb(self) -> Float[np.ndarray, " n_reactions"]:
        """ln of the backward rate coefficients (read-only view).

        Entries of irreversible reactions are never computed.
        """
        return _read_only(self._ln_kb)

    @property
    def gibbs(self) -> Float[np.ndarray, " n_species"]:
        """Species G/RT of the last evaluated reverse temperature."""
        return _read_only(self._gibbs)

    @property
    def shared_reverse_reactions(self) -> tuple[int, ...]:
        """Reversible reactions whose ln(kb) starts as a copy of ln(kf)."""
        return tuple(self._to_copy)

    @property
    def irreversible_reactions(self) -> tuple[int, ...]:
        return tuple(self._irreversible)

    @property
    def equilibrium_groups(self) -> tuple[EquilibriumGroup, ...]:
        return tuple(self._equilibrium_groups.values())

    def evaluate_rate_laws(self, state: ThermoState) -> None:
        self.rate_groups.ln_rates(state, self._rates)

    def copy_shared_reverse_rates(self) -> None:
        self._ln_kb[self._to_copy_array] = self._ln_kf[self._to_copy_array]

    def subtract_ln_equilibrium_constants(self, thermo: Thermodynamics) -> None:
        for group in self._equilibrium_groups.values():
            group.subtract_ln_keq(thermo, self._gibbs, self._ln_kb)

    def update(self, thermo: Thermodynamics) -> None:
        """Recompute ln(kf) and ln(kb) for the current state of ``thermo``.

        Non-finite values (e.g. from vanishing denominators of rational rate
        laws) are propagated, not trapped.
        """
        self.evaluate_rate_laws(thermo.state)
        self.copy_shared_reverse_rates()
        self.subtract_ln_equilibrium_constants(thermo)

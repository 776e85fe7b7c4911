from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from jaxtyping import Float

from compressible_kinetics.rate_laws_types import RateLaw
from compressible_kinetics.temperature_selectors import ReactionType

# (species or group index, coefficient) pairs
IndexedCoefficients = tuple[tuple[int, float], ...]


@dataclass(frozen=True)
class Reaction:
    """A single elementary reaction, immutable once built.

    For a reaction: sum_s nu'_s A_s -> sum_s nu''_s A_s

    Attributes:
        formula: Human-readable reaction equation, e.g. "N2 + M = 2N + M".
        reaction_type: Category selecting the rate-controlling temperatures.
        rate_law: Forward rate law (owned by this reaction).
        reactants: (species index, nu'_s) pairs.
        products: (species index, nu''_s) pairs.
        reversible: Whether the reverse rate is computed from equilibrium.
        is_thirdbody: Whether a generic collision partner M takes part.
        thirdbody_efficiencies: (species index, weight) pairs for M.
        group_efficiencies: (lumped group index, weight) pairs for M.
    """

    formula: str
    reaction_type: ReactionType
    rate_law: RateLaw
    reactants: IndexedCoefficients
    products: IndexedCoefficients
    reversible: bool = True
    is_thirdbody: bool = False
    thirdbody_efficiencies: IndexedCoefficients = ()
    group_efficiencies: IndexedCoefficients = ()

    @property
    def order(self) -> float:
        """Forward reaction order, counting the third body once."""
        return sum(nu for _, nu in self.reactants) + (1.0 if self.is_thirdbody else 0.0)

    def species_indices(self) -> set[int]:
        return {s for s, _ in self.reactants} | {s for s, _ in self.products}

    def net_stoichiometry(self, n_species: int) -> Float[np.ndarray, " n_species"]:
        """Net stoichiometric coefficients nu''_s - nu'_s."""
        nu = np.zeros(n_species)
        for s, coeff in self.reactants:
            nu[s] -= coeff
        for s, coeff in self.products:
            nu[s] += coeff
        return nu

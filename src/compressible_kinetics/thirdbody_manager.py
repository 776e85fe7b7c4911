"""Third-body efficiencies applied to rates of progress.

For a reaction A + M -> products the rate of progress is multiplied by the
effective collision partner concentration

    [M]_r = sum_s w_s,r [X_s] + sum_g w_g,r [X_g]

where [X_g] is the summed concentration of a lumped species group. The sum
starts at zero: every partner that contributes must be listed with its
absolute weight.
"""

from typing import Protocol, Sequence

import numpy as np
from jaxtyping import Float


class SpeciesGroupSummer(Protocol):
    @property
    def n_groups(self) -> int: ...

    def sum_group_members(
        self, values: Float[np.ndarray, " n_species"]
    ) -> Float[np.ndarray, " n_groups"]: ...


class ThirdbodyManager:
    """Applies third-body efficiency sums to rates of progress in place.

    Args:
        n_species: Number of species in the mixture.
        groups: Provider of lumped species group sums, usually the
            thermodynamic model or a ``SpeciesGroups``.
    """

    def __init__(self, n_species: int, groups: SpeciesGroupSummer):
        self.n_species = n_species
        self._groups = groups
        self._group_concentrations = np.zeros(groups.n_groups)

        self._reactions: list[int] = []
        self._species_efficiencies: list[tuple[tuple[int, float], ...]] = []
        self._group_efficiencies: list[tuple[tuple[int, float], ...]] = []

        # Flattened (managed reaction, index, weight) triplets, rebuilt lazily
        self._flattened = True
        self._reaction_array = np.zeros(0, dtype=int)
        self._species_rows = np.zeros(0, dtype=int)
        self._species_cols = np.zeros(0, dtype=int)
        self._species_weights = np.zeros(0)
        self._group_rows = np.zeros(0, dtype=int)
        self._group_cols = np.zeros(0, dtype=int)
        self._group_weights = np.zeros(0)

    @property
    def n_reactions(self) -> int:
        """Number of managed third-body reactions."""
        return len(self._reactions)

    @property
    def reactions(self) -> tuple[int, ...]:
        return tuple(self._reactions)

    def add_reaction(
        self,
        reaction: int,
        species_efficiencies: Sequence[tuple[int, float]],
        group_efficiencies: Sequence[tuple[int, float]] = (),
    ) -> None:
        """Manage a new third-body reaction.

        Args:
            reaction: Index of the reaction in the rates of progress array.
            species_efficiencies: (species index, weight) pairs.
            group_efficiencies: (lumped group index, weight) pairs.
        """
        self._reactions.append(reaction)
        self._species_efficiencies.append(tuple(species_efficiencies))
        self._group_efficiencies.append(tuple(group_efficiencies))
        self._flattened = False

    def _flatten_efficiencies(self) -> None:
        self._species_rows, self._species_cols, self._species_weights = _flatten(
            self._species_efficiencies
        )
        self._group_rows, self._group_cols, self._group_weights = _flatten(
            self._group_efficiencies
        )
        self._reaction_array = np.asarray(self._reactions, dtype=int)
        self._flattened = True

    def multiply_thirdbodies(
        self,
        concentrations: Float[np.ndarray, " n_species"],
        rates_of_progress: Float[np.ndarray, " n_reactions"],
    ) -> None:
        """Multiply the managed rates of progress by their efficiency sums.

        Args:
            concentrations: Species molar concentrations [mol/m^3].
            rates_of_progress: Rates of progress, modified in place.
        """
        if not self._flattened:
            self._flatten_efficiencies()
        concentrations = np.asarray(concentrations)
        self._group_concentrations[:] = self._groups.sum_group_members(concentrations)

        sums = np.zeros(self.n_reactions)
        np.add.at(
            sums,
            self._species_rows,
            concentrations[self._species_cols] * self._species_weights,
        )
        np.add.at(
            sums,
            self._group_rows,
            self._group_concentrations[self._group_cols] * self._group_weights,
        )
        # A reaction managed more than once is multiplied once per entry.
        np.multiply.at(rates_of_progress, self._reaction_array, sums)


def _flatten(
    efficiencies: list[tuple[tuple[int, float], ...]],
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    rows = [r for r, effs in enumerate(efficiencies) for _ in effs]
    cols = [index for effs in efficiencies for index, _ in effs]
    weights = [weight for effs in efficiencies for _, weight in effs]
    return (
        np.asarray(rows, dtype=int),
        np.asarray(cols, dtype=int),
        np.asarray(weights, dtype=float),
    )

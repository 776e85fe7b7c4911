"""Interfaces to the thermodynamic collaborator.

The kinetics core does not evaluate thermodynamic properties itself. It reads
the temperatures of a state snapshot, asks for species Gibbs energies at a
given temperature, and asks for lumped species group sums.
"""

import functools
from dataclasses import dataclass
from typing import Protocol, Sequence

import numpy as np
from jaxtyping import Float, Int

from compressible_kinetics import constants
from compressible_kinetics.diagnose import runtime_check_array_sizes
from compressible_kinetics.errors import ConfigurationError


@dataclass(frozen=True)
class ThermoState:
    """Snapshot of the temperatures of a multi-temperature mixture.

    Attributes:
        T: Translational-rotational temperature [K].
        Tv: Vibrational temperature [K].
        Te: Electron temperature [K].
        P: Pressure [Pa].
    """

    T: float
    Tv: float
    Te: float
    P: float = constants.P_atm

    @classmethod
    def equilibrium(cls, T: float, P: float = constants.P_atm) -> "ThermoState":
        """State in thermal equilibrium, T = Tv = Te."""
        return cls(T=T, Tv=T, Te=T, P=P)


class Thermodynamics(Protocol):
    """What the kinetics managers need from a thermodynamic model."""

    @property
    def state(self) -> ThermoState: ...

    @property
    def n_species(self) -> int: ...

    @property
    def n_groups(self) -> int: ...

    def species_g_over_rt(self, T: float) -> Float[np.ndarray, " n_species"]:
        """Species standard-state Gibbs energies G_i / (R T) at T [K]."""
        ...

    def sum_group_members(
        self, values: Float[np.ndarray, " n_species"]
    ) -> Float[np.ndarray, " n_groups"]:
        """Sum species values over the members of each lumped species group."""
        ...


@runtime_check_array_sizes
def _sum_group_members(
    values: Float[np.ndarray, " n_species"],
    member_species: Int[np.ndarray, " n_members"],
    member_groups: Int[np.ndarray, " n_members"],
    n_groups: int,
) -> Float[np.ndarray, " n_groups"]:
    sums = np.zeros(n_groups)
    np.add.at(sums, member_groups, values[member_species])
    return sums


@dataclass(frozen=True)
class SpeciesGroups:
    """Lumped species groups, e.g. all electronic states of one parent species.

    Attributes:
        names: Group names.
        members: Species indices of the members of each group.
    """

    names: tuple[str, ...]
    members: tuple[tuple[int, ...], ...]

    def __post_init__(self):
        if len(self.names) != len(self.members):
            raise ConfigurationError(
                f"Got {len(self.names)} group names but {len(self.members)} "
                "member lists."
            )

    @classmethod
    def from_names(
        cls, groups: dict[str, Sequence[str]], species_names: Sequence[str]
    ) -> "SpeciesGroups":
        """Build groups from {group name: [member species names]}."""
        species_index = {name: i for i, name in enumerate(species_names)}
        members = []
        for group, names in groups.items():
            missing = [name for name in names if name not in species_index]
            if missing:
                raise ConfigurationError(
                    f"Species {missing} of group '{group}' not found. "
                    f"Available species: {tuple(species_names)}"
                )
            members.append(tuple(species_index[name] for name in names))
        return cls(names=tuple(groups), members=tuple(members))

    @property
    def n_groups(self) -> int:
        return len(self.names)

    def get_group_index(self, name: str) -> int:
        try:
            return self.names.index(name)
        except ValueError:
            raise ConfigurationError(
                f"Species group '{name}' not found. Available groups: {self.names}"
            )

    @functools.cached_property
    def _member_indices(self) -> tuple[np.ndarray, np.ndarray]:
        member_species = np.array(
            [s for group in self.members for s in group], dtype=int
        )
        member_groups = np.array(
            [g for g, group in enumerate(self.members) for _ in group], dtype=int
        )
        return member_species, member_groups

    def sum_group_members(
        self, values: Float[np.ndarray, " n_species"]
    ) -> Float[np.ndarray, " n_groups"]:
        member_species, member_groups = self._member_indices
        return _sum_group_members(
            np.asarray(values, dtype=float), member_species, member_groups, self.n_groups
        )

"""Grouped evaluation of rate coefficients and equilibrium constants.

Reactions whose rate laws share a variant and a rate-controlling temperature
are evaluated together: the temperature and its derived terms (ln T, 1/T, T^2)
are computed once per group and the ln(k) of all members are obtained from one
batched kernel. Groups write disjoint slots of a caller supplied array, so the
order in which groups are evaluated does not matter.
"""

from dataclasses import dataclass, field
from typing import Iterator

import numpy as np
from jaxtyping import Float, Int

from compressible_kinetics import constants, rate_laws
from compressible_kinetics.diagnose import runtime_check_array_sizes
from compressible_kinetics.rate_laws_types import RateLaw, RateLawKind
from compressible_kinetics.temperature_selectors import TemperatureSelector
from compressible_kinetics.thermodynamics_types import ThermoState, Thermodynamics


@runtime_check_array_sizes
def reaction_deltas(
    species_values: Float[np.ndarray, " n_species"],
    net_stoich: Float[np.ndarray, "n_reactions n_species"],
) -> Float[np.ndarray, " n_reactions"]:
    """Reaction changes sum_s nu_s,r * x_s of a species property x.

    Args:
        species_values: Species property, e.g. G/RT or H/RT. Shape [n_species].
        net_stoich: Net stoichiometry (nu'' - nu'). Shape [n_reactions, n_species].

    Returns:
        Reaction deltas. Shape [n_reactions].
    """
    return net_stoich @ species_values


@runtime_check_array_sizes
def ln_equilibrium_constants(
    g_over_rt: Float[np.ndarray, " n_species"],
    net_stoich: Float[np.ndarray, "n_reactions n_species"],
    T: float,
) -> Float[np.ndarray, " n_reactions"]:
    """Concentration based equilibrium constants ln(K_c).

        ln K_c = -sum_s nu_s g_s + dn ln(P_atm / (R T)),   dn = sum_s nu_s

    where g_s = G_s / (R T) at the standard pressure P_atm.

    Args:
        g_over_rt: Species Gibbs energies over RT at T. Shape [n_species].
        net_stoich: Net stoichiometry (nu'' - nu'). Shape [n_reactions, n_species].
        T: Temperature the Gibbs energies were evaluated at [K].

    Returns:
        ln(K_c) in mol/m^3 based units. Shape [n_reactions].
    """
    delta_n = net_stoich.sum(axis=1)
    # T <= 0 yields inf/NaN rather than an exception.
    with np.errstate(divide="ignore", invalid="ignore"):
        ln_reference = np.log(constants.P_atm / (constants.R_universal * np.float64(T)))
        return -reaction_deltas(g_over_rt, net_stoich) + delta_n * ln_reference


@dataclass
class RateLawGroup:
    """Rate laws of one variant evaluated at one rate-controlling temperature.

    Attributes:
        kind: Rate law variant shared by all members.
        selector: Rate-controlling temperature shared by all members.
        slots: Output index of each member.
        laws: Rate law of each member (owned copies).
    """

    kind: RateLawKind
    selector: TemperatureSelector
    slots: list[int] = field(default_factory=list)
    laws: list[RateLaw] = field(default_factory=list)
    _stacked: RateLaw | None = field(default=None, init=False, repr=False)
    _slot_array: Int[np.ndarray, " n_members"] | None = field(
        default=None, init=False, repr=False
    )

    def __len__(self) -> int:
        return len(self.slots)

    def add_rate_law(self, slot: int, rate_law: RateLaw) -> None:
        kind = rate_laws.rate_law_kind(rate_law)
        if kind is not self.kind:
            raise ValueError(
                f"Cannot add a {kind.value} rate law to a {self.kind.value} group."
            )
        self.slots.append(slot)
        self.laws.append(rate_law.clone())
        self._stacked = None
        self._slot_array = None

    def _stack(self) -> None:
        self._stacked = rate_laws.stack_rate_laws(self.laws)
        self._slot_array = np.asarray(self.slots, dtype=int)

    def ln_rates(self, state: ThermoState, out: Float[np.ndarray, " n"]) -> None:
        """Write ln(k) of every member into ``out[slot]``."""
        if not self.slots:
            return
        if self._stacked is None:
            self._stack()
        T = float(self.selector.temperature(state))
        out[self._slot_array] = np.asarray(rate_laws.ln_rates(self._stacked, T))


class RateLawGroupMap:
    """Collection of rate law groups keyed by (variant, selector)."""

    def __init__(self):
        self._groups: dict[tuple[RateLawKind, TemperatureSelector], RateLawGroup] = {}

    def __iter__(self) -> Iterator[RateLawGroup]:
        return iter(self._groups.values())

    def __len__(self) -> int:
        return len(self._groups)

    def get(self, kind: RateLawKind, selector: TemperatureSelector) -> RateLawGroup:
        key = (kind, selector)
        if key not in self._groups:
            self._groups[key] = RateLawGroup(kind=kind, selector=selector)
        return self._groups[key]

    def add_rate_law(
        self, selector: TemperatureSelector, slot: int, rate_law: RateLaw
    ) -> RateLawGroup:
        group = self.get(rate_laws.rate_law_kind(rate_law), selector)
        group.add_rate_law(slot, rate_law)
        return group

    def slots(self) -> list[int]:
        """All output slots, in group order."""
        return [slot for group in self for slot in group.slots]

    def ln_rates(self, state: ThermoState, out: Float[np.ndarray, " n"]) -> None:
        for group in self:
            group.ln_rates(state, out)


@dataclass
class EquilibriumGroup:
    """Reversible reactions whose reverse rate is controlled by one temperature.

    Attributes:
        selector: Reverse rate-controlling temperature.
        reactions: Reaction indices of the members.
        net_stoich: Net stoichiometry of each member, rows [n_species].
    """

    selector: TemperatureSelector
    reactions: list[int] = field(default_factory=list)
    net_stoich: list[np.ndarray] = field(default_factory=list)
    _indices: Int[np.ndarray, " n_members"] | None = field(
        default=None, init=False, repr=False
    )
    _stoich: Float[np.ndarray, "n_members n_species"] | None = field(
        default=None, init=False, repr=False
    )

    def add_reaction(self, reaction: int, net_stoich: np.ndarray) -> None:
        self.reactions.append(reaction)
        self.net_stoich.append(np.asarray(net_stoich, dtype=float))
        self._indices = None
        self._stoich = None

    def subtract_ln_keq(
        self,
        thermo: Thermodynamics,
        gibbs: Float[np.ndarray, " n_species"],
        ln_kb: Float[np.ndarray, " n_reactions"],
    ) -> None:
        """Subtract ln(K_c) at the reverse temperature from ``ln_kb``.

        The species Gibbs energies are written into ``gibbs``.
        """
        if not self.reactions:
            return
        if self._indices is None:
            self._indices = np.asarray(self.reactions, dtype=int)
            self._stoich = np.stack(self.net_stoich)

        T = float(self.selector.temperature(thermo.state))
        gibbs[:] = thermo.species_g_over_rt(T)
        ln_kb[self._indices] -= ln_equilibrium_constants(gibbs, self._stoich, T)

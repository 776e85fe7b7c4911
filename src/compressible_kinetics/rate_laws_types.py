"""Rate law variants.

Each variant is an immutable value holding fitted coefficients only. The
coefficients may be plain floats (one reaction) or arrays (a stacked group of
reactions sharing a variant, see ``rate_laws.stack_rate_laws``); the
evaluation methods broadcast over both.
"""

from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass
from typing import NamedTuple, Union

import jax
import jax.numpy as jnp
from jaxtyping import Array, Float

Coefficient = Union[float, Float[Array, " n_members"]]


class RateLawKind(enum.Enum):
    """Closed set of rate law variants known to the rate manager."""

    ARRHENIUS = "arrhenius"
    RATIONAL_EXPONENTIAL = "rational_exponential"
    CONSTANT = "constant"
    RATIONAL_CUBIC_EXPONENTIAL = "rational_cubic_exponential"


class TemperatureTerms(NamedTuple):
    """Temperature-derived scalars shared by all members of a group."""

    T: Float[Array, ""]
    lnT: Float[Array, ""]
    invT: Float[Array, ""]
    T2: Float[Array, ""]


def temperature_terms(T) -> TemperatureTerms:
    T = jnp.asarray(T)
    return TemperatureTerms(T=T, lnT=jnp.log(T), invT=1.0 / T, T2=T * T)


@jax.tree_util.register_dataclass
@dataclass(frozen=True)
class Arrhenius:
    """Arrhenius rate law k_f(T) = A T^n exp(-theta / T).

    Attributes:
        ln_A: Natural log of the pre-exponential factor [SI].
        n: Temperature exponent [-].
        theta: Activation temperature E_a / R [K].
    """

    ln_A: Coefficient
    n: Coefficient = 0.0
    theta: Coefficient = 0.0

    kind = RateLawKind.ARRHENIUS

    @property
    def A(self):
        return jnp.exp(self.ln_A)

    def ln_rate(self, lnT, invT):
        return self.ln_A + self.n * lnT - self.theta * invT

    def derivative(self, k, lnT, invT):
        """dk/dT given k = exp(ln_rate)."""
        return k * invT * (self.n + self.theta * invT)

    def clone(self) -> "Arrhenius":
        return dataclasses.replace(self)


@jax.tree_util.register_dataclass
@dataclass(frozen=True)
class ConstantRate:
    """Temperature independent rate k_f = A."""

    ln_A: Coefficient

    kind = RateLawKind.CONSTANT

    @property
    def A(self):
        return jnp.exp(self.ln_A)

    def ln_rate(self):
        return self.ln_A

    def derivative(self):
        return 0.0

    def clone(self) -> "ConstantRate":
        return dataclasses.replace(self)


@jax.tree_util.register_dataclass
@dataclass(frozen=True)
class RationalExponential:
    """Arrhenius-like rate law with a rational pre-exponential term.

    k_f(T) = T^n exp(-theta / T) P(T) / Q(T)
    P(T) = a0 + a1 T + a2 T^2
    Q(T) = b0 + b1 T + b2 T^2 + b3 T^3
    """

    n: Coefficient = 0.0
    theta: Coefficient = 0.0
    a0: Coefficient = 0.0
    a1: Coefficient = 0.0
    a2: Coefficient = 0.0
    b0: Coefficient = 0.0
    b1: Coefficient = 0.0
    b2: Coefficient = 0.0
    b3: Coefficient = 0.0

    kind = RateLawKind.RATIONAL_EXPONENTIAL

    def _numerator(self, T, T2):
        return self.a0 + self.a1 * T + self.a2 * T2

    def _denominator(self, T, T2):
        return self.b0 + self.b1 * T + self.b2 * T2 + self.b3 * T2 * T

    def ln_rate(self, lnT, invT, T, T2):
        return (
            self.n * lnT
            - self.theta * invT
            + jnp.log(self._numerator(T, T2) / self._denominator(T, T2))
        )

    def derivative(self, k, invT, T, T2):
        """dk/dT given k = exp(ln_rate)."""
        dP = self.a1 + 2.0 * self.a2 * T
        dQ = self.b1 + 2.0 * self.b2 * T + 3.0 * self.b3 * T2
        return k * (
            invT * (self.n + self.theta * invT)
            + dP / self._numerator(T, T2)
            - dQ / self._denominator(T, T2)
        )

    def clone(self) -> "RationalExponential":
        return dataclasses.replace(self)


@jax.tree_util.register_dataclass
@dataclass(frozen=True)
class RationalCubicExponential:
    """Rational function of T with a monic cubic denominator.

    value(T) = (a0 + a1 T + a2 T^2 + a3 T^3) / (b0 + b1 T + b2 T^2 + T^3)

    Unlike the other variants the evaluation returns this value as is, without
    taking a logarithm, and the rate manager stores it in the ln(k) slot.
    """

    a0: Coefficient = 0.0
    a1: Coefficient = 0.0
    a2: Coefficient = 0.0
    a3: Coefficient = 0.0
    b0: Coefficient = 0.0
    b1: Coefficient = 0.0
    b2: Coefficient = 0.0

    kind = RateLawKind.RATIONAL_CUBIC_EXPONENTIAL

    def rate(self, T):
        return (self.a0 + (self.a1 + (self.a2 + self.a3 * T) * T) * T) / (
            self.b0 + (self.b1 + (self.b2 + T) * T) * T
        )

    def clone(self) -> "RationalCubicExponential":
        return dataclasses.replace(self)


RateLaw = Union[Arrhenius, RationalExponential, ConstantRate, RationalCubicExponential]

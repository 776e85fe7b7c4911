"""Dispatch and batched evaluation of rate laws.

Rate laws sharing a variant are stacked into a single instance whose
coefficients are arrays, so one jitted kernel evaluates a whole group with
the temperature terms computed once.
"""

from __future__ import annotations

import dataclasses
from typing import Sequence

import jax
import jax.numpy as jnp
from jaxtyping import Array, Float

from compressible_kinetics.errors import UnsupportedRateLawError
from compressible_kinetics.rate_laws_types import (
    Arrhenius,
    ConstantRate,
    RateLaw,
    RateLawKind,
    RationalCubicExponential,
    RationalExponential,
    TemperatureTerms,
    temperature_terms,
)


def rate_law_kind(rate_law: object) -> RateLawKind:
    """Classify a rate law into one of the registered variants.

    Raises:
        UnsupportedRateLawError: If ``rate_law`` is not a registered variant.
    """
    match rate_law:
        case Arrhenius():
            return RateLawKind.ARRHENIUS
        case RationalExponential():
            return RateLawKind.RATIONAL_EXPONENTIAL
        case ConstantRate():
            return RateLawKind.CONSTANT
        case RationalCubicExponential():
            return RateLawKind.RATIONAL_CUBIC_EXPONENTIAL
        case _:
            raise UnsupportedRateLawError(
                f"Rate law {type(rate_law).__name__} is not implemented in "
                f"RateManager. Supported: {[k.value for k in RateLawKind]}"
            )


def evaluate_rate_law(rate_law: RateLaw, terms: TemperatureTerms):
    """Evaluate ln(k) (or the raw value for the rational cubic form)."""
    match rate_law:
        case Arrhenius():
            return rate_law.ln_rate(terms.lnT, terms.invT)
        case RationalExponential():
            return rate_law.ln_rate(terms.lnT, terms.invT, terms.T, terms.T2)
        case ConstantRate():
            return rate_law.ln_rate()
        case RationalCubicExponential():
            return rate_law.rate(terms.T)
        case _:
            raise UnsupportedRateLawError(
                f"Cannot evaluate rate law {type(rate_law).__name__}."
            )


def stack_rate_laws(rate_laws: Sequence[RateLaw]) -> RateLaw:
    """Stack rate laws of one variant into a single instance with array fields.

    Args:
        rate_laws: Non-empty sequence of rate laws of the same variant.

    Returns:
        Instance of the common variant whose coefficients have shape
        [n_members].
    """
    if not rate_laws:
        raise ValueError("Cannot stack an empty sequence of rate laws.")
    cls = type(rate_laws[0])
    if any(type(law) is not cls for law in rate_laws):
        raise ValueError(f"All rate laws must be {cls.__name__} to be stacked.")

    return cls(
        **{
            f.name: jnp.asarray([getattr(law, f.name) for law in rate_laws])
            for f in dataclasses.fields(cls)
        }
    )


@jax.jit
def ln_rates(rate_law: RateLaw, T: Float[Array, ""]) -> Float[Array, " n_members"]:
    """Batched ln(k) of a stacked rate law at the temperature T [K]."""
    return evaluate_rate_law(rate_law, temperature_terms(T))

"""Construction of rate laws from schema entries.

A schema entry is a mapping such as::

    {"kind": "arrhenius", "A": 7.0e21, "n": -1.6, "Ea": 113200.0}

Coefficients are plain numbers or ``{"value": ..., "units": ...}`` objects.
Unit conversion is resolved here, once, so rate laws only hold SI
coefficients and evaluation never fails on configuration.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Annotated, Literal, Mapping, Union

import pydantic

from compressible_kinetics import constants
from compressible_kinetics.errors import ConfigurationError
from compressible_kinetics.rate_laws_types import (
    Arrhenius,
    ConstantRate,
    RateLaw,
    RationalCubicExponential,
    RationalExponential,
)

LENGTH_UNITS = {"m": 1.0, "cm": 1e-2}
QUANTITY_UNITS = {"mol": 1.0, "molecule": 1.0 / constants.N_A}
TIME_UNITS = {"s": 1.0}
# Factor converting an activation energy to an activation temperature [K].
ENERGY_UNITS = {
    "K": 1.0,
    "J/mol": 1.0 / constants.R_universal,
    "kJ/mol": 1e3 / constants.R_universal,
    "cal/mol": constants.calorie / constants.R_universal,
    "kcal/mol": 1e3 * constants.calorie / constants.R_universal,
    "eV": constants.e / constants.k,
}


@dataclass(frozen=True)
class RateLawUnits:
    """Units of the coefficients in rate law schema entries.

    Attributes:
        length: Length unit of concentrations in the pre-exponential factor.
        quantity: Amount unit of concentrations in the pre-exponential factor.
        time: Time unit of the pre-exponential factor.
        energy: Unit of activation energies ("K" for activation temperatures).
    """

    length: Literal["m", "cm"] = "m"
    quantity: Literal["mol", "molecule"] = "mol"
    time: Literal["s"] = "s"
    energy: Literal["K", "J/mol", "kJ/mol", "cal/mol", "kcal/mol", "eV"] = "K"

    def __post_init__(self):
        for name, valid in (
            ("length", LENGTH_UNITS),
            ("quantity", QUANTITY_UNITS),
            ("time", TIME_UNITS),
            ("energy", ENERGY_UNITS),
        ):
            value = getattr(self, name)
            if value not in valid:
                raise ConfigurationError(
                    f"{name} units must be one of {list(valid)}, got {value!r}"
                )


def _parse_pre_exponential_units(units: str) -> tuple[float, float, float]:
    """Parse "length,quantity,time" or "length^3/quantity/time" style strings."""
    tokens = [t for t in units.replace("^3", "").replace("/", ",").split(",") if t]
    tokens = [t.strip() for t in tokens]
    if len(tokens) != 3:
        raise ConfigurationError(
            f"Pre-exponential units must name length, quantity and time, got {units!r}"
        )
    length, quantity, time = tokens
    try:
        return LENGTH_UNITS[length], QUANTITY_UNITS[quantity], TIME_UNITS[time]
    except KeyError as exc:
        raise ConfigurationError(
            f"Unknown unit {exc.args[0]!r} in pre-exponential units {units!r}"
        ) from None


def pre_exponential_factor(units: RateLawUnits | str, order: float) -> float:
    """Factor converting a pre-exponential factor of the given order to SI.

    A rate coefficient of a reaction of order m has units
    (length^3 / quantity)^(m-1) / time.

    Args:
        units: Unit configuration, or an explicit "cm,mol,s" style string.
        order: Reaction order (sum of reactant coefficients, +1 for third body).

    Returns:
        Multiplicative factor to SI units [m^3/mol]^(m-1)/s.
    """
    if isinstance(units, str):
        length, quantity, time = _parse_pre_exponential_units(units)
    else:
        length = LENGTH_UNITS[units.length]
        quantity = QUANTITY_UNITS[units.quantity]
        time = TIME_UNITS[units.time]
    return (length**3 / quantity) ** (order - 1.0) / time


def activation_temperature(value: float, units: RateLawUnits | str) -> float:
    """Convert an activation energy to an activation temperature [K]."""
    name = units if isinstance(units, str) else units.energy
    if name not in ENERGY_UNITS:
        raise ConfigurationError(
            f"Activation energy units must be one of {list(ENERGY_UNITS)}, "
            f"got {name!r}"
        )
    return value * ENERGY_UNITS[name]


class CoefficientWithUnits(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(extra="forbid")

    value: float
    units: str | None = None


Coefficient = Union[float, CoefficientWithUnits]


class _RateLawSchema(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(extra="forbid")


class ArrheniusSchema(_RateLawSchema):
    kind: Literal["arrhenius"]
    A: Coefficient
    n: float = 0.0
    Ea: Coefficient = 0.0


class ConstantRateSchema(_RateLawSchema):
    kind: Literal["constant"]
    A: Coefficient


class RationalExponentialSchema(_RateLawSchema):
    kind: Literal["rational_exponential"]
    n: float = 0.0
    Ea: Coefficient = 0.0
    a0: Coefficient = 0.0
    a1: Coefficient = 0.0
    a2: Coefficient = 0.0
    b0: float = 0.0
    b1: float = 0.0
    b2: float = 0.0
    b3: float = 0.0


class RationalCubicExponentialSchema(_RateLawSchema):
    kind: Literal["rational_cubic_exponential"]
    a0: Coefficient = 0.0
    a1: Coefficient = 0.0
    a2: Coefficient = 0.0
    a3: Coefficient = 0.0
    b0: float = 0.0
    b1: float = 0.0
    b2: float = 0.0


RateLawSchema = Annotated[
    Union[
        ArrheniusSchema,
        ConstantRateSchema,
        RationalExponentialSchema,
        RationalCubicExponentialSchema,
    ],
    pydantic.Field(discriminator="kind"),
]

_schema_adapter = pydantic.TypeAdapter(RateLawSchema)


def _pre_exponential(coeff: Coefficient, units: RateLawUnits, order: float) -> float:
    if isinstance(coeff, CoefficientWithUnits):
        factor = pre_exponential_factor(
            coeff.units if coeff.units is not None else units, order
        )
        return coeff.value * factor
    return coeff * pre_exponential_factor(units, order)


def _activation(coeff: Coefficient, units: RateLawUnits) -> float:
    if isinstance(coeff, CoefficientWithUnits):
        return activation_temperature(
            coeff.value, coeff.units if coeff.units is not None else units
        )
    return activation_temperature(coeff, units)


def _ln_positive(value: float, name: str) -> float:
    if not value > 0.0:
        raise ConfigurationError(f"{name} must be positive, got {value}")
    return math.log(value)


def build_rate_law(
    entry: Mapping, order: float, units: RateLawUnits = RateLawUnits()
) -> RateLaw:
    """Build a rate law from a schema entry.

    Args:
        entry: Schema mapping with a "kind" key and the variant's coefficients.
            Unspecified coefficients default to zero; the pre-exponential
            factor "A" is required for the Arrhenius and constant forms.
        order: Reaction order used to convert pre-exponential units.
        units: Default units for coefficients without explicit units.

    Returns:
        Rate law with SI coefficients.

    Raises:
        ConfigurationError: If the entry is malformed or names unknown units.
    """
    try:
        schema = _schema_adapter.validate_python(dict(entry))
    except pydantic.ValidationError as exc:
        raise ConfigurationError(f"Invalid rate law entry {dict(entry)}: {exc}") from exc

    if isinstance(schema, ArrheniusSchema):
        A = _pre_exponential(schema.A, units, order)
        return Arrhenius(
            ln_A=_ln_positive(A, "Arrhenius pre-exponential factor A"),
            n=schema.n,
            theta=_activation(schema.Ea, units),
        )

    if isinstance(schema, ConstantRateSchema):
        A = _pre_exponential(schema.A, units, order)
        return ConstantRate(ln_A=_ln_positive(A, "Constant rate A"))

    if isinstance(schema, RationalExponentialSchema):
        # The numerator carries the units of the rate coefficient.
        return RationalExponential(
            n=schema.n,
            theta=_activation(schema.Ea, units),
            a0=_pre_exponential(schema.a0, units, order),
            a1=_pre_exponential(schema.a1, units, order),
            a2=_pre_exponential(schema.a2, units, order),
            b0=schema.b0,
            b1=schema.b1,
            b2=schema.b2,
            b3=schema.b3,
        )

    # Numerator coefficients carry the units of the rate coefficient.
    return RationalCubicExponential(
        a0=_pre_exponential(schema.a0, units, order),
        a1=_pre_exponential(schema.a1, units, order),
        a2=_pre_exponential(schema.a2, units, order),
        a3=_pre_exponential(schema.a3, units, order),
        b0=schema.b0,
        b1=schema.b1,
        b2=schema.b2,
    )

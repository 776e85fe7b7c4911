"""Tests for loading reaction mechanisms from JSON."""

import json
import math
from pathlib import Path

import jax
import numpy as np
import pytest

from compressible_kinetics import chemistry_utils
from compressible_kinetics.errors import ConfigurationError
from compressible_kinetics.rate_laws_types import Arrhenius, ConstantRate
from compressible_kinetics.rate_laws_utils import RateLawUnits, activation_temperature
from compressible_kinetics.rate_manager import RateManager
from compressible_kinetics.temperature_selectors import ReactionType
from compressible_kinetics.thermodynamics_types import SpeciesGroups, ThermoState

jax.config.update("jax_enable_x64", True)

data_dir = Path(__file__).parent.parent.parent / "data"
MECHANISM = data_dir / "air_5_park.json"

SPECIES = ("N", "O", "N2", "O2", "NO")
GROUPS = ("atoms",)


@pytest.fixture
def reactions():
    return chemistry_utils.load_reactions_from_json(MECHANISM, SPECIES, GROUPS)


def write_mechanism(tmp_path, reactions, **extra):
    path = tmp_path / "mechanism.json"
    path.write_text(json.dumps({"reactions": reactions, **extra}))
    return path


class TestLoadReactionsFromJson:
    def test_reaction_count_and_types(self, reactions):
        assert len(reactions) == 6
        assert [r.reaction_type for r in reactions] == [
            ReactionType.DISSOCIATION_M,
            ReactionType.DISSOCIATION_M,
            ReactionType.DISSOCIATION_M,
            ReactionType.EXCHANGE,
            ReactionType.EXCHANGE,
            ReactionType.BND_BND_EMISSION,
        ]

    def test_stoichiometry(self, reactions):
        n2_dissociation = reactions[0]
        assert n2_dissociation.formula == "N2 + M = 2N + M"
        assert n2_dissociation.reactants == ((2, 1.0),)
        assert n2_dissociation.products == ((0, 2.0),)
        np.testing.assert_array_equal(
            n2_dissociation.net_stoichiometry(5), [2.0, 0.0, -1.0, 0.0, 0.0]
        )

    def test_thirdbody(self, reactions):
        assert [r.is_thirdbody for r in reactions] == [True, True, True, False, False, False]
        assert reactions[2].thirdbody_efficiencies == ((2, 1.0), (3, 1.0), (4, 22.0))
        assert reactions[2].group_efficiencies == ((0, 22.0),)
        assert reactions[0].order == 2.0
        assert reactions[3].order == 2.0

    def test_pre_exponential_units_use_reaction_order(self, reactions):
        """Third-body reactions count M in the order: 7e21 cm^3/mol/s -> 7e15."""
        assert isinstance(reactions[0].rate_law, Arrhenius)
        assert reactions[0].rate_law.ln_A == pytest.approx(math.log(7.0e15), rel=1e-14)
        assert reactions[3].rate_law.ln_A == pytest.approx(math.log(6.4e11), rel=1e-14)

    def test_coefficient_units_override_file_units(self, reactions):
        law = reactions[4].rate_law
        assert law.ln_A == pytest.approx(math.log(8.4e6), rel=1e-14)
        assert law.theta == pytest.approx(activation_temperature(1.676, "eV"))

    def test_irreversible(self, reactions):
        assert [r.reversible for r in reactions] == [True] * 5 + [False]
        assert isinstance(reactions[5].rate_law, ConstantRate)
        assert reactions[5].rate_law.ln_A == math.log(1.0e3)

    def test_units_argument_is_default(self, tmp_path):
        path = write_mechanism(
            tmp_path,
            [
                {
                    "equation": "N2 + O = NO + N",
                    "reactants": {"N2": 1, "O": 1},
                    "products": {"NO": 1, "N": 1},
                    "rate_law": {"kind": "arrhenius", "A": 6.4e17},
                }
            ],
        )
        (si,) = chemistry_utils.load_reactions_from_json(path, SPECIES)
        (cgs,) = chemistry_utils.load_reactions_from_json(
            path, SPECIES, units=RateLawUnits(length="cm")
        )
        assert si.reaction_type is ReactionType.EXCHANGE
        assert si.rate_law.ln_A == math.log(6.4e17)
        assert cgs.rate_law.ln_A == pytest.approx(math.log(6.4e11), rel=1e-14)

    def test_bare_array(self, tmp_path):
        path = tmp_path / "mechanism.json"
        path.write_text(
            json.dumps(
                [
                    {
                        "equation": "O2 + M = 2O + M",
                        "type": "dissociation_m",
                        "reactants": {"O2": 1},
                        "products": {"O": 2},
                        "rate_law": {"kind": "constant", "A": 1.0},
                        "thirdbody": True,
                    }
                ]
            )
        )
        (reaction,) = chemistry_utils.load_reactions_from_json(path, SPECIES)
        assert reaction.is_thirdbody
        assert reaction.thirdbody_efficiencies == ()

    @pytest.mark.parametrize(
        "reaction, message",
        [
            ({"reactants": {"Ar": 1}, "products": {"N": 1}}, "Ar"),
            ({"type": "photoionization"}, "photoionization"),
            ({"group_efficiencies": {"ions": 1.0}}, "ions"),
            ({"rate_law": {"kind": "arrhenius", "A": -1.0}}, "positive"),
        ],
    )
    def test_invalid_reaction(self, tmp_path, reaction, message):
        entry = {
            "equation": "N2 + O = NO + N",
            "reactants": {"N2": 1, "O": 1},
            "products": {"NO": 1, "N": 1},
            "rate_law": {"kind": "arrhenius", "A": 1.0},
            **reaction,
        }
        path = write_mechanism(tmp_path, [entry])
        with pytest.raises(ConfigurationError, match=message):
            chemistry_utils.load_reactions_from_json(path, SPECIES, GROUPS)

    def test_missing_rate_law(self, tmp_path):
        path = write_mechanism(tmp_path, [{"equation": "N2 = 2N"}])
        with pytest.raises(ConfigurationError, match="rate_law"):
            chemistry_utils.load_reactions_from_json(path, SPECIES)

    def test_invalid_units(self, tmp_path):
        path = write_mechanism(tmp_path, [], units={"length": "inch"})
        with pytest.raises(ConfigurationError):
            chemistry_utils.load_reactions_from_json(path, SPECIES)

    def test_not_a_mechanism(self, tmp_path):
        path = write_mechanism(tmp_path, {"N2": 1})
        with pytest.raises(ConfigurationError):
            chemistry_utils.load_reactions_from_json(path, SPECIES)


class TestBuildThirdbodyManager:
    def test_registers_thirdbody_reactions(self, reactions):
        groups = SpeciesGroups.from_names({"atoms": ["N", "O"]}, SPECIES)
        manager = chemistry_utils.build_thirdbody_manager(reactions, len(SPECIES), groups)
        assert manager.reactions == (0, 1, 2)

        concentrations = np.array([1.0, 2.0, 0.5, 0.25, 0.125])
        rates = np.ones(len(reactions))
        manager.multiply_thirdbodies(concentrations, rates)

        molecules = 0.5 + 0.25 + 0.125
        np.testing.assert_allclose(
            rates,
            [
                molecules + 4.2857 * 3.0,
                molecules + 5.0 * 3.0,
                0.5 + 0.25 + 22.0 * 0.125 + 22.0 * 3.0,
                1.0,
                1.0,
                1.0,
            ],
            rtol=1e-14,
        )


class TestMechanism:
    def test_rate_manager_update_is_finite(self, reactions):
        class ConstantGibbs:
            state = ThermoState(T=10000.0, Tv=6000.0, Te=10000.0)
            n_species = len(SPECIES)
            n_groups = 0

            def species_g_over_rt(self, T):
                return np.linspace(-3.0, 3.0, len(SPECIES))

            def sum_group_members(self, values):
                return np.zeros(0)

        manager = RateManager(len(SPECIES), reactions)
        manager.update(ConstantGibbs())

        assert np.all(np.isfinite(manager.ln_kf))
        assert np.all(np.isfinite(manager.ln_kb[:5]))
        assert manager.ln_kb[5] == 0.0
        assert manager.shared_reverse_reactions == (3, 4)

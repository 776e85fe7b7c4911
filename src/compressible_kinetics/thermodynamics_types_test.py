import numpy as np
import pytest

from compressible_kinetics import constants
from compressible_kinetics.errors import ConfigurationError
from compressible_kinetics.thermodynamics_types import SpeciesGroups, ThermoState

SPECIES = ("N", "O", "N2", "O2", "NO")


class TestThermoState:
    def test_equilibrium(self):
        state = ThermoState.equilibrium(5000.0)
        assert state.T == state.Tv == state.Te == 5000.0
        assert state.P == constants.P_atm

    def test_frozen(self):
        state = ThermoState(T=300.0, Tv=300.0, Te=300.0)
        with pytest.raises(AttributeError):
            state.T = 400.0


class TestSpeciesGroups:
    """Tests for lumped species groups."""

    @pytest.fixture
    def groups(self):
        return SpeciesGroups.from_names(
            {"atoms": ["N", "O"], "molecules": ["N2", "O2", "NO"]}, SPECIES
        )

    def test_from_names(self, groups):
        assert groups.names == ("atoms", "molecules")
        assert groups.members == ((0, 1), (2, 3, 4))
        assert groups.n_groups == 2

    def test_get_group_index(self, groups):
        assert groups.get_group_index("molecules") == 1
        with pytest.raises(ConfigurationError):
            groups.get_group_index("ions")

    def test_sum_group_members(self, groups):
        values = np.array([1.0, 2.0, 3.0, 4.0, 5.0])
        np.testing.assert_array_equal(
            groups.sum_group_members(values), np.array([3.0, 12.0])
        )

    def test_species_in_several_groups(self):
        groups = SpeciesGroups(names=("a", "b"), members=((0, 1), (1,)))
        sums = groups.sum_group_members(np.array([1.0, 10.0]))
        np.testing.assert_array_equal(sums, np.array([11.0, 10.0]))

    def test_no_groups(self):
        groups = SpeciesGroups(names=(), members=())
        assert groups.sum_group_members(np.ones(3)).shape == (0,)

    def test_unknown_member(self):
        with pytest.raises(ConfigurationError, match="Ar"):
            SpeciesGroups.from_names({"atoms": ["N", "Ar"]}, SPECIES)

    def test_mismatched_lengths(self):
        with pytest.raises(ConfigurationError):
            SpeciesGroups(names=("a", "b"), members=((0,),))

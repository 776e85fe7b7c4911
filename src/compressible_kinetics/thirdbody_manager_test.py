import numpy as np
import pytest

from compressible_kinetics.thermodynamics_types import SpeciesGroups
from compressible_kinetics.thirdbody_manager import ThirdbodyManager

NO_GROUPS = SpeciesGroups(names=(), members=())


class TestThirdbodyManager:
    """Tests for third-body efficiency sums."""

    def test_weighted_sum(self):
        manager = ThirdbodyManager(2, NO_GROUPS)
        manager.add_reaction(0, [(0, 1.0), (1, 0.5)])

        rates = np.array([5.0])
        manager.multiply_thirdbodies(np.array([1.0, 2.0]), rates)

        assert rates[0] == 10.0

    def test_unlisted_species_do_not_collide(self):
        """The efficiency sum starts at zero."""
        manager = ThirdbodyManager(3, NO_GROUPS)
        manager.add_reaction(0, [(2, 1.0)])
        manager.add_reaction(1, [])

        rates = np.array([4.0, 4.0])
        manager.multiply_thirdbodies(np.array([100.0, 100.0, 0.25]), rates)

        np.testing.assert_array_equal(rates, [1.0, 0.0])

    def test_unmanaged_reactions_untouched(self):
        manager = ThirdbodyManager(2, NO_GROUPS)
        manager.add_reaction(1, [(0, 2.0)])

        rates = np.array([3.0, 3.0, 3.0])
        manager.multiply_thirdbodies(np.array([1.5, 7.0]), rates)

        np.testing.assert_array_equal(rates, [3.0, 9.0, 3.0])

    def test_group_efficiencies(self):
        groups = SpeciesGroups(names=("atoms",), members=((0, 1),))
        manager = ThirdbodyManager(3, groups)
        manager.add_reaction(0, [(2, 1.0)], [(0, 5.0)])

        rates = np.array([1.0])
        manager.multiply_thirdbodies(np.array([1.0, 2.0, 4.0]), rates)

        assert rates[0] == 4.0 + 5.0 * 3.0

    def test_repeated_reaction_compounds(self):
        manager = ThirdbodyManager(1, NO_GROUPS)
        manager.add_reaction(0, [(0, 2.0)])
        manager.add_reaction(0, [(0, 3.0)])

        rates = np.array([1.0])
        manager.multiply_thirdbodies(np.array([1.0]), rates)

        assert rates[0] == 6.0

    def test_bookkeeping(self):
        manager = ThirdbodyManager(2, NO_GROUPS)
        assert manager.n_reactions == 0
        manager.add_reaction(3, [(0, 1.0)])
        manager.add_reaction(1, [(1, 1.0)])
        assert manager.n_reactions == 2
        assert manager.reactions == (3, 1)

    def test_efficiencies_flattened_on_first_use(self):
        manager = ThirdbodyManager(2, NO_GROUPS)
        for reaction in range(3):
            manager.add_reaction(reaction, [(0, 1.0), (1, 2.0)])
        assert manager._species_rows.size == 0

        rates = np.ones(3)
        manager.multiply_thirdbodies(np.array([1.0, 1.0]), rates)

        assert manager._species_rows.size == 6
        np.testing.assert_array_equal(rates, [3.0, 3.0, 3.0])

    def test_reactions_added_after_multiplication(self):
        manager = ThirdbodyManager(2, NO_GROUPS)
        manager.add_reaction(0, [(0, 2.0)])
        rates = np.ones(2)
        manager.multiply_thirdbodies(np.array([1.0, 3.0]), rates)

        manager.add_reaction(1, [(1, 1.0)])
        rates = np.ones(2)
        manager.multiply_thirdbodies(np.array([1.0, 3.0]), rates)

        np.testing.assert_array_equal(rates, [2.0, 3.0])

    def test_no_reactions(self):
        manager = ThirdbodyManager(2, NO_GROUPS)
        rates = np.array([2.0])
        manager.multiply_thirdbodies(np.array([1.0, 1.0]), rates)
        assert rates[0] == 2.0

    @pytest.mark.parametrize("scale", [1e-3, 1.0, 1e6])
    def test_linear_in_concentrations(self, scale):
        manager = ThirdbodyManager(2, NO_GROUPS)
        manager.add_reaction(0, [(0, 1.0), (1, 1.0)])

        rates = np.array([1.0])
        manager.multiply_thirdbodies(scale * np.array([0.5, 0.5]), rates)

        assert rates[0] == pytest.approx(scale)

import json
import logging
from pathlib import Path
from typing import Mapping, Sequence

from compressible_kinetics.chemistry_types import IndexedCoefficients, Reaction
from compressible_kinetics.errors import ConfigurationError
from compressible_kinetics.rate_laws_utils import RateLawUnits, build_rate_law
from compressible_kinetics.temperature_selectors import parse_reaction_type
from compressible_kinetics.thirdbody_manager import SpeciesGroupSummer, ThirdbodyManager

logger = logging.getLogger(__name__)


def _index_coefficients(
    coefficients: Mapping[str, float],
    index: Mapping[str, int],
    what: str,
    equation: str,
) -> IndexedCoefficients:
    missing = [name for name in coefficients if name not in index]
    if missing:
        raise ConfigurationError(
            f"{what} {missing} of reaction '{equation}' not found. "
            f"Available: {tuple(index)}"
        )
    return tuple((index[name], float(coeff)) for name, coeff in coefficients.items())


def _load_units(data: dict, units: RateLawUnits) -> RateLawUnits:
    raw_units = data.get("units") if isinstance(data, dict) else None
    if raw_units is None:
        return units
    try:
        return RateLawUnits(**raw_units)
    except TypeError as exc:
        raise ConfigurationError(f"Invalid units {raw_units}: {exc}") from exc


def reaction_from_dict(
    rxn: dict,
    species_index: Mapping[str, int],
    group_index: Mapping[str, int],
    units: RateLawUnits = RateLawUnits(),
) -> Reaction:
    """Build a Reaction from one mechanism entry.

    Args:
        rxn: Reaction entry, see ``load_reactions_from_json``.
        species_index: Species name -> index.
        group_index: Lumped species group name -> index.
        units: Units of the rate law coefficients.

    Returns:
        Reaction with SI rate law coefficients.
    """
    equation = rxn.get("equation", "")
    if "rate_law" not in rxn:
        raise ConfigurationError(f"Reaction '{equation}' has no rate_law entry.")

    reactants = _index_coefficients(
        rxn.get("reactants", {}), species_index, "Reactants", equation
    )
    products = _index_coefficients(
        rxn.get("products", {}), species_index, "Products", equation
    )
    thirdbody_efficiencies = _index_coefficients(
        rxn.get("thirdbody_efficiencies", {}), species_index, "Collision partners", equation
    )
    group_efficiencies = _index_coefficients(
        rxn.get("group_efficiencies", {}), group_index, "Species groups", equation
    )
    is_thirdbody = bool(
        rxn.get("thirdbody", bool(thirdbody_efficiencies or group_efficiencies))
    )

    order = sum(nu for _, nu in reactants) + (1.0 if is_thirdbody else 0.0)

    return Reaction(
        formula=equation,
        reaction_type=parse_reaction_type(rxn.get("type", "exchange")),
        rate_law=build_rate_law(rxn["rate_law"], order, units),
        reactants=reactants,
        products=products,
        reversible=bool(rxn.get("reversible", True)),
        is_thirdbody=is_thirdbody,
        thirdbody_efficiencies=thirdbody_efficiencies,
        group_efficiencies=group_efficiencies,
    )


def load_reactions_from_json(
    json_path: str,
    species_names: Sequence[str],
    group_names: Sequence[str] = (),
    units: RateLawUnits = RateLawUnits(),
) -> list[Reaction]:
    """Load a reaction mechanism from a JSON file.

    The JSON file contains a "reactions" array (or is the array itself). A
    top-level "units" object overrides ``units``. Each reaction entry has:
        - equation: Human-readable reaction equation
        - type: Reaction type name (e.g. "dissociation_m"), default "exchange"
        - reversible: Whether the reverse rate is computed, default true
        - reactants / products: Dict species name -> stoichiometric coefficient
        - rate_law: Rate law schema, e.g.
            {"kind": "arrhenius", "A": 7.0e21, "n": -1.6, "Ea": 113200.0}
        - thirdbody: Whether M takes part, default true if efficiencies given
        - thirdbody_efficiencies: Dict species name -> absolute weight
        - group_efficiencies: Dict species group name -> absolute weight

    Notes:
        - Pre-exponential factors are converted to SI using the reaction order
          (reactant coefficients + 1 for a third body).
        - Unlike the usual convention, species missing from the efficiency
          dicts do not collide: the efficiency sum starts at zero.

    Args:
        json_path: Path to JSON file with reaction data.
        species_names: Ordered species names of the mixture.
        group_names: Ordered lumped species group names of the mixture.
        units: Default units of the rate law coefficients.

    Returns:
        Reactions in file order.

    Raises:
        ConfigurationError: On unknown species, groups, reaction types, units
            or malformed rate laws.
    """
    json_path = Path(json_path)
    with json_path.open("r", encoding="utf-8") as f:
        data = json.load(f)

    reactions = data.get("reactions", data) if isinstance(data, dict) else data
    if not isinstance(reactions, list):
        raise ConfigurationError("JSON must contain a 'reactions' array or be an array.")

    units = _load_units(data, units)
    species_index = {name: i for i, name in enumerate(species_names)}
    group_index = {name: i for i, name in enumerate(group_names)}

    loaded = [
        reaction_from_dict(rxn, species_index, group_index, units) for rxn in reactions
    ]
    logger.debug("Loaded %d reactions from %s", len(loaded), json_path)
    return loaded


def build_thirdbody_manager(
    reactions: Sequence[Reaction], n_species: int, groups: SpeciesGroupSummer
) -> ThirdbodyManager:
    """Register every third-body reaction of a mechanism."""
    manager = ThirdbodyManager(n_species, groups)
    for i, reaction in enumerate(reactions):
        if reaction.is_thirdbody:
            manager.add_reaction(
                i, reaction.thirdbody_efficiencies, reaction.group_efficiencies
            )
    return manager

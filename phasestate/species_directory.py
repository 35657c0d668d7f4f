# phasestate/species_directory.py
"""
Species directory: the name <-> index table of a phase together with the
per-species molecular weights and ionic charges.

Species are added one at a time (or loaded from a YAML species file) and the
directory is then frozen. Only a frozen directory reports itself ready.
"""

import os
import logging

import numpy as np
import yaml

from .species_properties import charge_from_name, molecular_weight_from_formula

logger = logging.getLogger(__name__)


class SpeciesDirectory:
    """Ordered table of species names, molecular weights (kg/kmol) and charges."""

    def __init__(self):
        self._names = []
        self._index = {}
        self._weights = []
        self._charges = []
        self._weights_array = np.zeros(0)
        self._frozen = False

    def add_species(self, name, molecular_weight=None, charge=None):
        """Append a species and return its index.

        Args:
            name: Unique species name, e.g. 'O2' or 'O2+'
            molecular_weight: kg/kmol; derived from the name when omitted
            charge: Ionic charge in elementary charges; derived from the name when omitted

        Returns:
            int: index of the new species
        """
        if name in self._index:
            raise ValueError(f"Species '{name}' is already defined (index {self._index[name]})")

        if molecular_weight is None:
            molecular_weight = molecular_weight_from_formula(name)
            if molecular_weight is None:
                raise ValueError(f"Cannot auto-calculate molecular weight for species '{name}'. "
                                 f"Please provide 'molecular_weight' explicitly or use standard chemical notation.")
        molecular_weight = float(molecular_weight)
        if molecular_weight <= 0.0:
            raise ValueError(f"Molecular weight of species '{name}' must be positive, got {molecular_weight}")
        if charge is None:
            charge = charge_from_name(name)

        if self._frozen:
            logger.warning(f"Adding species '{name}' to a frozen directory; it must be frozen again before use.")
            self._frozen = False

        self._index[name] = len(self._names)
        self._names.append(name)
        self._weights.append(molecular_weight)
        self._charges.append(float(charge))
        return self._index[name]

    def freeze(self):
        """Fix the species list and publish the molecular weight table."""
        weights = np.array(self._weights, dtype=float)
        weights.setflags(write=False)
        self._weights_array = weights
        self._frozen = True
        logger.debug(f"Species directory frozen with {len(self._names)} species")

    def ready(self):
        return self._frozen

    @property
    def n_species(self):
        return len(self._names)

    @property
    def species_names(self):
        return list(self._names)

    def species_name(self, k):
        return self._names[k]

    def species_index(self, name):
        """Index of species `name`, or -1 if it is not defined."""
        return self._index.get(name, -1)

    def __contains__(self, name):
        return name in self._index

    def molecular_weights(self):
        """Read-only view of the molecular weight table.

        The returned array is owned by the directory and is replaced on the
        next freeze; do not keep it across re-freezes.
        """
        if not self._frozen:
            weights = np.array(self._weights, dtype=float)
            weights.setflags(write=False)
            return weights
        return self._weights_array

    def molecular_weight(self, k):
        return self._weights[k]

    def charge(self, k):
        return self._charges[k]

    def charges(self):
        return np.array(self._charges, dtype=float)


def load_species(species_path, directory=None, skip_existing=False):
    """
    Load a YAML species file into a SpeciesDirectory.

    Entries may be plain names or mappings with 'name' and optional
    'molecular_weight' (kg/kmol, alias 'mass_amu') and 'charge'.

    Args:
        species_path: Path to species.yml
        directory: Existing directory to extend; a new one is created if None

    Returns:
        SpeciesDirectory: the directory (not frozen)
    """
    if not os.path.isfile(species_path):
        raise FileNotFoundError(f"Species file not found: {species_path}")

    with open(species_path, 'r') as f:
        data = yaml.safe_load(f) or {}

    if directory is None:
        directory = SpeciesDirectory()

    entries = data.get('species') if isinstance(data, dict) else data
    if not entries:
        raise ValueError(f"No species defined in {species_path}")

    add_species_entries(directory, entries, skip_existing=skip_existing)
    logger.info(f"Loaded {len(entries)} species from {species_path}")
    return directory


def add_species_entries(directory, entries, skip_existing=False):
    """Add a list of species entries (names or mappings) to `directory`.

    With skip_existing=True, names already in the directory are ignored
    instead of raising, so several species files can be merged.
    """
    for sp in entries:
        if isinstance(sp, str):
            sp = {'name': sp}
        if 'name' not in sp:
            raise ValueError(f"Species entry without a name: {sp}")
        if skip_existing and sp['name'] in directory:
            logger.debug(f"Species '{sp['name']}' already defined, skipping")
            continue
        weight = sp.get('molecular_weight', sp.get('mass_amu'))
        directory.add_species(sp['name'], molecular_weight=weight, charge=sp.get('charge'))
    return directory

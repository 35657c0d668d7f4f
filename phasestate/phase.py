# phasestate/phase.py
"""
Phase: the thermodynamic state of a multi-species phase.

A Phase combines a SpeciesDirectory (names, molecular weights, charges) with a
State (temperature, density, mass fractions) and adds:
  - save/restore of the state to a flat buffer [T, rho, Y_0 .. Y_{N-1}]
  - composition setters and getters keyed by species name or composition string
  - combined setters for temperature, density and composition
  - molecular weight and charge density accessors

Typical use:
    phase = Phase()
    for name in ('O2', 'N2', 'Ar'):
        phase.add_species(name)
    phase.freeze_species()
    phase.set_state_TRX(300.0, 1.2, "O2:0.21, N2:0.78, Ar:0.01")
    buf = phase.save_state()
"""

import logging
from collections.abc import Mapping

import numpy as np

from .composition import CompositionMap, parse_composition_string
from .exceptions import SizeMismatchError
from .species_directory import SpeciesDirectory
from .state import State

logger = logging.getLogger(__name__)

ELECTRON_CHARGE = 1.602176634e-19  # C
AVOGADRO = 6.02214076e26  # 1/kmol
FARADAY = ELECTRON_CHARGE * AVOGADRO  # C/kmol

DEFAULT_TEMPERATURE = 300.0  # K
DEFAULT_DENSITY = 0.001  # kg/m^3

# Value given to every species before a composition string is parsed, so
# that species the string does not mention end up with zero.
UNSET_SENTINEL = -1.0


class Phase:
    def __init__(self, species=None, name=''):
        """Create a phase.

        Args:
            species: SpeciesDirectory to use; an empty one is created if None
            name: Optional label used in reports and log messages
        """
        self.name = name
        self.species = species if species is not None else SpeciesDirectory()
        self.state = State()
        # species count fixed by the last freeze_species()
        self._kk = 0

    def __repr__(self):
        return f"<Phase '{self.name}' n_species={self._kk} T={self.temperature:g} rho={self.density:g}>"

    # --- lifecycle ---

    def add_species(self, name, molecular_weight=None, charge=None):
        """Add a species to the directory. Call freeze_species() afterwards."""
        return self.species.add_species(name, molecular_weight=molecular_weight, charge=charge)

    def freeze_species(self):
        """
        Finish adding species and put the phase in its default state:
        T = 300 K, density = 0.001 kg/m^3, pure species 0.

        Calling this again after adding species re-sizes the phase and resets
        the state to these defaults; the previous composition is discarded.
        """
        # size the state first so a rejected table leaves the phase as it was
        self.state.init(self.species.molecular_weights())
        self.species.freeze()
        kk = self.species.n_species
        self._kk = kk

        if kk == 0:
            logger.warning(f"Phase '{self.name}' frozen without species")
            self.set_state_TR(DEFAULT_TEMPERATURE, DEFAULT_DENSITY)
            return

        y = np.zeros(kk)
        y[0] = 1.0
        self.set_state_TRY(DEFAULT_TEMPERATURE, DEFAULT_DENSITY, y)
        logger.debug(f"Phase '{self.name}' frozen with {kk} species")

    def ready(self):
        return self._kk > 0 and self.species.ready() and self.state.ready()

    # --- species information ---

    @property
    def n_species(self):
        return self._kk

    @property
    def species_names(self):
        return [self.species.species_name(k) for k in range(self._kk)]

    def species_name(self, k):
        return self.species.species_name(k)

    def species_index(self, name):
        """Index of species `name`, or -1 if it is not defined."""
        return self.species.species_index(name)

    def charge(self, k):
        return self.species.charge(k)

    def molecular_weight(self, k):
        return self.species.molecular_weight(k)

    def molecular_weights(self):
        """Read-only view of the molecular weight table (kg/kmol).

        The array belongs to the species directory. It must not be modified
        and is only valid until the species are frozen again. Species added
        since the last freeze are not included.
        """
        return self.species.molecular_weights()[:self._kk]

    def get_molecular_weights(self, out=None):
        """
        Copy the molecular weights (kg/kmol).

        Args:
            out: Target buffer. None returns a new array. A list shorter than
                N is grown to N entries. A numpy array cannot be grown and
                must already hold N entries.

        Returns:
            The filled buffer.

        Raises:
            SizeMismatchError: `out` is a numpy array with fewer than N entries
        """
        mw = self.molecular_weights()
        kk = len(mw)
        if out is None:
            return mw.copy()
        if isinstance(out, list):
            if len(out) < kk:
                out.extend([0.0] * (kk - len(out)))
            out[:kk] = mw.tolist()
            return out
        if len(out) < kk:
            raise SizeMismatchError(len(out), kk, "Phase.get_molecular_weights")
        out[:kk] = mw
        return out

    # --- primitive state access ---

    @property
    def temperature(self):
        return self.state.temperature

    def set_temperature(self, t):
        self.state.set_temperature(t)

    @property
    def density(self):
        return self.state.density

    def set_density(self, rho):
        self.state.set_density(rho)

    @property
    def molar_density(self):
        return self.state.molar_density

    def set_molar_density(self, molar_density):
        self.state.set_molar_density(molar_density)

    @property
    def mean_molecular_weight(self):
        return self.state.mean_molecular_weight

    def mole_fractions(self):
        return self.state.mole_fractions()

    def mass_fractions(self):
        return self.state.mass_fractions()

    def concentrations(self):
        return self.state.concentrations()

    def set_mole_fractions(self, x):
        self.state.set_mole_fractions(x)

    def set_mole_fractions_no_norm(self, x):
        self.state.set_mole_fractions_no_norm(x)

    def set_mass_fractions(self, y):
        self.state.set_mass_fractions(y)

    def set_mass_fractions_no_norm(self, y):
        self.state.set_mass_fractions_no_norm(y)

    def set_concentrations(self, conc):
        self.state.set_concentrations(conc)

    def mole_fraction(self, k):
        """Mole fraction of species `k` (index or name).

        An unknown name returns 0.0 rather than raising.
        """
        if isinstance(k, str):
            k = self.species_index(k)
            if k < 0:
                return 0.0
        return self.state.mole_fraction(k)

    def mass_fraction(self, k):
        """Mass fraction of species `k` (index or name).

        An unknown name returns 0.0 rather than raising.
        """
        if isinstance(k, str):
            k = self.species_index(k)
            if k < 0:
                return 0.0
        return self.state.mass_fraction(k)

    def charge_density(self):
        """Charge per unit amount of mixture, F * sum(z_k X_k), in C/kmol."""
        charges = self.species.charges()[:self._kk]
        return FARADAY * float(np.dot(charges, self.state.mole_fractions()))

    # --- save / restore ---

    def save_state(self, out=None):
        """
        Write the state to a flat buffer [T, rho, Y_0, ..., Y_{N-1}].

        Args:
            out: Target buffer. None returns a new numpy array. A list is
                resized in place to exactly N+2 entries. A numpy array must
                already hold at least N+2 entries.

        Returns:
            The filled buffer.
        """
        required = self._kk + 2
        y = self.state.mass_fractions()
        if out is None:
            out = np.empty(required)
        elif isinstance(out, list):
            out[:] = [self.temperature, self.density] + y.tolist()
            return out
        elif len(out) < required:
            raise SizeMismatchError(len(out), required, "Phase.save_state")
        out[0] = self.temperature
        out[1] = self.density
        out[2:required] = y
        return out

    def restore_state(self, state, length=None):
        """
        Restore the state from a buffer written by save_state().

        Mass fractions are taken as they are, without normalizing. They are
        set before temperature and density so that the restored temperature
        and density are the ones in the buffer.

        Args:
            state: Buffer [T, rho, Y_0, ..., Y_{N-1}, ...]
            length: Number of valid entries in `state`; defaults to len(state)

        Raises:
            SizeMismatchError: length < N+2. The phase is left unchanged.
        """
        required = self._kk + 2
        if length is None:
            length = len(state)
        if length < required:
            raise SizeMismatchError(length, required, "Phase.restore_state")
        if len(state) < required:
            raise SizeMismatchError(len(state), required, "Phase.restore_state")

        buf = np.asarray(state, dtype=float)
        self.state.set_mass_fractions_no_norm(buf[2:required])
        self.state.set_temperature(buf[0])
        self.state.set_density(buf[1])

    # --- composition by name ---

    def _dense_from_map(self, comp_map):
        if not isinstance(comp_map, CompositionMap):
            comp_map = CompositionMap(comp_map)
        unknown = [name for name in comp_map if self.species_index(name) < 0]
        if unknown:
            logger.warning(f"Ignoring composition entries for unknown species: {unknown}")
        requested = comp_map.positive()
        values = np.zeros(self._kk)
        for k in range(self._kk):
            values[k] = requested.value(self.species.species_name(k))
        return values

    def _map_from_string(self, text):
        comp_map = CompositionMap.seeded(self.species_names, UNSET_SENTINEL)
        return parse_composition_string(text, comp_map)

    def set_mole_fractions_by_name(self, composition):
        """
        Set the mole fractions from a composition map or string.

        Only strictly positive values are used; species that are missing or
        have a value <= 0 get zero. The result is normalized.

        Args:
            composition: Mapping of name -> value, or a string like "O2:0.21, N2:0.79"

        Raises:
            SpeciesNotFoundError: a composition string names an unknown species
        """
        if isinstance(composition, str):
            composition = self._map_from_string(composition)
        self.set_mole_fractions(self._dense_from_map(composition))

    def set_mass_fractions_by_name(self, composition):
        """Set the mass fractions from a composition map or string.

        Same rules as set_mole_fractions_by_name().
        """
        if isinstance(composition, str):
            composition = self._map_from_string(composition)
        self.set_mass_fractions(self._dense_from_map(composition))

    def get_mole_fractions_by_name(self, out=None):
        """Mole fractions of every species, zeros included, as a CompositionMap.

        If `out` is given it is cleared and filled.
        """
        if out is None:
            out = CompositionMap()
        out.clear()
        for k in range(self._kk):
            out[self.species.species_name(k)] = self.state.mole_fraction(k)
        return out

    def get_mass_fractions_by_name(self, out=None):
        """Mass fractions of every species, zeros included, as a CompositionMap."""
        if out is None:
            out = CompositionMap()
        out.clear()
        for k in range(self._kk):
            out[self.species.species_name(k)] = self.state.mass_fraction(k)
        return out

    # --- combined setters: composition, then temperature, then density ---

    def _apply_mole(self, x):
        if isinstance(x, (str, Mapping)):
            self.set_mole_fractions_by_name(x)
        else:
            self.set_mole_fractions(x)

    def _apply_mass(self, y):
        if isinstance(y, (str, Mapping)):
            self.set_mass_fractions_by_name(y)
        else:
            self.set_mass_fractions(y)

    def set_state_TRX(self, t, rho, x):
        """Set temperature (K), density (kg/m^3) and mole fractions (array, map or string)."""
        self._apply_mole(x)
        self.set_temperature(t)
        self.set_density(rho)

    def set_state_TRY(self, t, rho, y):
        """Set temperature (K), density (kg/m^3) and mass fractions (array, map or string)."""
        self._apply_mass(y)
        self.set_temperature(t)
        self.set_density(rho)

    def set_state_TR(self, t, rho):
        self.set_temperature(t)
        self.set_density(rho)

    def set_state_TX(self, t, x):
        self._apply_mole(x)
        self.set_temperature(t)

    def set_state_TY(self, t, y):
        self._apply_mass(y)
        self.set_temperature(t)

    def set_state_RX(self, rho, x):
        self._apply_mole(x)
        self.set_density(rho)

    def set_state_RY(self, rho, y):
        self._apply_mass(y)
        self.set_density(rho)

    # --- reporting ---

    def report(self, threshold=0.0):
        """Multi-line summary of the state, one row per species above `threshold`."""
        lines = [
            f"Phase: {self.name or '(unnamed)'}",
            f"  temperature      {self.temperature:12.6g} K",
            f"  density          {self.density:12.6g} kg/m^3",
            f"  mean mol. weight {self.mean_molecular_weight:12.6g} kg/kmol",
            f"  charge density   {self.charge_density():12.6g} C/kmol",
            "",
            f"  {'species':<10} {'X':>12} {'Y':>12}",
            "  " + "-" * 36,
        ]
        x = self.mole_fractions()
        y = self.mass_fractions()
        for k, name in enumerate(self.species_names):
            if x[k] > threshold or y[k] > threshold:
                lines.append(f"  {name:<10} {x[k]:12.6g} {y[k]:12.6g}")
        return "\n".join(lines)

# phasestate/state.py
"""
Numeric state of a phase: temperature, mass density and composition.

Composition is stored once, as mass fractions. Mole fractions and molar
concentrations are computed from the mass fractions and the molecular
weights whenever they are asked for.
"""

import numpy as np


class State:
    """Temperature (K), density (kg/m^3) and mass fractions of N species."""

    def __init__(self):
        self._kk = 0
        self._temperature = 0.0
        self._density = 0.0
        self._molecular_weights = np.zeros(0)
        self._y = np.zeros(0)
        # y_k / W_k, kept in step with _y
        self._ym = np.zeros(0)
        self._mmw = 0.0

    def init(self, molecular_weights):
        """Size the state for the given molecular weight table (kg/kmol).

        All fractions are reset to zero except species 0, which gets 1.
        """
        mw = np.array(molecular_weights, dtype=float)
        if np.any(mw <= 0.0):
            bad = [k for k, w in enumerate(mw) if w <= 0.0]
            raise ValueError(f"Molecular weights must be positive (species indices {bad})")
        self._kk = len(mw)
        self._molecular_weights = mw
        y = np.zeros(self._kk)
        if self._kk > 0:
            y[0] = 1.0
            self.set_mass_fractions_no_norm(y)
        else:
            self._y = y
            self._ym = np.zeros(0)
            self._mmw = 0.0

    def ready(self):
        return self._kk > 0

    @property
    def n_species(self):
        return self._kk

    # --- temperature and density ---

    @property
    def temperature(self):
        return self._temperature

    def set_temperature(self, t):
        self._temperature = float(t)

    @property
    def density(self):
        return self._density

    def set_density(self, rho):
        self._density = float(rho)

    @property
    def mean_molecular_weight(self):
        return self._mmw

    @property
    def molar_density(self):
        """kmol/m^3"""
        return self._density / self._mmw if self._mmw > 0.0 else 0.0

    def set_molar_density(self, molar_density):
        self._density = float(molar_density) * self._mmw

    # --- composition setters ---

    def _check_length(self, values, what):
        arr = np.asarray(values, dtype=float)
        if arr.shape != (self._kk,):
            raise ValueError(f"{what} must have {self._kk} entries, got shape {arr.shape}")
        return arr

    def _update_from_mass_fractions(self, y):
        self._y = y
        self._ym = y / self._molecular_weights
        total = self._ym.sum()
        self._mmw = 1.0 / total if total > 0.0 else 0.0

    def set_mass_fractions(self, y):
        """Set mass fractions, normalized to sum to one."""
        y = self._check_length(y, "Mass fractions")
        total = y.sum()
        if total <= 0.0:
            raise ValueError("Mass fractions sum to zero; at least one species must be present")
        self._update_from_mass_fractions(y / total)

    def set_mass_fractions_no_norm(self, y):
        """Set mass fractions exactly as given, without normalizing."""
        y = self._check_length(y, "Mass fractions")
        self._update_from_mass_fractions(y.copy())

    def set_mole_fractions(self, x):
        """Set mole fractions, normalized to sum to one."""
        x = self._check_length(x, "Mole fractions")
        total = x.sum()
        if total <= 0.0:
            raise ValueError("Mole fractions sum to zero; at least one species must be present")
        x = x / total
        mass = x * self._molecular_weights
        self._mmw = mass.sum()
        self._y = mass / self._mmw
        self._ym = x / self._mmw

    def set_mole_fractions_no_norm(self, x):
        """Set mole fractions exactly as given; mass fractions follow from them."""
        x = self._check_length(x, "Mole fractions")
        mass = x * self._molecular_weights
        self._mmw = mass.sum()
        if self._mmw > 0.0:
            self._ym = x / self._mmw
            self._y = self._ym * self._molecular_weights
        else:
            self._ym = np.zeros(self._kk)
            self._y = np.zeros(self._kk)

    def set_concentrations(self, conc):
        """Set molar concentrations (kmol/m^3); this also sets the density."""
        c = self._check_length(conc, "Concentrations")
        mass = c * self._molecular_weights
        rho = mass.sum()
        if rho <= 0.0:
            raise ValueError("Concentrations give a zero density")
        self._density = rho
        self._y = mass / rho
        self._ym = c / rho
        self._mmw = rho / c.sum()

    # --- composition getters ---

    def mass_fractions(self):
        return self._y.copy()

    def mass_fraction(self, k):
        return float(self._y[k])

    def mole_fractions(self):
        return self._ym * self._mmw

    def mole_fraction(self, k):
        return float(self._ym[k] * self._mmw)

    def concentrations(self):
        return self._ym * self._density

    def concentration(self, k):
        return float(self._ym[k] * self._density)

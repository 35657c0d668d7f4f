# phasestate/species_properties.py

import re
import logging

logger = logging.getLogger(__name__)

# Atomic masses in kg/kmol (numerically equal to amu, from NIST)
ATOMIC_MASSES = {
    'H': 1.008,
    'He': 4.0026,
    'C': 12.011,
    'N': 14.007,
    'O': 15.999,
    'F': 18.998,
    'Ne': 20.180,
    'Na': 22.990,
    'Si': 28.085,
    'S': 32.06,
    'Cl': 35.45,
    'Ar': 39.948,
    'K': 39.098,
    'Kr': 83.798,
    'Br': 79.904,
    'I': 126.90,
    'Xe': 131.29,
}

ELECTRON_MASS = 5.48579909e-4


def _strip_decorations(species_name):
    # N2[v1] -> N2, Ar_4s -> Ar, Ar_4s+ -> Ar+
    base = re.sub(r'\[.*?\]', '', species_name)
    base = re.sub(r'_\w+(?=[+-]*$)', '', base)
    return base


def _split_charge(base):
    """Return (formula, charge) for names like 'O2+', 'O-', 'O2++'.

    One sign per elementary charge; a digit before the sign is an atom count.
    """
    match = re.match(r'^(.+?)([+-]+)$', base)
    if not match:
        return base, 0
    formula, signs = match.groups()
    return formula, signs.count('+') - signs.count('-')


def charge_from_name(species_name):
    """
    Infer the ionic charge (in units of the elementary charge) from a species name.
    Examples:
        'e' -> -1
        'O2+' -> 1
        'O-' -> -1
        'O2++' -> 2
        'Ar' -> 0
    """
    if species_name in ('e', 'E', 'e-'):
        return -1
    _, charge = _split_charge(_strip_decorations(species_name))
    return charge


def molecular_weight_from_formula(species_name):
    """
    Calculate the molecular weight (kg/kmol) from a species name.
    Examples:
        'O2' -> 2*15.999 = 31.998
        'O2+' -> 31.998 (electron mass neglected)
        'Ar_4s' -> 39.948 (excited state notation ignored)
        'e' -> 5.48579909e-4

    Returns:
        float: molecular weight, or None if the name cannot be parsed
    """
    if species_name in ('e', 'E', 'e-'):
        return ELECTRON_MASS

    formula, _ = _split_charge(_strip_decorations(species_name))

    matches = re.findall(r'([A-Z][a-z]?)(\d*)', formula)
    if not matches or ''.join(a + c for a, c in matches) != formula:
        return None

    total_mass = 0.0
    for element, count_str in matches:
        if element not in ATOMIC_MASSES:
            logger.warning(f"Atomic mass for element '{element}' not found (formula: {species_name}).")
            return None
        count = int(count_str) if count_str else 1
        total_mass += ATOMIC_MASSES[element] * count

    return total_mass

# phasestate/composition.py
"""
Composition maps and the composition string parser.

A composition string is a sequence of ``name:value`` pairs separated by
commas, semicolons, slashes or whitespace, e.g. ``"O2:0.21, N2:0.79"``.
"""

import re

from .exceptions import CompositionParseError, SpeciesNotFoundError

_PAIR_SEPARATORS = re.compile(r'[,;/\s]+')
_COLON = re.compile(r'\s*:\s*')


class CompositionMap(dict):
    """Mapping of species name -> requested fraction.

    Missing names read as zero through `value`, which is how the phase
    setters consume the map. Ordinary item access still raises KeyError.
    """

    def value(self, name):
        """Requested value for `name`, 0.0 if the name is not present."""
        return self.get(name, 0.0)

    def positive(self):
        """Only the entries with a strictly positive value."""
        return CompositionMap((k, v) for k, v in self.items() if v > 0.0)

    @classmethod
    def seeded(cls, names, sentinel=-1.0):
        """Map with every name present and set to a non-positive sentinel."""
        return cls((name, sentinel) for name in names)


def parse_composition_string(text, comp_map=None, names=None):
    """
    Parse a composition string into a composition map.

    Args:
        text: Composition string, e.g. "O2:0.21, N2:0.79"
        comp_map: Map to update in place. A new CompositionMap is created if None.
        names: Accepted species names. Defaults to the keys already in
            `comp_map`; if that is empty too, any name is accepted.

    Returns:
        CompositionMap: the updated map

    Raises:
        SpeciesNotFoundError: a name in the text is not an accepted species
        CompositionParseError: a pair is malformed or its value is not a number
    """
    if comp_map is None:
        comp_map = CompositionMap()
    if names is None:
        names = set(comp_map.keys())
    else:
        names = set(names)

    normalized = _COLON.sub(':', text.strip())
    for token in _PAIR_SEPARATORS.split(normalized):
        if not token:
            continue
        if token.count(':') != 1:
            raise CompositionParseError(f"Malformed composition entry '{token}' in '{text}'; expected name:value")
        name, value_str = token.split(':')
        if not name or not value_str:
            raise CompositionParseError(f"Malformed composition entry '{token}' in '{text}'; expected name:value")
        if names and name not in names:
            raise SpeciesNotFoundError(name)
        try:
            comp_map[name] = float(value_str)
        except ValueError as e:
            raise CompositionParseError(f"Invalid value '{value_str}' for species '{name}' in '{text}'") from e

    return comp_map


def format_composition(comp_map, threshold=0.0, fmt='.6g'):
    """Render a composition map as a 'name:value, ...' string.

    Entries with value <= threshold are left out.
    """
    return ', '.join(f"{name}:{value:{fmt}}" for name, value in comp_map.items() if value > threshold)

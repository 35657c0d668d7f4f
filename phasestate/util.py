import logging

from .config_parser import load_config
from .phase import Phase
from .species_directory import SpeciesDirectory, add_species_entries, load_species

logger = logging.getLogger(__name__)


def build_species_directory(config):
    """Build an (unfrozen) SpeciesDirectory from the species section of a loaded config."""
    directory = SpeciesDirectory()
    for species_path in config.get('species_files', []):
        load_species(species_path, directory, skip_existing=True)
    inline = config['species'].get('list', [])
    if inline:
        add_species_entries(directory, inline, skip_existing=True)
    if directory.n_species == 0:
        raise ValueError("No species defined in config")
    return directory


def apply_initial_state(phase, initial_state):
    """Apply the 'initial_state' section of a config to a frozen phase.

    Missing entries keep the phase defaults.
    """
    t = initial_state.get('temperature_K', phase.temperature)
    rho = initial_state.get('density_kg_m3', phase.density)
    if 'mole_fractions' in initial_state:
        phase.set_state_TRX(t, rho, initial_state['mole_fractions'])
    elif 'mass_fractions' in initial_state:
        phase.set_state_TRY(t, rho, initial_state['mass_fractions'])
    else:
        phase.set_state_TR(t, rho)


def build_phase(config_path, **load_kwargs):
    """
    Loads config and species files and returns a frozen Phase in the
    configured initial state.

    Args:
        config_path: Path to config.yml
        **load_kwargs: Passed on to load_config (use_jinja2, jinja_vars, validate)

    Returns:
        Phase
    """
    return phase_from_config(load_config(config_path, **load_kwargs))


def phase_from_config(config):
    """Frozen Phase in the initial state described by an already loaded config."""
    directory = build_species_directory(config)
    phase = Phase(directory, name=config.get('name', ''))
    phase.freeze_species()
    logger.info(f"Phase '{phase.name}' built with species {phase.species_names}")

    apply_initial_state(phase, config.get('initial_state', {}))
    return phase

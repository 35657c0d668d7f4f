"""
config_parser.py
Loader and validator for phasestate case config.yml files.
Supports optional Jinja2 templating for macros/parameter sweeps.
"""
import os
import json
import logging

import jsonschema
import yaml
from jinja2 import Environment, FileSystemLoader

logger = logging.getLogger(__name__)

_NUMERIC_STATE_KEYS = ('temperature_K', 'density_kg_m3')


def load_schema():
    """Load the config schema from config_schema.json"""
    schema_path = os.path.join(os.path.dirname(__file__), 'config_schema.json')
    with open(schema_path, 'r') as f:
        return json.load(f)


def validate_config_schema(config):
    """
    Validate config against the JSON schema.
    Raises jsonschema.ValidationError if config is invalid.
    """
    try:
        jsonschema.validate(instance=config, schema=load_schema())
    except jsonschema.ValidationError as e:
        path = ' -> '.join(str(p) for p in e.path)
        logger.error(f"Config validation failed: {e.message} (path: {path or '<root>'})")
        raise
    logger.debug("Config validation passed")


def _to_float(value):
    # YAML 1.1 reads '1e-3' (no decimal point) as a string
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return value
    return value


def _coerce_numbers(config):
    state = config.get('initial_state')
    if not isinstance(state, dict):
        return
    for key in _NUMERIC_STATE_KEYS:
        if key in state:
            state[key] = _to_float(state[key])
    for key in ('mole_fractions', 'mass_fractions'):
        fractions = state.get(key)
        if isinstance(fractions, dict):
            for species, value in fractions.items():
                fractions[species] = _to_float(value)


def load_config(config_path, use_jinja2=False, jinja_vars=None, validate=True):
    """
    Loads and validates a phasestate config.yml file.
    If use_jinja2 is True, renders with Jinja2 before parsing YAML.

    Species files are resolved relative to the config file and returned
    under the 'species_files' key.

    Args:
        config_path (str): Path to config.yml
        use_jinja2 (bool): Whether to use Jinja2 templating
        jinja_vars (dict): Variables for Jinja2 rendering
        validate (bool): Validate against config_schema.json
    Returns:
        dict: Parsed config dictionary
    """
    if not os.path.isfile(config_path):
        raise FileNotFoundError(f"Config file not found: {config_path}")

    if use_jinja2:
        env = Environment(loader=FileSystemLoader(os.path.dirname(os.path.abspath(config_path))))
        template = env.get_template(os.path.basename(config_path))
        rendered = template.render(jinja_vars or {})
        config = yaml.safe_load(rendered)
    else:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f)

    if not isinstance(config, dict):
        raise ValueError(f"Config file {config_path} does not contain a mapping")

    _coerce_numbers(config)

    if validate:
        validate_config_schema(config)

    # --- Species file(s) flexible loading ---
    # Accepts either:
    #   species:
    #     file: "./species.yml"
    #   species:
    #     files:
    #       - "./species1.yml"
    #       - "./species2.yml"
    #   species:
    #     list: [O2, N2, {name: Ar, molecular_weight: 39.948}]
    config_dir = os.path.dirname(config_path)
    species_section = config.get('species')
    if not isinstance(species_section, dict):
        raise ValueError("'species' section must be a dict with 'file', 'files' or 'list'.")

    if 'files' in species_section:
        if not isinstance(species_section['files'], list):
            raise ValueError("'species.files' must be a list of file paths.")
        species_files = [os.path.join(config_dir, f) for f in species_section['files']]
    elif 'file' in species_section:
        species_files = [os.path.join(config_dir, species_section['file'])]
    elif 'list' in species_section:
        species_files = []
    else:
        raise ValueError("'species' section must have 'file', 'files' or 'list'.")

    config['species_files'] = species_files

    checkpoint = config.get('checkpoint', {})
    if 'file' in checkpoint:
        checkpoint['absolute_path'] = os.path.join(config_dir, checkpoint['file'])

    logger.info(f"Loaded config {config_path}")
    return config

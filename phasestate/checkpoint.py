# phasestate/checkpoint.py
"""
Checkpoint files for phase states.

A checkpoint is a .npz archive holding the flat state buffer
[T, rho, Y_0 .. Y_{N-1}] under 'state' and the species names, in buffer
order, under 'species_names'.
"""

import logging
from pathlib import Path

import numpy as np

logger = logging.getLogger(__name__)


def save_checkpoint(phase, path):
    """Write the state of `phase` to a .npz checkpoint and return its path."""
    path = Path(path)
    if path.suffix != '.npz':
        path = path.with_suffix('.npz')
    path.parent.mkdir(parents=True, exist_ok=True)
    np.savez(path, state=phase.save_state(), species_names=np.array(phase.species_names, dtype=str))
    logger.info(f"Checkpoint saved: {path} ({phase.n_species} species)")
    return path


def read_checkpoint(path):
    """Return (state_buffer, species_names) stored in a checkpoint file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Checkpoint file not found: {path}")
    with np.load(path) as data:
        state = np.array(data['state'], dtype=float)
        names = [str(n) for n in data['species_names']]
    return state, names


def load_checkpoint(phase, path):
    """
    Restore `phase` from a checkpoint file.

    The species stored in the checkpoint must match the phase species, in
    the same order.

    Raises:
        FileNotFoundError: the checkpoint does not exist
        ValueError: the checkpoint was written for different species
        SizeMismatchError: the stored buffer is too short
    """
    state, names = read_checkpoint(path)
    if names != phase.species_names:
        raise ValueError(
            f"Checkpoint {path} was written for species {names}, "
            f"phase has {phase.species_names}"
        )
    phase.restore_state(state)
    logger.info(f"Checkpoint loaded: {path}")
    return phase

"""Data generation utilities for hmmdecode."""

from __future__ import annotations

import numpy as np

from .model import HMM

CASINO_STATES = ("F", "L")
CASINO_ALPHABET = ("1", "2", "3", "4", "5", "6")


def casino_hmm() -> HMM:
    """Build the occasionally dishonest casino HMM.

    A croupier switches between a fair die (F) and a loaded die (L) that
    rolls a six half of the time (Durbin et al., "Biological Sequence
    Analysis", pp. 54-57).

    Returns
    -------
    model : HMM
        Two states "F" and "L" over the symbols "1" to "6"
    """
    pi = np.array([0.5, 0.5])
    T = np.array([[0.95, 0.05], [0.1, 0.9]])
    E = np.array(
        [
            [1 / 6, 1 / 6, 1 / 6, 1 / 6, 1 / 6, 1 / 6],
            [0.1, 0.1, 0.1, 0.1, 0.1, 0.5],
        ]
    )
    return HMM(pi, T, E, states=CASINO_STATES, alphabet=CASINO_ALPHABET)


def datagen_casino(length: int = 300, seed: int = 42) -> tuple[str, str]:
    """Generate a sequence of die rolls from the casino HMM.

    Parameters
    ----------
    length : int, default=300
        Number of rolls
    seed : int, default=42
        Random seed for reproducibility

    Returns
    -------
    rolls : str
        The observed rolls, e.g. "1636..."
    dice : str
        The die used for each roll, e.g. "FFLL..."
    """
    rolls, dice = casino_hmm().sample(length, seed=seed)
    return "".join(rolls), "".join(dice)

"""Utility functions for hmmdecode."""

from __future__ import annotations

import numba as nb
import numpy as np

from .errors import EmptySequenceError, InvalidModelError


def validate_seq(x: np.ndarray, n_emissions: int | None = None) -> None:
    """Validate an encoded observation sequence x"""
    if len(x) == 0:
        raise EmptySequenceError()
    assert len(x.shape) == 1, "Flatten your array first"
    assert x.dtype == np.int64
    assert 0 <= x.min(), "Number of emissions inconsistent with observation sequence"
    if n_emissions is not None:
        assert x.max() < n_emissions, "Number of emissions inconsistent with observation sequence"
    return None


def validate_model(
    pi: np.ndarray,
    T: np.ndarray,
    E: np.ndarray,
    check_rows: bool = True,
    atol: float = 1e-6,
) -> None:
    """Check the shapes and values of the model parameters.

    Parameters
    ----------
    pi : np.ndarray
        Initial distribution, shape (n_states,)
    T : np.ndarray
        Transition matrix, shape (n_states, n_states)
    E : np.ndarray
        Emission matrix, shape (n_states, n_emissions)
    check_rows : bool, default=True
        If True, every row of pi, T and E must sum to one within atol
    atol : float, default=1e-6
        Absolute tolerance of the row-sum check

    Raises
    ------
    InvalidModelError
        If any of the checks fails
    """
    if pi.ndim != 1 or pi.shape[0] == 0:
        raise InvalidModelError(f"Initial distribution must be a non-empty vector, got shape {pi.shape}")
    n_states = pi.shape[0]
    if T.shape != (n_states, n_states):
        raise InvalidModelError(
            f"Transition matrix must have shape ({n_states}, {n_states}), got {T.shape}"
        )
    if E.ndim != 2 or E.shape[0] != n_states or E.shape[1] == 0:
        raise InvalidModelError(
            f"Emission matrix must have shape ({n_states}, n_emissions), got {E.shape}"
        )
    for name, arr in (("initial distribution", pi), ("transition matrix", T), ("emission matrix", E)):
        if not np.all(np.isfinite(arr)):
            raise InvalidModelError(f"The {name} contains non-finite values")
        if np.any(arr < 0):
            raise InvalidModelError(f"The {name} contains negative probabilities")
    if not check_rows:
        return None
    if not np.isclose(pi.sum(), 1.0, rtol=0.0, atol=atol):
        raise InvalidModelError(f"Initial distribution sums to {pi.sum()}, not 1")
    for name, arr in (("transition matrix", T), ("emission matrix", E)):
        sums = arr.sum(1)
        bad = np.flatnonzero(~np.isclose(sums, 1.0, rtol=0.0, atol=atol))
        if bad.size:
            raise InvalidModelError(f"Row {bad[0]} of the {name} sums to {sums[bad[0]]}, not 1")
    return None


def to_log_space(p: np.ndarray) -> np.ndarray:
    """Return the element-wise natural log of p as a read-only array.

    Zero probabilities map to -inf without a warning.
    """
    with np.errstate(divide="ignore"):
        log_p = np.log(p)
    log_p.setflags(write=False)
    return log_p


@nb.njit
def first_argmax(x):
    """Argmax that returns the first index holding the maximum value.

    Ties resolve to the lowest index, and a vector that is -inf everywhere
    gives index 0.
    """
    m = x[0]
    chosen = 0
    for i in range(1, x.size):
        if x[i] > m:
            m = x[i]
            chosen = i
    return chosen

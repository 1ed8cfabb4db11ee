"""Log-space Viterbi (max-product) kernels."""

from __future__ import annotations

import numba as nb
import numpy as np

from .utils import first_argmax


@nb.njit
def forward_mp(log_T, log_E, log_pi, x):
    """Max-product forward pass in log space.

    Fills the Viterbi table, where V[t, s] is the log-probability of the best
    state path that ends in state s after emitting x[0], ..., x[t].

    Parameters
    ----------
    log_T : np.ndarray
        Log transition matrix, shape (n_states, n_states), where
        log_T[i, j] = log P(next state j | current state i)
    log_E : np.ndarray
        Log emission matrix, shape (n_states, n_emissions)
    log_pi : np.ndarray
        Log initial distribution, shape (n_states,)
    x : np.ndarray
        Encoded observation sequence, shape (T,) of integers

    Returns
    -------
    log_lik : float
        Natural log-probability of the best path
    V : np.ndarray
        Viterbi table, shape (T, n_states)
    back : np.ndarray
        Backpointers, shape (T, n_states); back[0] is -1
    """
    n_states = log_pi.shape[0]
    timesteps = x.shape[0]
    V = np.empty((timesteps, n_states), dtype=np.float64)
    back = np.empty((timesteps, n_states), dtype=np.int64)

    # initialization
    j = x[0]
    for s in range(n_states):
        V[0, s] = log_pi[s] + log_E[s, j]
        back[0, s] = -1

    # recurrence
    for t in range(1, timesteps):
        j = x[t]
        for s in range(n_states):
            scores = V[t - 1] + log_T[:, s]
            k = first_argmax(scores)
            V[t, s] = scores[k] + log_E[s, j]
            back[t, s] = k

    log_lik = V[timesteps - 1].max()
    return log_lik, V, back


@nb.njit
def backtrace(V, back):
    """Backtrace for max-product decoding (Viterbi path).

    Parameters
    ----------
    V : np.ndarray
        Viterbi table from forward_mp, shape (T, n_states)
    back : np.ndarray
        Backpointers from forward_mp, shape (T, n_states)

    Returns
    -------
    states : np.ndarray
        MAP state sequence, shape (T,)
    """
    timesteps = V.shape[0]
    states = np.zeros(timesteps, dtype=np.int64)
    states[timesteps - 1] = first_argmax(V[timesteps - 1])
    for t in range(timesteps - 1, 0, -1):
        states[t - 1] = back[t, states[t]]
    return states

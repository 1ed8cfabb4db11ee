"""HMM model class with log-space Viterbi decoding."""

from __future__ import annotations

import logging

import numpy as np
from tqdm import tqdm

from .errors import EmptySequenceError, InvalidModelError, UnknownSymbolError
from .inference import backtrace, forward_mp
from .utils import to_log_space, validate_model, validate_seq

logger = logging.getLogger(__name__)


def _same_symbol(a, b) -> bool:
    """Symbol equality that keeps booleans apart from the integers 0 and 1."""
    if isinstance(a, bool) != isinstance(b, bool):
        return False
    try:
        return bool(a == b)
    except (TypeError, ValueError):
        # e.g. comparing against an array
        return False


class HMM:
    """Discrete Hidden Markov Model decoded with the Viterbi algorithm.

    Parameters are copied, checked and converted to log space once, at
    construction. The instance is immutable afterwards, so one model can be
    shared by any number of callers decoding independent sequences.

    Parameters
    ----------
    pi : array_like
        Initial state distribution, shape (n_states,)
    T : array_like
        Transition matrix, shape (n_states, n_states), where
        T[i, j] = P(next state j | current state i)
    E : array_like
        Emission matrix, shape (n_states, n_emissions), where
        E[i, a] = P(symbol a | state i)
    states : sequence of str, optional
        State labels. Defaults to "0", "1", ...
    alphabet : sequence, optional
        Observation symbols, in the column order of E. Defaults to 0, 1, ...
    validate : bool, default=True
        If True, every row of pi, T and E must sum to one
    atol : float, default=1e-6
        Tolerance of the row-sum check

    Raises
    ------
    InvalidModelError
        If the parameters or labels are inconsistent
    """

    def __init__(self, pi, T, E, states=None, alphabet=None, validate=True, atol=1e-6):
        """Construct an HMM object."""
        pi = np.array(pi, dtype=np.float64)
        T = np.array(T, dtype=np.float64)
        E = np.array(E, dtype=np.float64)
        validate_model(pi, T, E, check_rows=validate, atol=atol)
        n_states, n_emissions = E.shape

        states = tuple(str(i) for i in range(n_states)) if states is None else tuple(states)
        alphabet = tuple(range(n_emissions)) if alphabet is None else tuple(alphabet)
        if len(states) != n_states:
            raise InvalidModelError(f"Got {len(states)} state labels for {n_states} states")
        if len(alphabet) != n_emissions:
            raise InvalidModelError(f"Got {len(alphabet)} symbols for {n_emissions} emission columns")
        try:
            n_distinct = len(set(states)), len(set(alphabet))
        except TypeError as e:
            raise InvalidModelError(f"State labels and symbols must be hashable: {e}") from e
        if n_distinct[0] != n_states:
            raise InvalidModelError("State labels must be distinct")
        if n_distinct[1] != n_emissions:
            raise InvalidModelError("Alphabet symbols must be distinct")

        for arr in (pi, T, E):
            arr.setflags(write=False)
        fields = {
            "states": states,
            "alphabet": alphabet,
            "pi": pi,
            "T": T,
            "E": E,
            # convert into log space once, before any decoding
            "log_pi": to_log_space(pi),
            "log_T": to_log_space(T),
            "log_E": to_log_space(E),
        }
        for name, value in fields.items():
            object.__setattr__(self, name, value)
        logger.debug("Built HMM with %d states over %d symbols", n_states, n_emissions)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable, cannot set {name!r}")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__} is immutable, cannot delete {name!r}")

    def __repr__(self):
        return f"HMM(n_states={self.n_states}, n_emissions={self.n_emissions})"

    @property
    def n_states(self) -> int:
        return len(self.states)

    @property
    def n_emissions(self) -> int:
        return len(self.alphabet)

    def symbol_to_index(self, symbol) -> int:
        """Map an observation symbol to its column in the emission matrix.

        Raises
        ------
        UnknownSymbolError
            If the symbol is not in the alphabet
        """
        for i, candidate in enumerate(self.alphabet):
            if _same_symbol(candidate, symbol):
                return i
        raise UnknownSymbolError(symbol)

    def encode(self, observations) -> np.ndarray:
        """Map a sequence of observation symbols to alphabet indices.

        Parameters
        ----------
        observations : sequence
            Observation symbols, e.g. a string of characters

        Returns
        -------
        x : np.ndarray
            Encoded sequence, shape (T,) of int64

        Raises
        ------
        EmptySequenceError
            If the sequence is empty
        UnknownSymbolError
            At the first symbol outside the alphabet
        """
        if len(observations) == 0:
            raise EmptySequenceError()
        x = np.empty(len(observations), dtype=np.int64)
        for t, symbol in enumerate(observations):
            try:
                x[t] = self.symbol_to_index(symbol)
            except UnknownSymbolError:
                raise UnknownSymbolError(symbol, t) from None
        return x

    def viterbi(self, observations):
        """Compute the MAP state path and its log-probability.

        Parameters
        ----------
        observations : sequence
            Observation symbols, length T >= 1

        Returns
        -------
        log_lik : float
            Natural log-probability of the best path (-inf if every path is
            impossible)
        states : np.ndarray
            MAP state sequence (state indices), shape (T,)
        """
        x = self.encode(observations)
        validate_seq(x, self.n_emissions)
        log_lik, V, back = forward_mp(self.log_T, self.log_E, self.log_pi, x)
        states = backtrace(V, back)
        return float(log_lik), states

    def decode(self, observations) -> list[str]:
        """Return the labels of the most probable hidden-state path.

        The returned list has the same length as observations.
        """
        _, states = self.viterbi(observations)
        return [self.states[s] for s in states]

    def decode_all(self, sequences, progress=False) -> list[list[str]]:
        """Decode several independent observation sequences, in order.

        Parameters
        ----------
        sequences : iterable of sequences
            Observation sequences
        progress : bool, default=False
            If True, display a progress bar

        Returns
        -------
        paths : list
            One list of state labels per input sequence
        """
        paths = []
        pbar = tqdm(list(sequences), position=0, disable=not progress)
        for observations in pbar:
            paths.append(self.decode(observations))
            pbar.set_postfix(length=len(observations))
        return paths

    def sample(self, length, seed=42):
        """Sample a hidden path and its emissions from the HMM.

        Parameters
        ----------
        length : int
            Length of sequence to sample
        seed : int, default=42
            Random seed

        Returns
        -------
        observations : list
            Sampled observation symbols, length `length`
        states : list
            Labels of the hidden states that emitted them
        """
        if length <= 0:
            raise ValueError(f"length must be positive, got {length}")
        rng = np.random.default_rng(seed)
        observations, states = [], []
        p_h = self.pi
        for _ in range(length):
            h = rng.choice(self.n_states, p=p_h / p_h.sum())
            sym = rng.choice(self.n_emissions, p=self.E[h] / self.E[h].sum())
            states.append(self.states[h])
            observations.append(self.alphabet[sym])
            p_h = self.T[h]
        return observations, states

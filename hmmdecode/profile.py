"""Profile HMM estimated from a multiple sequence alignment.

The profile has one node per match column. Node k holds a match state Mk, a
silent delete state Dk and an insert state Ik; node 0 holds the begin state
and I0. From node k a path moves to Ik, Mk+1 or Dk+1, and the last node moves
to Ik or to the end.

Delete states emit nothing, so they cannot appear in a path that has
exactly one state per observation. They are removed by folding every chain
Mk -> Dk+1 -> ... -> Dm -> {Mm+1, Im} into a single transition whose
probability is the product along the chain. Transitions into the end state
are dropped and rows renormalized. The result is an ordinary HMM over the
emitting states I0, M1, I1, ..., Mn, In that the generic decoder handles
directly; forbidden transitions are zero, i.e. -inf in log space.
"""

from __future__ import annotations

import logging

import numpy as np

from .errors import InvalidModelError
from .model import HMM

logger = logging.getLogger(__name__)

GAP_SYMBOLS = frozenset("-.")

# state types within a node
M, I, D = 0, 1, 2


def match_columns(alignment: list[str], threshold: float = 0.5) -> np.ndarray:
    """Flag the alignment columns that become match states.

    A column is a match column when its fraction of gaps is below threshold.

    Returns
    -------
    is_match : np.ndarray
        Boolean array, shape (n_columns,)
    """
    gaps = np.array([[c in GAP_SYMBOLS for c in row] for row in alignment], dtype=bool)
    return gaps.mean(0) < threshold


def count_profile(alignment, is_match, alphabet):
    """Trace every aligned row through the profile and count its moves.

    Parameters
    ----------
    alignment : list of str
        Aligned rows of equal length
    is_match : np.ndarray
        Match column flags, shape (n_columns,)
    alphabet : tuple
        Residue symbols

    Returns
    -------
    C : np.ndarray
        Transition counts, shape (n_nodes, 3, 3). C[k, u, v] counts moves
        from the type-u state of node k to the type-v state reached from it
        (Ik for v == I, otherwise Mk+1 / Dk+1, or the end state at the last
        node).
    CM : np.ndarray
        Match emission counts, shape (n_nodes, n_emissions); row 0 unused
    CI : np.ndarray
        Insert emission counts, shape (n_nodes, n_emissions)
    """
    n_nodes = int(is_match.sum()) + 1
    sym_idx = {sym: i for i, sym in enumerate(alphabet)}
    C = np.zeros((n_nodes, 3, 3))
    CM = np.zeros((n_nodes, len(alphabet)))
    CI = np.zeros((n_nodes, len(alphabet)))
    for row in alignment:
        node, kind = 0, M  # begin state
        for col, c in enumerate(row):
            gap = c in GAP_SYMBOLS
            if is_match[col]:
                nxt = D if gap else M
                C[node, kind, nxt] += 1
                node, kind = node + 1, nxt
                if not gap:
                    CM[node, sym_idx[c]] += 1
            elif not gap:
                C[node, kind, I] += 1
                kind = I
                CI[node, sym_idx[c]] += 1
        C[node, kind, M] += 1  # end state
    return C, CM, CI


def allowed_moves(n_nodes: int) -> np.ndarray:
    """Boolean mask of the moves present in the profile topology."""
    mask = np.ones((n_nodes, 3, 3), dtype=bool)
    mask[0, D, :] = False  # no D0
    mask[-1, :, D] = False  # no delete after the last node
    return mask


def normalize(counts, mask, pseudocount):
    """Add pseudocounts to the allowed entries and normalize the last axis."""
    P = np.where(mask, counts + pseudocount, 0.0)
    norm = P.sum(-1, keepdims=True)
    norm[norm == 0] = 1
    return P / norm


def state_labels(n_match: int) -> tuple[str, ...]:
    """Labels of the emitting states, in model order I0, M1, I1, ..., Mn, In."""
    labels = ["I0"]
    for k in range(1, n_match + 1):
        labels.extend([f"M{k}", f"I{k}"])
    return tuple(labels)


def _state_index(node: int, kind: int) -> int:
    return 2 * node if kind == I else 2 * node - 1


def eliminate_silent(A: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Fold delete chains into direct transitions between emitting states.

    Parameters
    ----------
    A : np.ndarray
        Node transition probabilities, shape (n_nodes, 3, 3)

    Returns
    -------
    pi : np.ndarray
        Initial distribution over emitting states, shape (n_states,)
    T : np.ndarray
        Transition matrix between emitting states, shape (n_states, n_states)
    """
    n_nodes = A.shape[0]
    n_states = 2 * n_nodes - 1

    def leave(node, kind):
        out = np.zeros(n_states)
        carry, row = 1.0, A[node, kind]
        while True:
            out[_state_index(node, I)] += carry * row[I]
            if node == n_nodes - 1:
                break  # remaining mass goes to the end state
            out[_state_index(node + 1, M)] += carry * row[M]
            carry *= row[D]
            node += 1
            row = A[node, D]
        return out / out.sum()

    pi = leave(0, M)
    T = np.zeros((n_states, n_states))
    for node in range(n_nodes):
        T[_state_index(node, I)] = leave(node, I)
        if node > 0:
            T[_state_index(node, M)] = leave(node, M)
    return pi, T


def build_profile_hmm(alignment, threshold=0.5, pseudocount=0.01, alphabet=None) -> HMM:
    """Estimate a profile HMM from a multiple sequence alignment.

    Parameters
    ----------
    alignment : list of str
        Aligned sequences of equal length; "-" and "." are gaps
    threshold : float, default=0.5
        Columns with a gap fraction below threshold become match states
    pseudocount : float, default=0.01
        Added to every allowed transition and every emission count; must be
        positive
    alphabet : sequence, optional
        Residue symbols. Defaults to the sorted residues of the alignment.

    Returns
    -------
    model : HMM
        Model over the states I0, M1, I1, ..., Mn, In

    Raises
    ------
    InvalidModelError
        If the alignment is empty or ragged, has no match column, or uses a
        residue outside alphabet
    """
    alignment = [str(row) for row in alignment]
    if not alignment:
        raise InvalidModelError("The alignment contains no sequences")
    if len({len(row) for row in alignment}) != 1:
        raise InvalidModelError("Aligned sequences must all have the same length")
    if len(alignment[0]) == 0:
        raise InvalidModelError("The alignment contains no columns")
    if pseudocount <= 0:
        raise InvalidModelError(f"The pseudocount must be positive, got {pseudocount}")

    residues = {c for row in alignment for c in row if c not in GAP_SYMBOLS}
    if alphabet is None:
        alphabet = tuple(sorted(residues))
    else:
        alphabet = tuple(alphabet)
        unknown = residues.difference(alphabet)
        if unknown:
            raise InvalidModelError(f"Alignment residues {sorted(unknown)} are not in the alphabet")
    if not alphabet:
        raise InvalidModelError("The alignment contains no residues")

    is_match = match_columns(alignment, threshold)
    n_match = int(is_match.sum())
    if n_match == 0:
        raise InvalidModelError(f"No column has a gap fraction below {threshold}")

    C, CM, CI = count_profile(alignment, is_match, alphabet)
    A = normalize(C, allowed_moves(n_match + 1), pseudocount)
    pi, T = eliminate_silent(A)

    E = np.zeros((2 * n_match + 1, len(alphabet)))
    emit_mask = np.ones_like(CI, dtype=bool)
    E_match = normalize(CM, emit_mask, pseudocount)
    E_insert = normalize(CI, emit_mask, pseudocount)
    for node in range(n_match + 1):
        E[_state_index(node, I)] = E_insert[node]
        if node > 0:
            E[_state_index(node, M)] = E_match[node]

    logger.info(
        "Profile HMM from %d sequences: %d match states, %d symbols",
        len(alignment),
        n_match,
        len(alphabet),
    )
    return HMM(pi, T, E, states=state_labels(n_match), alphabet=alphabet)

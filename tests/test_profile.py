import numpy as np
import pytest

from hmmdecode import InvalidModelError, UnknownSymbolError, build_profile_hmm
from hmmdecode.profile import (
    allowed_moves,
    count_profile,
    eliminate_silent,
    match_columns,
    normalize,
    state_labels,
)


def test_match_columns(alignment):
    assert match_columns(alignment).tolist() == [True, True, True, False, True]
    assert match_columns(alignment, threshold=0.9).tolist() == [True] * 5


def test_state_labels():
    assert state_labels(2) == ("I0", "M1", "I1", "M2", "I2")


def test_counts(alignment):
    is_match = match_columns(alignment)
    C, CM, CI = count_profile(alignment, is_match, ("A", "C", "G", "T"))
    M, I, D = 0, 1, 2
    assert C.shape == (5, 3, 3)
    assert C[0, M, M] == 4  # begin -> M1
    assert C[1, M, M] == 3 and C[1, M, D] == 1  # M1 -> M2, M1 -> D2
    assert C[2, D, M] == 1  # D2 -> M3
    assert C[3, M, I] == 1 and C[3, I, M] == 1  # one insertion after M3
    assert C[4, M, M] == 4  # M4 -> end
    assert C.sum() == 21  # one move per state visit plus the end
    assert CM[1].tolist() == [4, 0, 0, 0]
    assert CM[2].tolist() == [0, 3, 0, 0]
    assert CI[3].tolist() == [1, 0, 0, 0]


def test_topology_mask():
    mask = allowed_moves(3)
    assert not mask[0, 2].any()
    assert not mask[2, :, 2].any()
    assert mask[1].all()


def test_eliminate_silent_chain():
    # every state always moves on to the next delete state
    A = normalize(np.zeros((3, 3, 3)), allowed_moves(3), 1.0)
    A[0, 0] = [0.0, 0.0, 1.0]
    A[1, 2] = [0.0, 0.0, 1.0]
    A[2, 2] = [0.5, 0.5, 0.0]
    pi, T = eliminate_silent(A)
    # begin -> D1 -> D2 -> {end, I2}: all remaining mass lands in I2
    assert np.allclose(pi, [0, 0, 0, 0, 1])
    assert np.allclose(T.sum(1), 1)


def test_model_is_stochastic(alignment):
    model = build_profile_hmm(alignment)
    assert model.states == ("I0", "M1", "I1", "M2", "I2", "M3", "I3", "M4", "I4")
    assert model.alphabet == ("A", "C", "G", "T")
    assert np.isclose(model.pi.sum(), 1)
    assert np.allclose(model.T.sum(1), 1)
    assert np.allclose(model.E.sum(1), 1)


def test_forbidden_moves_are_zero(alignment):
    model = build_profile_hmm(alignment)
    idx = {label: i for i, label in enumerate(model.states)}
    assert model.T[idx["M3"], idx["M2"]] == 0
    assert model.T[idx["I2"], idx["I1"]] == 0
    assert model.T[idx["M1"], idx["I0"]] == 0
    assert model.log_T[idx["M4"], idx["M1"]] == -np.inf
    # skipping M2 goes through D2
    assert model.T[idx["M1"], idx["M3"]] > 0


def test_consensus_emissions(alignment):
    model = build_profile_hmm(alignment)
    for label, residue in [("M1", "A"), ("M2", "C"), ("M3", "G"), ("M4", "T")]:
        row = model.E[model.states.index(label)]
        assert model.alphabet[row.argmax()] == residue


@pytest.mark.parametrize(
    "seq, path",
    [
        ("ACGT", ["M1", "M2", "M3", "M4"]),
        ("AGT", ["M1", "M3", "M4"]),
        ("ACGAT", ["M1", "M2", "M3", "I3", "M4"]),
    ],
)
def test_decode_profile(alignment, seq, path):
    model = build_profile_hmm(alignment)
    assert model.decode(seq) == path


def test_unseen_residue_at_decode(alignment):
    model = build_profile_hmm(alignment)
    with pytest.raises(UnknownSymbolError):
        model.decode("ACXT")


def test_explicit_alphabet(alignment):
    model = build_profile_hmm(alignment, alphabet="ACGTN")
    assert model.alphabet == ("A", "C", "G", "T", "N")
    assert model.decode("ACNT")[:2] == ["M1", "M2"]


@pytest.mark.parametrize(
    "rows, kwargs, message",
    [
        ([], {}, "no sequences"),
        (["ACG", "AC"], {}, "same length"),
        (["", ""], {}, "no columns"),
        (["---", "---"], {}, "no residues"),
        (["ACG", "ACG"], {"threshold": 0.0}, "gap fraction"),
        (["ACG", "ACG"], {"pseudocount": 0.0}, "pseudocount"),
        (["ACG", "ACX"], {"alphabet": "ACG"}, "not in the alphabet"),
    ],
)
def test_invalid_alignment(rows, kwargs, message):
    with pytest.raises(InvalidModelError, match=message):
        build_profile_hmm(rows, **kwargs)

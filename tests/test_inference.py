import numpy as np

from hmmdecode import backtrace, first_argmax, forward_mp


def test_first_argmax_ties():
    assert first_argmax(np.array([1.0, 3.0, 3.0, 2.0])) == 1
    assert first_argmax(np.array([-np.inf, -np.inf])) == 0
    assert first_argmax(np.array([-np.inf, -5.0, -5.0])) == 1
    assert first_argmax(np.array([0.5])) == 0


def test_forward_mp_casino(casino):
    x = casino.encode("616")
    log_lik, V, back = forward_mp(casino.log_T, casino.log_E, casino.log_pi, x)
    assert V.shape == back.shape == (3, 2)
    assert back[0].tolist() == [-1, -1]
    expected = casino.log_pi + casino.log_E[:, x[0]]
    assert np.allclose(V[0], expected)
    for s in range(2):
        scores = V[0] + casino.log_T[:, s]
        assert back[1, s] == scores.argmax()
        assert np.isclose(V[1, s], scores.max() + casino.log_E[s, x[1]])
    assert log_lik == V[-1].max()


def test_backtrace_follows_pointers():
    V = np.array([[0.0, 0.0], [0.0, 0.0], [-1.0, -0.5]])
    back = np.array([[-1, -1], [1, 0], [1, 0]])
    assert backtrace(V, back).tolist() == [1, 0, 1]


def test_no_nan_with_impossible_column():
    log_pi = np.log(np.array([0.5, 0.5]))
    log_T = np.log(np.array([[0.9, 0.1], [0.1, 0.9]]))
    with np.errstate(divide="ignore"):
        log_E = np.log(np.array([[0.5, 0.5, 0.0], [0.5, 0.5, 0.0]]))
    x = np.array([0, 2, 1, 2], dtype=np.int64)
    log_lik, V, back = forward_mp(log_T, log_E, log_pi, x)
    assert not np.isnan(V).any()
    assert np.isneginf(V[1:]).all()
    assert log_lik == -np.inf
    assert (back[1:] >= 0).all()
    assert backtrace(V, back).tolist() == [0, 0, 0, 0]

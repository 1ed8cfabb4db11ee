import numpy as np
import pytest

from hmmdecode import HMM, casino_hmm


@pytest.fixture
def casino():
    return casino_hmm()


@pytest.fixture
def symmetric():
    """Two indistinguishable states: every comparison is a tie."""
    return HMM(
        pi=[0.5, 0.5],
        T=[[0.5, 0.5], [0.5, 0.5]],
        E=[[0.5, 0.5], [0.5, 0.5]],
        states=["A", "B"],
        alphabet="xy",
    )


@pytest.fixture
def alignment():
    # column 3 is mostly gaps and becomes an insert column
    return ["ACG-T", "ACGAT", "A-G-T", "ACG-T"]


@pytest.fixture
def write_fasta(tmp_path):
    def _write(name, records):
        path = tmp_path / name
        path.write_text("".join(f">{rid}\n{seq}\n" for rid, seq in records))
        return path

    return _write


def random_hmm(n_states, n_emissions, seed):
    rng = np.random.default_rng(seed)
    return HMM(
        pi=rng.dirichlet(np.ones(n_states)),
        T=rng.dirichlet(np.ones(n_states), size=n_states),
        E=rng.dirichlet(np.ones(n_emissions), size=n_states),
    )


@pytest.fixture
def make_random_hmm():
    return random_hmm

"""hmmdecode - Viterbi decoding of discrete Hidden Markov Models.

This package finds the most probable hidden-state path for a sequence of
observed symbols, where:
- The model is given by an initial distribution, a transition matrix and an
  emission matrix over a fixed alphabet
- Parameters are converted to log space once, at construction
- Decoding is a compiled log-space dynamic program with backtrace

Main components:
- HMM: Main model class
- Inference algorithms: max-product forward pass and backtrace
- Profile HMMs: model estimation from a multiple sequence alignment
- Data generation: the occasionally dishonest casino model
"""

from .datagen import casino_hmm, datagen_casino
from .errors import (
    EmptySequenceError,
    HMMError,
    InvalidModelError,
    SequenceFileError,
    UnknownSymbolError,
)
from .fasta import Sequence, read_fasta
from .inference import backtrace, forward_mp
from .model import HMM
from .profile import build_profile_hmm
from .utils import first_argmax, validate_model, validate_seq

__all__ = [
    # Main model
    "HMM",
    # Inference algorithms
    "forward_mp",
    "backtrace",
    # Profile HMMs
    "build_profile_hmm",
    # Errors
    "HMMError",
    "InvalidModelError",
    "UnknownSymbolError",
    "EmptySequenceError",
    "SequenceFileError",
    # Utilities
    "validate_model",
    "validate_seq",
    "first_argmax",
    "read_fasta",
    "Sequence",
    # Data generation
    "casino_hmm",
    "datagen_casino",
]

__version__ = "0.1.0"

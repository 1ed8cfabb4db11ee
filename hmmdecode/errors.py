"""Exception types raised by hmmdecode."""

from __future__ import annotations


class HMMError(Exception):
    """Base class for all hmmdecode errors."""


class InvalidModelError(HMMError, ValueError):
    """Malformed or inconsistent model parameters."""


class EmptySequenceError(HMMError, ValueError):
    """Decoding was requested for a zero-length observation sequence."""

    def __init__(self, msg="Cannot decode an empty observation sequence"):
        super().__init__(msg)


class UnknownSymbolError(HMMError, KeyError):
    """An observation symbol is not part of the model alphabet.

    Parameters
    ----------
    symbol : object
        The offending symbol
    position : int, optional
        Position of the symbol in the observation sequence, if known
    """

    def __init__(self, symbol, position=None):
        self.symbol = symbol
        self.position = position
        super().__init__(symbol)

    def __str__(self):
        if self.position is None:
            return f"Unknown observation symbol {self.symbol!r}"
        return f"Unknown observation symbol {self.symbol!r} at position {self.position}"


class SequenceFileError(HMMError):
    """A sequence file could not be read or contained no records."""

"""Reading named sequences from FASTA files."""

from __future__ import annotations

import logging
import os
from typing import NamedTuple

from Bio import SeqIO

from .errors import SequenceFileError

logger = logging.getLogger(__name__)


class Sequence(NamedTuple):
    name: str
    sequence: str


def read_fasta(path: str | os.PathLike) -> list[Sequence]:
    """Read every record of a FASTA file, in file order.

    Raises
    ------
    FileNotFoundError
        If path does not exist
    SequenceFileError
        If the file cannot be parsed or holds no records
    """
    logger.info("reading %s", path)
    if not os.path.exists(path):
        raise FileNotFoundError(f"file {path} not found")
    try:
        records = [Sequence(rec.id, str(rec.seq)) for rec in SeqIO.parse(path, "fasta")]
    except (OSError, ValueError) as e:
        raise SequenceFileError(f"while reading file {path}: {e}") from e
    if not records:
        raise SequenceFileError(f"file {path} contains no FASTA records")
    logger.info("successfully finished reading file")
    return records

"""Command-line driver: decode test sequences against a profile HMM."""

from __future__ import annotations

import argparse
import logging
import sys

from tqdm import tqdm

from .errors import HMMError
from .fasta import read_fasta
from .profile import build_profile_hmm

logger = logging.getLogger(__name__)


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 on bad arguments."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="hmmdecode",
        description="Build a profile HMM from a training alignment and print the "
        "Viterbi state path of every test sequence.",
    )
    parser.add_argument(
        "--filetrain",
        required=True,
        help="Multiple sequence alignment in FASTA format used to build the profile.",
    )
    parser.add_argument(
        "--filetest",
        required=True,
        help="Sequences in FASTA format to decode.",
    )
    parser.add_argument(
        "--threshold",
        "-t",
        type=float,
        default=0.5,
        help="Gap fraction below which a column becomes a match state (default: 0.5).",
    )
    parser.add_argument(
        "--pseudocount",
        "-p",
        type=float,
        default=0.01,
        help="Pseudocount added to transition and emission counts (default: 0.01).",
    )
    parser.add_argument("--progress", action="store_true", help="Show a progress bar.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log debug messages.")
    return parser


def run(args) -> None:
    """Build the model from args.filetrain and print the decoded args.filetest."""
    train = read_fasta(args.filetrain)
    model = build_profile_hmm(
        [rec.sequence for rec in train],
        threshold=args.threshold,
        pseudocount=args.pseudocount,
    )
    test = read_fasta(args.filetest)
    for rec in tqdm(test, position=0, disable=not args.progress):
        path = model.decode(rec.sequence)
        print(rec.sequence)
        print(" ".join(path))
        print()


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    try:
        run(args)
    except (HMMError, OSError) as e:
        logger.error("decoding failed: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""
Example: Random access to an indexed FASTA file with genoidx

Usage:
    python fetch_region.py genome.fa chr1
    python fetch_region.py genome.fa chr1 10000 60
"""

import argparse
import logging
import sys

from genoidx import FastaReference, GenoidxError


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Print a sequence or sub-sequence from a FASTA file")
    parser.add_argument("fasta", help="FASTA/FASTQ file; an index is built next to it if missing")
    parser.add_argument("name", help="sequence name, or the first word of its header")
    parser.add_argument("start", nargs="?", type=int, help="0-based start position")
    parser.add_argument("length", nargs="?", type=int, default=1, help="number of bases")
    parser.add_argument("--width", type=int, default=60, help="output line width")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    try:
        with FastaReference(args.fasta) as ref:
            name = args.name if args.name in ref else ref.resolve_name(args.name)
            if args.start is None:
                print(ref.fetch_record(name).to_fasta(args.width))
            else:
                print(ref.get_subsequence(name, args.start, args.length))
    except GenoidxError as e:
        logging.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

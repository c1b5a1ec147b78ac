"""
Indexed sequence file access.

This module provides:
- FastaReference: random access to records of an indexed FASTA/FASTQ file
- FastaRecord: a retrieved record, formattable as FASTA
"""

from genoidx.io.reference import FastaReference

from genoidx.io.records import (
    FastaRecord,
    write_fasta,
)

__all__ = [
    "FastaReference",
    "FastaRecord",
    "write_fasta",
]

"""
Random access to sequences in an indexed FASTA/FASTQ file.

FastaReference keeps one open handle on the sequence file and answers
every query with a single positioned read, located through the index
without scanning the file.
"""

import logging
import os
from pathlib import Path
from typing import Iterator, List, Optional, Union

import numpy as np

from genoidx.errors import (
    AmbiguousNameError,
    InvalidRangeError,
    SequenceIOError,
    SequenceNotFoundError,
)
from genoidx.index.entry import IndexEntry
from genoidx.index.fai import FastaIndex, index_path_for
from genoidx.io.records import FastaRecord
from genoidx.utils.coordinates import byte_span, strip_terminators

logger = logging.getLogger(__name__)


class FastaReference:
    """
    An indexed sequence file.

    On construction the index is loaded from ``<filepath>.fai`` if it
    exists; otherwise the file is scanned and the new index is written
    there so later runs skip the scan.

    Args:
        filepath: Path to the FASTA/FASTQ file
        index_path: Index location. Defaults to ``filepath`` + '.fai'
        rebuild: Rescan the file even if an index exists
        write_index: Persist a freshly built index

    Raises:
        SequenceIOError: If the sequence or index file cannot be opened
        IndexFormatError: If an existing index file is malformed

    Example:
        >>> with FastaReference("genome.fa") as ref:
        ...     ref.get_subsequence("chr1", 10000, 20)
        'TAACCCTAACCCTAACCCTA'
    """

    def __init__(
        self,
        filepath: Union[str, Path],
        index_path: Optional[Union[str, Path]] = None,
        rebuild: bool = False,
        write_index: bool = True
    ):
        self.filepath = Path(filepath)
        self.index_path = Path(index_path) if index_path else index_path_for(self.filepath)

        try:
            self._file = open(self.filepath, "rb")
        except OSError as e:
            raise SequenceIOError(f"could not open reference file {self.filepath}: {e}") from e

        try:
            self.index = self._load_index(rebuild, write_index)
        except Exception:
            self._file.close()
            raise

    def _load_index(self, rebuild: bool, write_index: bool) -> FastaIndex:
        if self.index_path.exists() and not rebuild:
            return FastaIndex.from_index_file(self.index_path)

        if not rebuild:
            logger.warning("index file %s not found, generating...", self.index_path)
        index = FastaIndex.from_reference(self.filepath)
        if write_index:
            index.write_index_file(self.index_path)
        return index

    def close(self) -> None:
        """Release the file handle."""
        self._file.close()

    @property
    def closed(self) -> bool:
        return self._file.closed

    def __enter__(self) -> "FastaReference":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def __contains__(self, name: object) -> bool:
        return name in self.index

    def __len__(self) -> int:
        return len(self.index)

    def __repr__(self) -> str:
        return f"FastaReference({str(self.filepath)!r}, {len(self)} sequences)"

    @property
    def names(self) -> List[str]:
        """Sequence names in file order."""
        return self.index.names

    def entry(self, name: str) -> IndexEntry:
        """Layout of the named record. Raises SequenceNotFoundError."""
        return self.index.entry(name)

    def _read_at(self, offset: int, size: int) -> bytes:
        # positioned read; does not move the shared file cursor
        fd = self._file.fileno()
        chunks = []
        remaining = size
        while remaining > 0:
            try:
                chunk = os.pread(fd, remaining, offset)
            except OSError as e:
                raise SequenceIOError(f"could not read {self.filepath} at byte {offset}: {e}") from e
            if not chunk:
                break
            chunks.append(chunk)
            offset += len(chunk)
            remaining -= len(chunk)
        return b"".join(chunks)

    def _read_bases(self, entry: IndexEntry, start: int, length: int) -> bytes:
        offset, size = byte_span(entry, start, length)
        bases = strip_terminators(self._read_at(offset, size))
        if len(bases) < length:
            raise SequenceIOError(
                f"short read for {entry.name!r} in {self.filepath}: expected "
                f"{length} bases at logical offset {start}, got {len(bases)}"
            )
        return bases[:length]

    def get_sequence(self, name: str) -> str:
        """
        Retrieve the full sequence of a record.

        Args:
            name: Exact sequence name

        Returns:
            The record's bases with line terminators removed, one
            character per byte (Latin-1)

        Raises:
            SequenceNotFoundError: If the name is not indexed
        """
        entry = self.entry(name)
        if entry.length == 0:
            return ""
        return self._read_bases(entry, 0, entry.length).decode("latin-1")

    def get_subsequence(self, name: str, start: int, length: int) -> str:
        """
        Retrieve ``length`` bases starting at 0-based ``start``.

        Args:
            name: Exact sequence name
            start: 0-based logical start position
            length: Number of bases to return

        Returns:
            The requested bases with line terminators removed

        Raises:
            SequenceNotFoundError: If the name is not indexed
            InvalidRangeError: If start < 0, length < 1, or the range
                extends past the end of the record

        Example:
            >>> ref.get_subsequence("seq1", 10, 6)
            'GTACGT'
        """
        entry = self.entry(name)
        if start < 0 or length < 1:
            raise InvalidRangeError(
                f"cannot construct subsequence with negative offset or length < 1 "
                f"(start={start}, length={length})"
            )
        if start + length > entry.length:
            raise InvalidRangeError(
                f"range {start}+{length} exceeds length {entry.length} of {name!r}"
            )
        return self._read_bases(entry, start, length).decode("latin-1")

    def fetch(self, name: str, start: int, end: int) -> str:
        """Bases in the half-open interval [start, end) of a record."""
        return self.get_subsequence(name, start, end - start)

    def get_sequence_array(self, name: str) -> np.ndarray:
        """
        Retrieve a record's bases as a uint8 array of ASCII codes.

        Returns:
            numpy array of shape (length,)
        """
        entry = self.entry(name)
        if entry.length == 0:
            return np.zeros(0, dtype=np.uint8)
        return np.frombuffer(self._read_bases(entry, 0, entry.length), dtype=np.uint8)

    def fetch_record(self, name: str) -> FastaRecord:
        """Retrieve a record with its header, ready for formatting."""
        return FastaRecord.from_header(name, self.get_sequence(name))

    def records(self) -> Iterator[FastaRecord]:
        """Yield every record in file order."""
        for name in self.names:
            yield self.fetch_record(name)

    def _names_matching(self, prefix: str) -> List[str]:
        matches = []
        for entry in self.index.sorted_entries():
            fields = entry.name.split()
            if fields and fields[0] == prefix:
                matches.append(entry.name)
        return matches

    def sequence_name_starting_with(self, prefix: str) -> str:
        """
        Find the full name whose first whitespace-separated token is ``prefix``.

        Every entry is checked, so the number of matches is known when
        the prefix is ambiguous.

        Args:
            prefix: Leading token of a header, e.g. 'chr1'

        Returns:
            The unique matching name, or '' when there is no match or
            more than one
        """
        matches = self._names_matching(prefix)
        if len(matches) > 1:
            logger.warning("%s is not unique in fasta index (%d matches)", prefix, len(matches))
            return ""
        return matches[0] if matches else ""

    def resolve_name(self, prefix: str) -> str:
        """
        Strict form of sequence_name_starting_with.

        Raises:
            SequenceNotFoundError: If no header starts with ``prefix``
            AmbiguousNameError: If more than one does
        """
        matches = self._names_matching(prefix)
        if not matches:
            raise SequenceNotFoundError(prefix)
        if len(matches) > 1:
            raise AmbiguousNameError(prefix, matches)
        return matches[0]

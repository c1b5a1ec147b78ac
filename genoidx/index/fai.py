"""
FASTA/FASTQ index (.fai) building, parsing and writing.

The index is a tab-separated table with one line per record:

    name  length  offset  line_blen  line_len

It is a derived artifact: it can always be rebuilt by scanning the
sequence file it describes.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

from genoidx.errors import IndexFormatError, SequenceIOError, SequenceNotFoundError
from genoidx.index.entry import EntryBuilder, IndexEntry

logger = logging.getLogger(__name__)

INDEX_EXTENSION = ".fai"
INDEX_FIELDS = 5

LINE_TERMINATOR = b"\n"
HEADER_MARKERS = (b">", b"@")
COMMENT_MARKER = b";"
QUALITY_MARKER = b"+"


def index_path_for(filepath: Union[str, Path]) -> Path:
    """Conventional index path: the sequence path with '.fai' appended."""
    return Path(str(filepath) + INDEX_EXTENSION)


def _strip_terminator(raw: bytes) -> bytes:
    if raw.endswith(LINE_TERMINATOR):
        return raw[:-1]
    return raw


def _parse_entry(line: str) -> IndexEntry:
    name, length, offset, line_blen, line_len = line.split("\t")
    return IndexEntry(name, int(length), int(offset), int(line_blen), int(line_len))


def _layout_problem(entry: IndexEntry) -> Optional[str]:
    """Describe why an entry's numbers cannot address its bases, if they can't."""
    if min(entry.length, entry.offset, entry.line_blen, entry.line_len) < 0:
        return "negative field"
    if entry.length > 0 and entry.line_blen < 1:
        return "line_blen must be at least 1 for a non-empty sequence"
    if entry.length > 0 and entry.line_len != entry.line_blen + 1:
        return "line_len must be line_blen + 1"
    return None


class FastaIndex:
    """
    Name-keyed collection of IndexEntry objects.

    An index is filled exactly once, either from a persisted .fai file
    or by scanning a sequence file, and is read-only afterwards.

    Example:
        >>> index = FastaIndex.from_reference("genome.fa")
        >>> index.entry("chr1").length
        248956422
    """

    def __init__(self, entries: Optional[Dict[str, IndexEntry]] = None):
        self._entries: Dict[str, IndexEntry] = dict(entries or {})

    @classmethod
    def from_index_file(cls, filepath: Union[str, Path]) -> "FastaIndex":
        """Load an index from a persisted .fai file."""
        index = cls()
        index.read_index_file(filepath)
        return index

    @classmethod
    def from_reference(cls, filepath: Union[str, Path]) -> "FastaIndex":
        """Build an index by scanning a FASTA/FASTQ file."""
        index = cls()
        index.index_reference(filepath)
        return index

    def read_index_file(self, filepath: Union[str, Path]) -> None:
        """
        Parse a persisted index file into this index.

        Each line must hold exactly five tab-separated fields. A single
        malformed line rejects the whole file and leaves the index
        unchanged.

        Args:
            filepath: Path to the .fai file

        Raises:
            IndexFormatError: If any line is malformed
            SequenceIOError: If the file cannot be read
        """
        filepath = Path(filepath)
        entries: Dict[str, IndexEntry] = {}
        try:
            with open(filepath, "r", encoding="utf-8", errors="surrogateescape",
                      newline="\n") as f:
                for line_number, line in enumerate(f, start=1):
                    line = line.rstrip("\n")
                    fields = line.split("\t")
                    if len(fields) != INDEX_FIELDS:
                        raise IndexFormatError(
                            f"malformed fasta index file {filepath}: expected "
                            f"{INDEX_FIELDS} fields, found {len(fields)} @ line {line_number}",
                            path=str(filepath), line_number=line_number, line=line,
                        )
                    try:
                        entry = _parse_entry(line)
                    except ValueError as e:
                        raise IndexFormatError(
                            f"malformed fasta index file {filepath}: "
                            f"non-integer field @ line {line_number}",
                            path=str(filepath), line_number=line_number, line=line,
                        ) from e
                    problem = _layout_problem(entry)
                    if problem:
                        raise IndexFormatError(
                            f"malformed fasta index file {filepath}: "
                            f"{problem} @ line {line_number}",
                            path=str(filepath), line_number=line_number, line=line,
                        )
                    entries[entry.name] = entry
        except OSError as e:
            raise SequenceIOError(f"could not open index file {filepath}: {e}") from e

        self._entries.update(entries)

    def index_reference(self, filepath: Union[str, Path]) -> None:
        """
        Scan a FASTA/FASTQ file and record the layout of every sequence.

        One linear pass tracks the byte offset of each line. Header lines
        ('>' or '@') start a new record, ';' lines are comments, a '+'
        line starts a FASTQ quality block, and any other non-empty line
        is sequence data for the current record.

        Quality blocks are consumed by character count: lines are read
        until at least as many quality characters as bases have been
        seen, so a wrapped quality block whose lines start with '@' is
        not mistaken for a header.

        Args:
            filepath: Path to the sequence file

        Raises:
            SequenceIOError: If the file cannot be read
        """
        filepath = Path(filepath)
        logger.info("indexing fasta reference %s", filepath)

        entries: Dict[str, IndexEntry] = {}
        current = EntryBuilder()
        header_end = 0
        offset = 0  # bytes consumed so far, terminators included

        try:
            with open(filepath, "rb") as f:
                lines = iter(f)
                for raw in lines:
                    line = _strip_terminator(raw)

                    if line.startswith(COMMENT_MARKER):
                        pass
                    elif line.startswith(QUALITY_MARKER):
                        consumed = 0
                        while True:
                            offset += len(raw)
                            raw = next(lines, b"")
                            if not raw:
                                break
                            consumed += len(_strip_terminator(raw))
                            if consumed >= current.length:
                                break
                    elif line.startswith(HEADER_MARKERS):
                        if current.name:
                            entries[current.name] = current.build(header_end)
                        # undecodable bytes survive the round trip through the .fai
                        current = EntryBuilder(name=line[1:].decode("utf-8", "surrogateescape"))
                        header_end = offset + len(raw)
                    elif line:
                        if current.name:
                            current.add_line(len(line), offset)
                        else:
                            logger.warning(
                                "skipping sequence data before first header at byte %d of %s",
                                offset, filepath,
                            )

                    offset += len(raw)
        except OSError as e:
            raise SequenceIOError(f"could not open reference file {filepath} for indexing: {e}") from e

        if current.name:
            entries[current.name] = current.build(header_end)

        self._entries.update(entries)

    def write_index_file(self, filepath: Union[str, Path]) -> None:
        """
        Write the index as a tab-separated table ordered by offset.

        The table is written to a temporary file beside ``filepath`` and
        moved into place, so a failed write never leaves a truncated
        index behind.

        Raises:
            SequenceIOError: If the file cannot be written
        """
        filepath = Path(filepath)
        logger.info("writing fasta index file %s", filepath)
        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(
                prefix=filepath.name + ".", suffix=".tmp", dir=filepath.parent
            )
            with open(fd, "w", encoding="utf-8", errors="surrogateescape", newline="\n") as f:
                for entry in self.sorted_entries():
                    f.write(str(entry) + "\n")
            # mkstemp creates 0600; indexes are shared like the files they describe
            os.chmod(tmp_path, 0o644)
            os.replace(tmp_path, filepath)
        except OSError as e:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise SequenceIOError(f"could not open index file {filepath} for writing: {e}") from e

    def entry(self, name: str) -> IndexEntry:
        """
        Look up the entry for an exact sequence name.

        Raises:
            SequenceNotFoundError: If no record has this name
        """
        try:
            return self._entries[name]
        except KeyError:
            raise SequenceNotFoundError(name) from None

    def sorted_entries(self) -> List[IndexEntry]:
        """All entries in ascending file offset order."""
        return sorted(self._entries.values(), key=lambda e: e.offset)

    @property
    def names(self) -> List[str]:
        """Sequence names in file order."""
        return [entry.name for entry in self.sorted_entries()]

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[IndexEntry]:
        return iter(self._entries.values())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FastaIndex):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"FastaIndex({len(self)} entries)"

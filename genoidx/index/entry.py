"""
Layout records for indexed sequences.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class IndexEntry:
    """
    Byte layout of one sequence record in a FASTA/FASTQ file.

    Attributes:
        name: Full header text after the '>' or '@' marker
        length: Number of bases, excluding line terminators
        offset: Byte offset of the first base in the file
        line_blen: Bases per full line
        line_len: Bytes per full line, including the terminator
    """
    name: str
    length: int
    offset: int
    line_blen: int
    line_len: int

    def __len__(self) -> int:
        return self.length

    def __str__(self) -> str:
        return (
            f"{self.name}\t{self.length}\t{self.offset}\t"
            f"{self.line_blen}\t{self.line_len}"
        )


@dataclass
class EntryBuilder:
    """
    Mutable accumulator for the record currently being scanned.

    ``offset`` and ``line_len`` stay None until the first sequence
    line of the record is seen.
    """
    name: str = ""
    length: int = 0
    offset: Optional[int] = None
    line_len: Optional[int] = None

    def add_line(self, line_length: int, offset: int) -> None:
        """Account for one sequence line starting at ``offset``."""
        if self.offset is None:
            self.offset = offset
        self.length += line_length
        # first line fixes the wrap width; later lines are not validated
        if self.line_len is None:
            self.line_len = line_length + 1

    def build(self, default_offset: int) -> IndexEntry:
        """
        Freeze the accumulated state.

        Args:
            default_offset: Offset to record when no sequence line was seen

        Returns:
            IndexEntry for the record
        """
        if self.line_len is None:
            return IndexEntry(self.name, self.length,
                              default_offset if self.offset is None else self.offset,
                              0, 0)
        return IndexEntry(
            name=self.name,
            length=self.length,
            offset=self.offset,
            line_blen=self.line_len - 1,
            line_len=self.line_len,
        )

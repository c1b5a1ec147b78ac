from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Union


@dataclass
class FastaRecord:
    """
    A record pulled out of an indexed file by name.

    The index stores the whole header text as the record name, so
    ``description`` is exactly the index key and ``id`` is only its
    first word, the token that ``sequence_name_starting_with`` matches.

    Attributes:
        id: First whitespace-separated token of the header
        description: Header text as stored in the index
        sequence: Bases with line terminators removed
    """
    id: str
    description: str
    sequence: str

    @classmethod
    def from_header(cls, header: str, sequence: str) -> "FastaRecord":
        fields = header.split()
        return cls(id=fields[0] if fields else "", description=header, sequence=sequence)

    def __len__(self) -> int:
        return len(self.sequence)

    def to_fasta(self, line_width: int = 60) -> str:
        """
        Render the record as FASTA wrapped at ``line_width`` bases.

        Every line except possibly the last holds exactly ``line_width``
        bases, which is the layout the index scanner assumes.
        """
        wrapped = (self.sequence[i:i + line_width]
                   for i in range(0, len(self.sequence), line_width))
        return "\n".join([">" + self.description, *wrapped])


def write_fasta(
    records: Union[FastaRecord, Iterable[FastaRecord]],
    filepath: Union[str, Path],
    line_width: int = 60
) -> None:
    """
    Write records to a FASTA file with uniform line wrapping.

    Files written this way satisfy the fixed-width layout that
    FastaIndex expects, so they can be indexed directly.

    Args:
        records: Single record or iterable of FastaRecord objects
        filepath: Output file path
        line_width: Number of bases per sequence line
    """
    if isinstance(records, FastaRecord):
        records = [records]

    with open(filepath, "w", encoding="utf-8", errors="surrogateescape", newline="\n") as f:
        for record in records:
            f.write(record.to_fasta(line_width) + "\n")

import logging

import numpy as np
import pytest

from genoidx import (
    AmbiguousNameError,
    FastaIndex,
    FastaRecord,
    FastaReference,
    IndexFormatError,
    InvalidRangeError,
    SequenceIOError,
    SequenceNotFoundError,
    write_fasta,
)


def test_scenario_retrieval(scenario_fasta):
    with FastaReference(scenario_fasta) as ref:
        assert ref.get_sequence("seq1") == "ACGTACGTACGTACGT"
        assert ref.get_subsequence("seq1", 10, 6) == "GTACGT"
        assert ref.get_sequence("seq2") == "TTTT"


def test_index_is_written_on_first_use(scenario_fasta, caplog):
    fai = scenario_fasta.parent / "scenario.fa.fai"
    assert not fai.exists()
    with caplog.at_level(logging.WARNING, logger="genoidx"):
        FastaReference(scenario_fasta).close()
    assert "not found, generating" in caplog.text
    assert fai.read_text() == "seq1\t16\t6\t10\t11\nseq2\t4\t30\t4\t5\n"


def test_existing_index_is_used_instead_of_scanning(scenario_fasta):
    fai = scenario_fasta.parent / "scenario.fa.fai"
    fai.write_text("renamed\t4\t30\t4\t5\n")
    with FastaReference(scenario_fasta) as ref:
        assert ref.names == ["renamed"]
        assert ref.get_sequence("renamed") == "TTTT"


def test_rebuild_ignores_existing_index(scenario_fasta):
    fai = scenario_fasta.parent / "scenario.fa.fai"
    fai.write_text("renamed\t4\t30\t4\t5\n")
    with FastaReference(scenario_fasta, rebuild=True) as ref:
        assert ref.names == ["seq1", "seq2"]
    assert fai.read_text().startswith("seq1\t")


def test_write_index_false_keeps_index_in_memory(scenario_fasta):
    with FastaReference(scenario_fasta, write_index=False) as ref:
        assert len(ref) == 2
    assert not (scenario_fasta.parent / "scenario.fa.fai").exists()


def test_custom_index_path(scenario_fasta, tmp_path):
    fai = tmp_path / "elsewhere.fai"
    with FastaReference(scenario_fasta, index_path=fai) as ref:
        assert ref.index_path == fai
    assert FastaIndex.from_index_file(fai) == FastaIndex.from_reference(scenario_fasta)


def test_malformed_index_fails_construction(scenario_fasta):
    (scenario_fasta.parent / "scenario.fa.fai").write_text("seq1\t16\n")
    with pytest.raises(IndexFormatError):
        FastaReference(scenario_fasta)


def test_missing_reference_raises_io_error(tmp_path):
    with pytest.raises(SequenceIOError):
        FastaReference(tmp_path / "absent.fa")


def test_subsequence_of_whole_record_matches_sequence(wrapped_fasta):
    with FastaReference(wrapped_fasta) as ref:
        for name in ref.names:
            length = ref.entry(name).length
            assert ref.get_subsequence(name, 0, length) == ref.get_sequence(name)


def test_single_base_walk_matches_sequence(wrapped_fasta):
    with FastaReference(wrapped_fasta) as ref:
        for name in ref.names:
            length = ref.entry(name).length
            bases = "".join(ref.get_subsequence(name, i, 1) for i in range(length))
            assert bases == ref.get_sequence(name)


def test_every_window_matches_python_slice(tmp_path):
    sequence = "ACGTTGCAAGGCTTAACCGGTATA"
    path = tmp_path / "windows.fa"
    write_fasta(FastaRecord("w", "w", sequence), path, line_width=5)
    with FastaReference(path) as ref:
        for start in range(len(sequence)):
            for length in range(1, len(sequence) - start + 1):
                assert ref.get_subsequence("w", start, length) == sequence[start:start + length]


@pytest.mark.parametrize("start, length", [(-1, 4), (0, 0), (3, -2)])
def test_invalid_range_does_not_read(scenario_fasta, monkeypatch, start, length):
    with FastaReference(scenario_fasta) as ref:
        def fail_read(*args):
            raise AssertionError("file was read")
        monkeypatch.setattr(ref, "_read_at", fail_read)
        with pytest.raises(InvalidRangeError):
            ref.get_subsequence("seq1", start, length)


def test_range_past_end_is_invalid(scenario_fasta):
    with FastaReference(scenario_fasta) as ref:
        with pytest.raises(InvalidRangeError):
            ref.get_subsequence("seq2", 2, 3)


def test_unknown_name_raises_not_found(scenario_fasta):
    with FastaReference(scenario_fasta) as ref:
        assert "seq9" not in ref
        with pytest.raises(SequenceNotFoundError):
            ref.get_sequence("seq9")
        with pytest.raises(SequenceNotFoundError):
            ref.get_subsequence("seq9", 0, 1)
        with pytest.raises(SequenceNotFoundError):
            ref.entry("seq9")


def test_truncated_source_is_short_read(scenario_fasta):
    with FastaReference(scenario_fasta) as ref:
        scenario_fasta.write_bytes(b">seq1\nACGT")
        with pytest.raises(SequenceIOError):
            ref.get_sequence("seq1")


def test_fetch_is_half_open(scenario_fasta):
    with FastaReference(scenario_fasta) as ref:
        assert ref.fetch("seq1", 8, 12) == "ACGT"


def test_sequence_array(scenario_fasta):
    with FastaReference(scenario_fasta) as ref:
        arr = ref.get_sequence_array("seq2")
        assert arr.dtype == np.uint8
        assert arr.tobytes() == b"TTTT"


def test_records_in_file_order(wrapped_fasta):
    with FastaReference(wrapped_fasta) as ref:
        records = list(ref.records())
    assert [r.id for r in records] == ["chr1", "chr2", "chrM"]
    assert records[0].description == "chr1 first chromosome"
    assert records[0].sequence == "ACGTACGTTGCAACGGA"
    assert records[2].to_fasta() == ">chrM mito\nG"


def test_fastq_reads_are_retrievable(tmp_path):
    path = tmp_path / "reads.fq"
    path.write_bytes(b"@r1\nACGT\n+\n@@II\n@r2\nGGCC\n+\nIIII\n")
    with FastaReference(path) as ref:
        assert ref.get_sequence("r1") == "ACGT"
        assert ref.get_sequence("r2") == "GGCC"


def test_empty_record_has_empty_sequence(tmp_path):
    path = tmp_path / "empty.fa"
    path.write_bytes(b">empty\n>full\nAC\n")
    with FastaReference(path) as ref:
        assert ref.get_sequence("empty") == ""
        assert len(ref.get_sequence_array("empty")) == 0


def test_sequence_name_starting_with(wrapped_fasta):
    with FastaReference(wrapped_fasta) as ref:
        assert ref.sequence_name_starting_with("chr1") == "chr1 first chromosome"
        assert ref.sequence_name_starting_with("chr2") == "chr2"
        assert ref.sequence_name_starting_with("chr") == ""
        assert ref.resolve_name("chrM") == "chrM mito"
        with pytest.raises(SequenceNotFoundError):
            ref.resolve_name("chrX")


def test_ambiguous_prefix_reports_all_matches(tmp_path, caplog):
    path = tmp_path / "ambiguous.fa"
    path.write_bytes(b">a one\nA\n>a two\nC\n>a three\nG\n>b\nT\n")
    with FastaReference(path) as ref:
        with caplog.at_level(logging.WARNING, logger="genoidx"):
            assert ref.sequence_name_starting_with("a") == ""
        assert "3 matches" in caplog.text
        with pytest.raises(AmbiguousNameError) as excinfo:
            ref.resolve_name("a")
        assert excinfo.value.matches == ["a one", "a two", "a three"]
        assert ref.sequence_name_starting_with("b") == "b"


def test_close_releases_handle(scenario_fasta):
    ref = FastaReference(scenario_fasta)
    assert not ref.closed
    ref.close()
    assert ref.closed


def test_zero_width_index_fails_construction(scenario_fasta):
    (scenario_fasta.parent / "scenario.fa.fai").write_text("seq1\t16\t6\t0\t0\n")
    with pytest.raises(IndexFormatError):
        FastaReference(scenario_fasta)


def test_non_ascii_bytes_are_returned_one_char_per_byte(tmp_path):
    path = tmp_path / "bytes.fa"
    path.write_bytes(b">a\nAC\xc3\xa9T\n")
    with FastaReference(path) as ref:
        assert ref.get_sequence("a") == "AC\xc3\xa9T"
        assert ref.get_subsequence("a", 2, 2).encode("latin-1") == b"\xc3\xa9"


def test_undecodable_header_is_retrievable(tmp_path):
    path = tmp_path / "latin.fa"
    path.write_bytes(b">seq\xff1 extra\nACGT\n")
    with FastaReference(path) as ref:
        name = ref.sequence_name_starting_with("seq\udcff1")
        assert ref.get_sequence(name) == "ACGT"
    with FastaReference(path) as ref:
        assert ref.names == ["seq\udcff1 extra"]

import pytest


SCENARIO = b">seq1\nACGTACGTAC\nGTACGT\n>seq2\nTTTT\n"


@pytest.fixture
def scenario_fasta(tmp_path):
    path = tmp_path / "scenario.fa"
    path.write_bytes(SCENARIO)
    return path


@pytest.fixture
def wrapped_fasta(tmp_path):
    """Three records wrapped at 7 bases, with a comment and a short last line."""
    path = tmp_path / "wrapped.fa"
    path.write_bytes(
        b";generated for tests\n"
        b">chr1 first chromosome\n"
        b"ACGTACG\nTTGCAAC\nGGA\n"
        b">chr2\n"
        b"AAAAAAA\nCCCCCCC\n"
        b">chrM mito\n"
        b"G\n"
    )
    return path

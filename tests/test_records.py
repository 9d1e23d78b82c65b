import pytest

from haploedge.records import AlignmentRecord, Observation, RecordKind
from haploedge.testhelpers import string_to_record, string_to_records


def test_coverage_sorted():
    coverage = {
        7: Observation("A", 30, 2),
        3: Observation("C", 30, 0),
        5: Observation("G", 30, 1),
    }
    record = AlignmentRecord("r", coverage)
    assert list(record.covered_positions()) == [3, 5, 7]
    assert record.start == 3
    assert record.end == 7
    assert len(record) == 3


def test_coverage_read_only():
    record = string_to_record("r", "ACGT")
    with pytest.raises(TypeError):
        record.covered_positions()[1] = Observation("T", 10, 0)  # type: ignore


@pytest.mark.parametrize(
    "name,kind",
    [
        ("read_123", RecordKind.READ),
        ("Clique_17", RecordKind.CLIQUE),
        ("SRR001/Clique", RecordKind.CLIQUE),
        ("clique_1", RecordKind.READ),
    ],
)
def test_kind_from_name(name, kind):
    assert RecordKind.from_name(name) is kind


def test_kind_is_explicit():
    record = string_to_record("Clique_1", "ACGT")
    assert record.kind is RecordKind.READ
    assert not record.is_clique
    record = string_to_record("r", "ACGT", kind=RecordKind.CLIQUE)
    assert record.is_clique


def test_string_to_records():
    records = string_to_records(
        """
        ACGT
        ..GTa AC
        """
    )
    assert [r.name for r in records] == ["Read 1", "Read 2"]
    coverage = records[1].covered_positions()
    assert list(coverage) == [3, 4, 6, 7]
    assert [o.pir for o in coverage.values()] == [0, 1, 3, 4]
    assert coverage[6].base == "A"

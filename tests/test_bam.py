import pytest

from haploedge.bam import (
    AlignmentFileNotIndexedError,
    AlignmentReader,
    ReferenceNotFoundError,
    record_from_pair,
    record_from_segment,
)
from haploedge.edges import EdgeCalculator
from haploedge.records import PairedAlignmentRecord, RecordKind


def test_record_from_segment(new_segment):
    segment = new_segment("r", 0, 9, "3M1I4M", "ACGTTACG", quality=30)
    record = record_from_segment(segment)
    coverage = record.covered_positions()
    assert record.name == "r"
    assert record.kind is RecordKind.READ
    assert list(coverage) == [10, 11, 12, 13, 14, 15, 16]
    assert [o.pir for o in coverage.values()] == [0, 1, 2, 4, 5, 6, 7]
    assert coverage[13].base == "T"
    assert coverage[13].quality == 30
    assert all(o.read == 0 for o in coverage.values())


def test_record_from_segment_with_deletion_and_n(new_segment):
    segment = new_segment("Clique_4", 0, 0, "2M2D3M", "ANGTA")
    record = record_from_segment(segment)
    assert record.kind is RecordKind.CLIQUE
    assert list(record.covered_positions()) == [1, 5, 6, 7]


def test_record_from_pair(new_segment):
    first = new_segment("p", 1 + 64, 0, "6M", "ACGTAC", quality=20)
    second = new_segment("p", 1 + 128, 4, "6M", "ACGTAC", quality=30)
    record = record_from_pair(second, first)
    coverage = record.covered_positions()
    assert isinstance(record, PairedAlignmentRecord)
    assert list(coverage) == list(range(1, 11))
    assert [o.read for o in coverage.values()] == [0, 0, 0, 0, 1, 1, 1, 1, 1, 1]
    # the overlap is taken from the mate with the higher quality
    assert coverage[5].quality == 30
    assert coverage[5].pir == 0
    assert EdgeCalculator().partner_length_range(record) == (6, 6)


def test_reader(bam_path):
    with AlignmentReader(str(bam_path)) as reader:
        assert reader.has_reference("ref")
        records = list(reader.records("ref"))
    assert [r.name for r in records] == ["read1", "read2", "pair1", "Clique_1"]
    assert [r.start for r in records] == [1, 5, 21, 61]
    pair = records[2]
    assert pair.end == 34
    assert len(pair) == 14
    assert records[3].is_clique


def test_reader_without_pairing(bam_path):
    with AlignmentReader(str(bam_path), pair_mates=False) as reader:
        records = list(reader.records("ref"))
    assert [r.name for r in records] == ["read1", "read2", "pair1", "pair1", "Clique_1"]


def test_reader_region(bam_path):
    with AlignmentReader(str(bam_path)) as reader:
        records = list(reader.records("ref", start=25, end=40))
    # the first mate overlaps the region as well
    assert [r.name for r in records] == ["pair1"]
    assert isinstance(records[0], PairedAlignmentRecord)


def test_unknown_reference(bam_path):
    with AlignmentReader(str(bam_path)) as reader:
        assert not reader.has_reference("chr1")
        with pytest.raises(ReferenceNotFoundError):
            list(reader.records("chr1"))


def test_missing_index(bam_path):
    bam_path.with_name(bam_path.name + ".bai").unlink()
    with pytest.raises(AlignmentFileNotIndexedError):
        AlignmentReader(str(bam_path))

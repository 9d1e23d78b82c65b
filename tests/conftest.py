import pysam
import pytest

REFERENCE_LENGTH = 100

# Reads as (name, flag, 0-based reference start, cigar string, sequence)
ALIGNMENTS = [
    ("read1", 0, 0, "10M", "ACGTACGTAC"),
    ("read2", 0, 4, "10M", "ACGTACGTAC"),
    ("pair1", 1 + 2 + 32 + 64, 20, "8M", "ACGTACGT"),
    ("pair1", 1 + 2 + 16 + 128, 26, "8M", "GTACGTAC"),
    ("secondary", 256, 40, "6M", "ACGTAC"),
    ("Clique_1", 0, 60, "3M1I4M", "ACGAACGT"),
]


def make_header():
    return pysam.AlignmentHeader.from_dict(
        {
            "HD": {"VN": "1.6", "SO": "coordinate"},
            "SQ": [{"SN": "ref", "LN": REFERENCE_LENGTH}],
        }
    )


def make_segment(header, name, flag, start, cigar, sequence, quality=40):
    segment = pysam.AlignedSegment(header)
    segment.query_name = name
    segment.flag = flag
    segment.reference_id = 0
    segment.reference_start = start
    segment.mapping_quality = 60
    segment.cigarstring = cigar
    segment.query_sequence = sequence
    segment.query_qualities = pysam.qualitystring_to_array(chr(quality + 33) * len(sequence))
    return segment


@pytest.fixture
def new_segment():
    """Return a function that builds an aligned segment on reference 'ref'"""
    header = make_header()

    def make(name, flag, start, cigar, sequence, quality=40):
        return make_segment(header, name, flag, start, cigar, sequence, quality)

    return make


@pytest.fixture
def bam_path(tmp_path):
    """An indexed BAM file with a few reads on reference 'ref'"""
    path = tmp_path / "reads.bam"
    header = make_header()
    with pysam.AlignmentFile(str(path), "wb", header=header) as f:
        for alignment in ALIGNMENTS:
            f.write(make_segment(header, *alignment))
    pysam.index(str(path))
    return path

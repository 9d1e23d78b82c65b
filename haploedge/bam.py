from typing import Dict, Iterator, Optional

import pysam
import logging

from haploedge.records import (
    BASES,
    AlignmentRecord,
    Observation,
    PairedAlignmentRecord,
    RecordKind,
)

logger = logging.getLogger(__name__)


class AlignmentFileNotIndexedError(Exception):
    pass


class ReferenceNotFoundError(Exception):
    pass


class EmptyAlignmentFileError(Exception):
    pass


def segment_coverage(segment: pysam.AlignedSegment, read: int = 0) -> Dict[int, Observation]:
    """
    Return the coverage map of an aligned segment with 1-based reference
    positions. Only aligned (match or mismatch) positions are included;
    positions with a base other than A, C, G, T are skipped.
    """
    sequence = segment.query_sequence
    qualities = segment.query_qualities
    coverage = {}
    for query_pos, ref_pos in segment.get_aligned_pairs(matches_only=True):
        base = sequence[query_pos].upper()
        if base not in BASES:
            continue
        quality = qualities[query_pos] if qualities is not None else 0
        coverage[ref_pos + 1] = Observation(base, quality, query_pos, read)
    return coverage


def record_from_segment(segment: pysam.AlignedSegment, read: int = 0) -> AlignmentRecord:
    name = segment.query_name
    return AlignmentRecord(name, segment_coverage(segment, read), RecordKind.from_name(name))


def record_from_pair(first: pysam.AlignedSegment, second: pysam.AlignedSegment) -> AlignmentRecord:
    """
    Join two mates into one record. Observations of the second mate belong to
    read group 1, so that the transition between the mates counts as a jump.
    Where the mates overlap, the observation with the higher quality is kept.
    """
    if second.reference_start < first.reference_start:
        first, second = second, first
    coverage = segment_coverage(first, read=0)
    for position, observation in segment_coverage(second, read=1).items():
        if position not in coverage or coverage[position].quality < observation.quality:
            coverage[position] = observation
    name = first.query_name
    partner_range = (second.query_alignment_length, second.query_length)
    return PairedAlignmentRecord(name, coverage, partner_range, RecordKind.from_name(name))


class AlignmentReader:
    """
    Read alignments from an indexed BAM or CRAM file and turn them into
    AlignmentRecord instances.
    """

    def __init__(self, path: str, *, reference: Optional[str] = None, pair_mates: bool = True):
        """
        path -- path to BAM or CRAM file
        reference -- optional path to FASTA reference for CRAM
        pair_mates -- join the two mates of a read pair into one record
        """
        self._pair_mates = pair_mates
        self._samfile = pysam.AlignmentFile(path, reference_filename=reference)
        try:
            fetcher = self._samfile.fetch(multiple_iterators=True)
        except ValueError:
            raise AlignmentFileNotIndexedError(path)
        try:
            next(fetcher)
        except StopIteration:
            raise EmptyAlignmentFileError(path) from None
        self._references = frozenset(self._samfile.references)

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def has_reference(self, name: str) -> bool:
        return name in self._references

    def _segments(self, reference: str, start: int, end: Optional[int]):
        if reference not in self._references:
            raise ReferenceNotFoundError(reference)
        for segment in self._samfile.fetch(reference, start=start, stop=end):
            if (
                segment.is_unmapped
                or segment.is_secondary
                or segment.is_supplementary
                or segment.is_duplicate
                or segment.is_qcfail
                or segment.query_sequence is None
            ):
                continue
            yield segment

    def records(
        self, reference: str, start: int = 0, end: Optional[int] = None
    ) -> Iterator[AlignmentRecord]:
        """
        Yield records for the alignments on the given reference, sorted by
        their first covered position. Records without any covered position
        are dropped.
        """
        unpaired: Dict[str, pysam.AlignedSegment] = {}
        records = []
        for segment in self._segments(reference, start, end):
            if self._pair_mates and segment.is_paired and not segment.mate_is_unmapped:
                mate = unpaired.pop(segment.query_name, None)
                if mate is None:
                    unpaired[segment.query_name] = segment
                    continue
                records.append(record_from_pair(mate, segment))
            else:
                records.append(record_from_segment(segment))
        # Mates outside of the region
        for segment in unpaired.values():
            records.append(record_from_segment(segment))
        records = [record for record in records if len(record) > 0]
        records.sort(key=lambda record: record.start)
        logger.debug("Read %d records from reference %s", len(records), reference)
        yield from records

    def close(self) -> None:
        self._samfile.close()

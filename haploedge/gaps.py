import logging
from typing import Mapping, Sequence

from haploedge.records import Observation

logger = logging.getLogger(__name__)


def gaps_compatible(
    cov1: Mapping[int, Observation], cov2: Mapping[int, Observation], shared: Sequence[int]
) -> bool:
    """
    Return whether the insertions and deletions of two records are consistent
    with each other on their shared positions.

    shared -- positions covered by both records, in ascending order

    Consecutive shared positions are compared pairwise. A difference in how far
    the two reads advance is only acceptable if one of them jumps from one
    constituent read to another in between.
    """
    if not shared:
        return False
    for left, right in zip(shared[:-1], shared[1:]):
        ref_diff = right - left
        pir_diff1 = cov1[right].pir - cov1[left].pir
        pir_diff2 = cov2[right].pir - cov2[left].pir
        jump = cov1[right].read != cov1[left].read or cov2[right].read != cov2[left].read
        if ref_diff == 1 and pir_diff1 != pir_diff2 and not jump:
            logger.debug("Insertion in only one read between positions %d and %d", left, right)
            return False
        elif ref_diff > 1 and pir_diff1 != pir_diff2 and not jump:
            logger.debug("Deletion in only one read between positions %d and %d", left, right)
            return False
        elif ref_diff > 1 and pir_diff1 == pir_diff2 and pir_diff1 > 1:
            logger.debug("Ambiguous indels between positions %d and %d", left, right)
            return False
    return True

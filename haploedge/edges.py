"""
Decide whether two aligned reads (or read clusters) come from the same haplotype.

The decision is the edge predicate of the overlap graph: two records are
connected if their overlap is large enough, their indels are compatible, and
the length-normalized likelihood of observing both under a shared haplotype
reaches a cutoff that depends on whether the records are raw reads or merged
cliques.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from math import exp
from types import MappingProxyType
from typing import Mapping, Optional, Sequence, Tuple

from haploedge.coverage import shared_positions, tail_positions
from haploedge.gaps import gaps_compatible
from haploedge.likelihood import log_match_likelihood, log_null_likelihood
from haploedge.records import AlignmentRecord

logger = logging.getLogger(__name__)


class UnsupportedOperationError(Exception):
    """The requested operation is not provided for this kind of record"""


class PairCategory(Enum):
    CLIQUES = "cliques"  # both records are cliques
    MIXED = "mixed"  # exactly one record is a clique
    SINGLE = "single"  # both records are raw reads


@dataclass(frozen=True)
class EdgeParameters:
    quality: float = 0.9
    edge_cutoff_cliques: float = 0.99
    edge_cutoff_mixed: float = 0.97
    edge_cutoff_single: float = 0.95
    min_overlap_cliques: float = 0.9
    min_overlap_single: float = 0.6
    frameshift_merge: bool = False

    def validate(self) -> None:
        for name in (
            "edge_cutoff_cliques",
            "edge_cutoff_mixed",
            "edge_cutoff_single",
            "min_overlap_cliques",
            "min_overlap_single",
        ):
            value = getattr(self, name)
            if not 0 <= value <= 1:
                raise ValueError(f"{name} must be between 0 and 1, but is {value}")


class EdgeCalculator:
    """
    Stateless after construction, so a single instance can be shared between
    threads.
    """

    def __init__(
        self,
        parameters: Optional[EdgeParameters] = None,
        diversity: Optional[Mapping[int, float]] = None,
    ):
        """
        parameters -- cutoffs and minimum overlaps; defaults if omitted
        diversity -- maps 1-based reference positions to the probability that
            two haplotypes agree there by chance
        """
        self._parameters = parameters if parameters is not None else EdgeParameters()
        self._parameters.validate()
        self._diversity = MappingProxyType(dict(diversity) if diversity else {})

    @property
    def parameters(self) -> EdgeParameters:
        return self._parameters

    @property
    def diversity(self) -> Mapping[int, float]:
        return self._diversity

    @staticmethod
    def category(record1: AlignmentRecord, record2: AlignmentRecord) -> PairCategory:
        if record1.is_clique and record2.is_clique:
            return PairCategory.CLIQUES
        elif record1.is_clique or record2.is_clique:
            return PairCategory.MIXED
        return PairCategory.SINGLE

    def cutoff_for(self, category: PairCategory) -> float:
        if category is PairCategory.CLIQUES:
            return self._parameters.edge_cutoff_cliques
        elif category is PairCategory.MIXED:
            return self._parameters.edge_cutoff_mixed
        return self._parameters.edge_cutoff_single

    def min_overlap_for(self, category: PairCategory) -> float:
        if category is PairCategory.CLIQUES:
            return self._parameters.min_overlap_cliques
        return self._parameters.min_overlap_single

    def edge_between(self, record1: AlignmentRecord, record2: AlignmentRecord) -> bool:
        cov1 = record1.covered_positions()
        cov2 = record2.covered_positions()
        shared = shared_positions(cov1, cov2)
        if not shared:
            return False
        if not gaps_compatible(cov1, cov2, shared):
            logger.debug("Incompatible gaps between %s and %s", record1.name, record2.name)
            return False
        tail = tail_positions(cov1, cov2)
        return self.similarity_test(record1, record2, shared, tail)

    def similarity_test(
        self,
        record1: AlignmentRecord,
        record2: AlignmentRecord,
        shared: Sequence[int],
        tail: Sequence[int],
    ) -> bool:
        """
        Return whether the two records are similar enough to come from the
        same haplotype.

        shared -- positions covered by both records, ascending
        tail -- positions covered by exactly one record, ascending
        """
        category = self.category(record1, record2)
        cutoff = self.cutoff_for(category)
        min_overlap = self.min_overlap_for(category)
        smaller = min(len(record1), len(record2))
        if len(shared) <= min_overlap * smaller:
            logger.debug(
                "Overlap of %d positions between %s and %s is too small",
                len(shared),
                record1.name,
                record2.name,
            )
            return False
        score = self._normalized_score(record1, record2, shared, tail)
        logger.debug(
            "Score %.6f for %s and %s (%s cutoff %s)",
            score,
            record1.name,
            record2.name,
            category.value,
            cutoff,
        )
        return score >= cutoff

    def score(self, record1: AlignmentRecord, record2: AlignmentRecord) -> float:
        """
        Return the length-normalized probability that both records were
        sampled from the same haplotype. The records must share a position.
        """
        cov1 = record1.covered_positions()
        cov2 = record2.covered_positions()
        shared = shared_positions(cov1, cov2)
        if not shared:
            raise ValueError(f"Records {record1.name} and {record2.name} do not overlap")
        return self._normalized_score(record1, record2, shared, tail_positions(cov1, cov2))

    def _normalized_score(self, record1, record2, shared, tail) -> float:
        # Geometric mean over all evaluated positions, in log space
        log_probability = log_match_likelihood(
            shared, record1.covered_positions(), record2.covered_positions()
        ) + log_null_likelihood(tail, self._diversity)
        return exp(log_probability / (len(shared) + len(tail)))

    def partner_length_range(self, record: AlignmentRecord) -> Tuple[int, int]:
        """
        Return the (minimum, maximum) length expected for the mate of a
        paired-end record.

        Raise UnsupportedOperationError if the record cannot provide it.
        """
        try:
            provider = record.partner_length_range  # type: ignore
        except AttributeError:
            raise UnsupportedOperationError(
                f"Record {record.name!r} does not provide a partner length range"
            ) from None
        return provider()

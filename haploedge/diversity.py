"""
Per-position allele diversity (Simpson index) tables

A table maps a 1-based reference position to the probability that two
haplotypes sampled independently agree at that position.
"""
import logging
from collections import Counter, defaultdict
from typing import Dict, Iterable, Mapping

from xopen import xopen

from haploedge.records import AlignmentRecord

logger = logging.getLogger(__name__)


class DiversityError(Exception):
    pass


def read_diversity_table(path) -> Dict[int, float]:
    """
    Read a tab-separated table with the columns position and value. Lines
    starting with '#' and empty lines are ignored. The file may be compressed.
    """
    table = {}
    with xopen(path, mode="rt") as f:
        for line_number, line in enumerate(f, start=1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            fields = line.split("\t")
            if len(fields) != 2:
                raise DiversityError(
                    f"Line {line_number} in {path}: expected 2 tab-separated fields, "
                    f"found {len(fields)}"
                )
            try:
                position = int(fields[0])
                value = float(fields[1])
            except ValueError as e:
                raise DiversityError(f"Line {line_number} in {path}: {e}") from None
            if not 0 <= value <= 1:
                raise DiversityError(
                    f"Line {line_number} in {path}: diversity value {value} not in [0, 1]"
                )
            table[position] = value
    logger.info("Read diversity values for %d positions from %s", len(table), path)
    return table


def write_diversity_table(table: Mapping[int, float], path) -> None:
    with xopen(path, mode="wt") as f:
        print("#position", "diversity", sep="\t", file=f)
        for position in sorted(table):
            print(position, f"{table[position]:.6g}", sep="\t", file=f)


def simpson_index(counts: Mapping[str, int]) -> float:
    """
    Return the probability that two bases drawn (with replacement) from the
    given base counts are identical.
    """
    total = sum(counts.values())
    if total == 0:
        raise ValueError("no bases counted")
    return sum((n / total) ** 2 for n in counts.values())


def compute_diversity(records: Iterable[AlignmentRecord]) -> Dict[int, float]:
    """Return the Simpson index of the base calls at each covered position"""
    counts: Dict[int, Counter] = defaultdict(Counter)
    for record in records:
        for position, observation in record.covered_positions().items():
            counts[position][observation.base] += 1
    return {position: simpson_index(counts[position]) for position in sorted(counts)}

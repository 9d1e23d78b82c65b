"""
Set operations on the coverage maps of two records
"""
from typing import List, Mapping


def shared_positions(cov1: Mapping, cov2: Mapping) -> List[int]:
    """Return the positions covered by both maps in ascending order"""
    return sorted(pos for pos in cov1 if pos in cov2)


def tail_positions(cov1: Mapping, cov2: Mapping) -> List[int]:
    """
    Return the positions covered by exactly one of the two maps in ascending
    order.
    """
    tail = [pos for pos in cov1 if pos not in cov2]
    tail.extend(pos for pos in cov2 if pos not in cov1)
    tail.sort()
    return tail

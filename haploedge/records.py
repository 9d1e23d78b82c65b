"""
Aligned reads and read clusters as seen by the edge calculator
"""
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Tuple

BASES = "ACGT"

# Substring by which upstream tools mark merged read clusters in record names
CLIQUE_MARKER = "Clique"


@dataclass(frozen=True)
class Observation:
    """What a single read (or read cluster) shows at one reference position"""

    base: str
    quality: int
    pir: int  # position within the read
    read: int = 0  # read-group identifier; a change between positions is a "jump"


class RecordKind(Enum):
    READ = "read"
    CLIQUE = "clique"

    @classmethod
    def from_name(cls, name: str) -> "RecordKind":
        """Classify a record by the naming convention of merged read clusters"""
        return cls.CLIQUE if CLIQUE_MARKER in name else cls.READ


class AlignmentRecord:
    """
    A single aligned read or a previously merged cluster of reads.

    The coverage map is stored sorted by reference position, so iterating over
    it always yields positions in ascending order.
    """

    def __init__(
        self,
        name: str,
        coverage: Mapping[int, Observation],
        kind: RecordKind = RecordKind.READ,
    ):
        self.name = name
        self.kind = kind
        self._coverage: Dict[int, Observation] = dict(sorted(coverage.items()))

    def covered_positions(self) -> Mapping[int, Observation]:
        return MappingProxyType(self._coverage)

    @property
    def is_clique(self) -> bool:
        return self.kind is RecordKind.CLIQUE

    @property
    def start(self) -> int:
        return next(iter(self._coverage))

    @property
    def end(self) -> int:
        return next(reversed(self._coverage))

    def __len__(self) -> int:
        return len(self._coverage)

    def __repr__(self):
        return f"AlignmentRecord({self.name!r}, kind={self.kind.name}, positions={len(self)})"


class PairedAlignmentRecord(AlignmentRecord):
    """
    A record made of two mates of a read pair. It knows the expected range of
    lengths of its partner, which plain records do not.
    """

    def __init__(
        self,
        name: str,
        coverage: Mapping[int, Observation],
        partner_range: Tuple[int, int],
        kind: RecordKind = RecordKind.READ,
    ):
        super().__init__(name, coverage, kind)
        self._partner_range = partner_range

    def partner_length_range(self) -> Tuple[int, int]:
        return self._partner_range

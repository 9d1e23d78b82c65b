import logging
from typing import Iterator, List, Sequence, Tuple

import networkx as nx

from haploedge.edges import EdgeCalculator
from haploedge.records import AlignmentRecord

logger = logging.getLogger(__name__)


def candidate_pairs(records: Sequence[AlignmentRecord]) -> Iterator[Tuple[int, int]]:
    """
    Yield index pairs (i, j) with i < j of records whose reference spans
    overlap. Records must be sorted by start position.
    """
    active: List[int] = []
    for i, record in enumerate(records):
        active = [j for j in active if records[j].end >= record.start]
        for j in active:
            yield j, i
        active.append(i)


def overlap_graph(records: Sequence[AlignmentRecord], calculator: EdgeCalculator) -> nx.Graph:
    """
    Return a graph with one node per record (node i is records[i]) and an edge
    between every pair of records that the calculator considers to come from
    the same haplotype.
    """
    records = list(records)
    assert all(
        a.start <= b.start for a, b in zip(records[:-1], records[1:])
    ), "records must be sorted by start position"
    logger.info("Computing overlap graph of %d records ...", len(records))
    graph = nx.Graph()
    for i, record in enumerate(records):
        graph.add_node(i, name=record.name, start=record.start, end=record.end)
    n_candidates = 0
    for i, j in candidate_pairs(records):
        n_candidates += 1
        if calculator.edge_between(records[i], records[j]):
            graph.add_edge(i, j)
    logger.info(
        "Evaluated %d candidate pairs. Nodes: %s - Edges: %s - ConnComp: %s",
        n_candidates,
        nx.number_of_nodes(graph),
        nx.number_of_edges(graph),
        nx.number_connected_components(graph),
    )
    return graph

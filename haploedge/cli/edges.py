"""
Compute the overlap graph of aligned reads

Reads are taken from file ALIGNMENTS (indexed BAM or CRAM). Two reads are
connected by an edge if they probably come from the same haplotype. Each edge is
written as one tab-separated line with the names of both reads and their score.
"""
import logging
from typing import Optional

from xopen import xopen

from haploedge.cli import CommandLineError, load_diversity_table, read_records
from haploedge.edges import EdgeCalculator, EdgeParameters
from haploedge.graph import overlap_graph

logger = logging.getLogger(__name__)

DEFAULTS = EdgeParameters()


# fmt: off
def add_arguments(parser):
    arg = parser.add_argument
    arg("-o", "--output", default="-",
        help="Output file. If omitted, use standard output. If the name ends in .gz, "
        "output is gzipped.")
    arg("--reference", "-r", metavar="FASTA",
        help="Reference file, only needed for CRAM input")
    arg("--diversity", metavar="TSV", default=None,
        help="Table of per-position diversity values as written by 'haploedge diversity'. "
        "Positions not in the table use a value of 0.25.")
    arg("--no-mate-pairing", dest="pair_mates", default=True, action="store_false",
        help="Treat the two mates of a read pair as separate reads")
    arg("--edge-cutoff-cliques", type=float, default=DEFAULTS.edge_cutoff_cliques,
        help="Score cutoff for pairs of cliques (default: %(default)s)")
    arg("--edge-cutoff-mixed", type=float, default=DEFAULTS.edge_cutoff_mixed,
        help="Score cutoff for a clique paired with a read (default: %(default)s)")
    arg("--edge-cutoff-single", type=float, default=DEFAULTS.edge_cutoff_single,
        help="Score cutoff for pairs of reads (default: %(default)s)")
    arg("--min-overlap-cliques", type=float, default=DEFAULTS.min_overlap_cliques,
        help="Minimum fraction of the smaller clique that must be shared by "
        "two cliques (default: %(default)s)")
    arg("--min-overlap-single", type=float, default=DEFAULTS.min_overlap_single,
        help="Minimum fraction of the smaller record that must be shared by all "
        "other pairs (default: %(default)s)")
    arg("--quality", type=float, default=DEFAULTS.quality,
        help="Quality model parameter (default: %(default)s)")
    arg("--frameshift-merge", default=False, action="store_true",
        help="Allow frameshifts when cliques are merged later on")
    arg("alignment_file", metavar="ALIGNMENTS", help="BAM/CRAM file with aligned reads")
    arg("chromosome", metavar="CHROMOSOME", help="Name of the reference sequence to use")
# fmt: on


def validate(args, parser):
    try:
        parameters_from_args(args).validate()
    except ValueError as e:
        parser.error(str(e))


def parameters_from_args(args) -> EdgeParameters:
    return EdgeParameters(
        quality=args.quality,
        edge_cutoff_cliques=args.edge_cutoff_cliques,
        edge_cutoff_mixed=args.edge_cutoff_mixed,
        edge_cutoff_single=args.edge_cutoff_single,
        min_overlap_cliques=args.min_overlap_cliques,
        min_overlap_single=args.min_overlap_single,
        frameshift_merge=args.frameshift_merge,
    )


def run_edges(
    alignment_file,
    chromosome: str,
    output="-",
    reference: Optional[str] = None,
    diversity: Optional[str] = None,
    pair_mates: bool = True,
    parameters: Optional[EdgeParameters] = None,
):
    """
    Read the alignments on chromosome, compute the overlap graph and write its
    edges to output.
    """
    table = load_diversity_table(diversity) if diversity is not None else None
    calculator = EdgeCalculator(parameters, table)
    records = read_records(alignment_file, chromosome, reference=reference, pair_mates=pair_mates)
    graph = overlap_graph(records, calculator)
    try:
        with xopen(output, mode="wt") as f:
            print("#name1", "name2", "score", sep="\t", file=f)
            for i, j in sorted(graph.edges()):
                score = calculator.score(records[i], records[j])
                print(records[i].name, records[j].name, f"{score:.6f}", sep="\t", file=f)
    except OSError as e:
        raise CommandLineError(f"Error while writing edges to {output}: {e}")
    logger.info("Wrote %d edges", graph.number_of_edges())


def main(args):
    run_edges(
        alignment_file=args.alignment_file,
        chromosome=args.chromosome,
        output=args.output,
        reference=args.reference,
        diversity=args.diversity,
        pair_mates=args.pair_mates,
        parameters=parameters_from_args(args),
    )

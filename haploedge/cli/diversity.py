"""
Compute per-position allele diversity from aligned reads

For every reference position covered by reads in ALIGNMENTS, the Simpson index
of the observed bases (the probability that two randomly drawn reads show the
same base) is written as a tab-separated table. The table can be passed to
'haploedge edges --diversity'.
"""
import logging

from haploedge.cli import CommandLineError, read_records
from haploedge.diversity import compute_diversity, write_diversity_table

logger = logging.getLogger(__name__)


# fmt: off
def add_arguments(parser):
    arg = parser.add_argument
    arg("-o", "--output", default="-",
        help="Output file. If omitted, use standard output. If the name ends in .gz, "
        "output is gzipped.")
    arg("--reference", "-r", metavar="FASTA",
        help="Reference file, only needed for CRAM input")
    arg("alignment_file", metavar="ALIGNMENTS", help="BAM/CRAM file with aligned reads")
    arg("chromosome", metavar="CHROMOSOME", help="Name of the reference sequence to use")
# fmt: on


def run_diversity(alignment_file, chromosome, output="-", reference=None):
    records = read_records(alignment_file, chromosome, reference=reference)
    table = compute_diversity(records)
    try:
        write_diversity_table(table, output)
    except OSError as e:
        raise CommandLineError(f"Error while writing diversity table to {output}: {e}")
    logger.info("Wrote diversity values for %d positions", len(table))


def main(args):
    run_diversity(args.alignment_file, args.chromosome, args.output, args.reference)

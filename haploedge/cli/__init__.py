import logging

from haploedge.bam import (
    AlignmentReader,
    AlignmentFileNotIndexedError,
    EmptyAlignmentFileError,
    ReferenceNotFoundError,
)
from haploedge.diversity import DiversityError, read_diversity_table

logger = logging.getLogger(__name__)


class CommandLineError(Exception):
    """An anticipated command-line error occurred. This ends up as a user-visible error message"""


def open_alignment_reader(path, **kwargs):
    try:
        reader = AlignmentReader(path, **kwargs)
    except OSError as e:
        raise CommandLineError(e)
    except AlignmentFileNotIndexedError as e:
        raise CommandLineError(
            "The file '{}' is not indexed. Please create the appropriate BAM/CRAM "
            'index with "samtools index"'.format(e.args[0])
        )
    except EmptyAlignmentFileError as e:
        raise CommandLineError(
            "No reads could be retrieved from '{}'. If this is a CRAM file, possibly the "
            "reference could not be found. Try to use --reference=...".format(e.args[0])
        )
    return reader


def read_records(path, chromosome, *, reference=None, pair_mates=True):
    """Return the list of records on the given chromosome, sorted by start"""
    with open_alignment_reader(path, reference=reference, pair_mates=pair_mates) as reader:
        try:
            records = list(reader.records(chromosome))
        except ReferenceNotFoundError:
            message = f"The chromosome {chromosome!r} was not found in the BAM/CRAM file."
            if chromosome.startswith("chr"):
                alternative = chromosome[3:]
            else:
                alternative = "chr" + chromosome
            if reader.has_reference(alternative):
                message += f" Found {alternative!r} instead"
            raise CommandLineError(message)
    logger.info("Read %d records from chromosome %s", len(records), chromosome)
    return records


def load_diversity_table(path):
    try:
        return read_diversity_table(path)
    except OSError as e:
        raise CommandLineError(f"Error while reading diversity table: {e}")
    except DiversityError as e:
        raise CommandLineError(e)

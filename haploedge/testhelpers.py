"""
Utility functions only used by unit tests
"""
import textwrap

from haploedge.records import AlignmentRecord, Observation, RecordKind


def string_to_record(name, s, quality=40, kind=RecordKind.READ, start=1):
    """
    Build a record from a string of bases. The first character is at reference
    position start. A space skips a reference position (a deletion in the
    read), a lowercase base is an insertion after the previous base (it
    occupies a position within the read, but no reference position). A '|'
    starts the next constituent read (a jump).
    """
    coverage = {}
    pos = start
    pir = 0
    read = 0
    for c in s:
        if c == "|":
            read += 1
            continue
        if c == " ":
            pos += 1
            continue
        if c.islower():
            pir += 1
            continue
        coverage[pos] = Observation(c, quality, pir, read)
        pos += 1
        pir += 1
    return AlignmentRecord(name, coverage, kind)


def string_to_records(s, quality=40, kind=RecordKind.READ):
    """
    Build one record per line. Leading characters '.' mark positions that the
    record does not cover, so that reads can be drawn as a pileup.
    """
    s = textwrap.dedent(s).strip("\n")
    records = []
    for index, line in enumerate(s.split("\n")):
        stripped = line.lstrip(".")
        offset = len(line) - len(stripped)
        records.append(
            string_to_record(f"Read {index + 1}", stripped, quality, kind, start=offset + 1)
        )
    return records

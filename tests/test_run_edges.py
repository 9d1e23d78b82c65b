import pytest

from haploedge.cli import CommandLineError
from haploedge.cli.diversity import run_diversity
from haploedge.cli.edges import run_edges
from haploedge.diversity import read_diversity_table
from haploedge.edges import EdgeParameters


def read_edges(path):
    with open(path) as f:
        lines = f.read().splitlines()
    assert lines[0] == "#name1\tname2\tscore"
    return [line.split("\t") for line in lines[1:]]


def test_edges(bam_path, tmp_path):
    out = tmp_path / "edges.tsv"
    parameters = EdgeParameters(min_overlap_single=0.5, edge_cutoff_single=0.4)
    run_edges(str(bam_path), "ref", output=str(out), parameters=parameters)
    edges = read_edges(out)
    assert len(edges) == 1
    name1, name2, score = edges[0]
    assert (name1, name2) == ("read1", "read2")
    assert float(score) == pytest.approx(0.25 ** (8 / 14), abs=1e-5)


def test_edges_default_parameters(bam_path, tmp_path):
    # read1 and read2 share six of ten positions, which is not more than 60 %
    out = tmp_path / "edges.tsv"
    run_edges(str(bam_path), "ref", output=str(out))
    assert read_edges(out) == []


def test_edges_with_diversity(bam_path, tmp_path):
    table_path = tmp_path / "diversity.tsv.gz"
    run_diversity(str(bam_path), "ref", output=str(table_path))
    table = read_diversity_table(table_path)
    assert set(table.values()) == {1.0}
    assert min(table) == 1

    out = tmp_path / "edges.tsv"
    run_edges(
        str(bam_path),
        "ref",
        output=str(out),
        diversity=str(table_path),
        parameters=EdgeParameters(min_overlap_single=0.5),
    )
    edges = read_edges(out)
    assert [e[:2] for e in edges] == [["read1", "read2"]]
    assert float(edges[0][2]) == pytest.approx(1.0, abs=1e-5)


def test_unknown_chromosome(bam_path, tmp_path):
    with pytest.raises(CommandLineError) as e:
        run_edges(str(bam_path), "chrref", output=str(tmp_path / "edges.tsv"))
    assert "Found 'ref' instead" in str(e.value)


def test_missing_alignment_file(tmp_path):
    with pytest.raises(CommandLineError):
        run_edges(str(tmp_path / "missing.bam"), "ref", output=str(tmp_path / "edges.tsv"))


def test_malformed_diversity_table(bam_path, tmp_path):
    table_path = tmp_path / "diversity.tsv"
    table_path.write_text("1\t2.0\n")
    with pytest.raises(CommandLineError):
        run_edges(str(bam_path), "ref", output=str(tmp_path / "e.tsv"), diversity=str(table_path))

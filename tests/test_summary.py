from pathlib import Path

import pandas as pd

from fasta_io.summary import SUMMARY_COLUMNS, summarize_fasta, write_summary


def test_summarize_fasta_builds_table(tmp_path: Path):
    path = tmp_path / "in.fasta"
    path.write_text(">a\nGGCC\nAATT\n>b\nAAAA\n", encoding="utf-8")

    frame = summarize_fasta(path)

    assert list(frame.columns) == SUMMARY_COLUMNS
    assert frame["description"].tolist() == ["a", "b"]
    assert frame["length"].tolist() == [8, 4]
    assert frame["gc_percent"].tolist() == [50.0, 0.0]


def test_write_summary_round_trips_through_csv(tmp_path: Path):
    path = tmp_path / "in.fasta"
    path.write_text(">x y\nacgt\n", encoding="utf-8")
    out_csv = write_summary(summarize_fasta(path), tmp_path / "out" / "summary.csv")

    loaded = pd.read_csv(out_csv)
    assert loaded.loc[0, "description"] == "x y"
    assert loaded.loc[0, "length"] == 4
    assert loaded.loc[0, "gc_percent"] == 50.0

"""Per-entry summary tables built on pandas."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import pandas as pd

from .config import DEFAULT_BUFFER_SIZE
from .reader import FastaReader, Source

logger = logging.getLogger(__name__)

SUMMARY_COLUMNS = ["description", "length", "gc_percent"]


def _gc_percent(sequence: str) -> float:
    if not sequence:
        return 0.0
    upper = sequence.upper()
    gc = upper.count("G") + upper.count("C")
    return round(gc / len(sequence) * 100.0, 2)


def summarize_fasta(source: Source, buffer_size: int = DEFAULT_BUFFER_SIZE) -> pd.DataFrame:
    """Return one row per entry with its description, length and GC content."""
    rows: list[dict[str, Any]] = []
    with FastaReader(source, buffer_size=buffer_size) as reader:
        for description, sequence in reader:
            rows.append(
                {
                    "description": description,
                    "length": len(sequence),
                    "gc_percent": _gc_percent(sequence),
                }
            )
    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)


def write_summary(frame: pd.DataFrame, out_csv: Path) -> Path:
    """Write a summary table as CSV, creating the parent directory."""
    out_csv = Path(out_csv)
    out_csv.parent.mkdir(parents=True, exist_ok=True)
    frame.to_csv(out_csv, index=False)
    logger.info("Summary with %d rows written to %s", len(frame), out_csv)
    return out_csv

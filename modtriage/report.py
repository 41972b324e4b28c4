# modtriage/report.py

from __future__ import annotations
import csv
from pathlib import Path
from typing import Iterable, List

from .model import COUNTER_NAMES, BatchResult, ScanRecord

METRICS_CSV = "metrics.csv"
EXCLUDED_CSV = "excluded.csv"
SUMMARY_TXT = "summary.txt"

HEADER: List[str] = [
    "file", "size_bytes", "keep", "reason", "score", "has_data", "has_assets",
    "infra_match", "mod_id", "name", "loader",
] + list(COUNTER_NAMES)


def _row(r: ScanRecord) -> List[object]:
    counters = r.counters
    return [
        r.file_name,
        r.size_bytes,
        str(r.keep).lower(),
        r.reason,
        r.score,
        str(r.has_data).lower(),
        str(r.has_assets).lower(),
        str(r.infra_match).lower(),
        r.mod_id,
        r.name,
        r.loader,
    ] + [counters[name] for name in COUNTER_NAMES]


def write_csv(out_path: Path, rows: Iterable[ScanRecord]) -> None:
    """Write scan records to a CSV file.

    Args:
        out_path (Path): Destination CSV file path.
        rows (Iterable[ScanRecord]): Records in enumeration order.

    Returns:
        None
    """
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with out_path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(HEADER)
        for r in rows:
            writer.writerow(_row(r))


def _mib(n: int) -> str:
    return f"{n / (1024 * 1024):.2f} MiB"


def render_summary(result: BatchResult, threshold: int, dry_run: bool) -> str:
    """Render the aggregate summary as plain text."""
    lines = [
        f"total archives: {len(result.records)}",
        f"kept: {len(result.kept)}",
        f"excluded: {len(result.excluded)}",
        f"total bytes: {result.total_bytes} ({_mib(result.total_bytes)})",
        f"kept bytes: {result.kept_bytes} ({_mib(result.kept_bytes)})",
        f"min signal: {threshold}",
        f"dry run: {str(dry_run).lower()}",
    ]
    reasons = result.reason_counts()
    if reasons:
        lines.append("")
        lines.append("excluded by reason:")
        for reason in sorted(reasons):
            lines.append(f"  {reason}: {reasons[reason]}")
    loaders = result.loader_counts()
    if loaders:
        lines.append("")
        lines.append("kept by loader:")
        for loader in sorted(loaders):
            lines.append(f"  {loader}: {loaders[loader]}")
    return "\n".join(lines) + "\n"


def write_reports(report_dir: Path, result: BatchResult, threshold: int, dry_run: bool) -> List[Path]:
    """Write metrics.csv, excluded.csv and summary.txt; return their paths."""
    metrics = report_dir / METRICS_CSV
    excluded = report_dir / EXCLUDED_CSV
    summary = report_dir / SUMMARY_TXT
    write_csv(metrics, result.records)
    write_csv(excluded, result.excluded)
    summary.parent.mkdir(parents=True, exist_ok=True)
    summary.write_text(render_summary(result, threshold, dry_run), encoding="utf-8")
    return [metrics, excluded, summary]

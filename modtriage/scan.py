# modtriage/scan.py

from __future__ import annotations
from pathlib import Path
from typing import Callable, List, Optional

from .archive import read_archive
from .classify import REASON_OPEN_FAILED, classify
from .keywords import KeywordSet, is_infra
from .model import BatchResult, ScanRecord, SignalAccumulator
from .signals import METADATA_PATHS, extract_signals
from .walk import iter_archives

RecordCallback = Callable[[ScanRecord], None]


def scan_archive(path: Path, keywords: KeywordSet, threshold: int) -> ScanRecord:
    """Read, extract, and classify one archive. Never raises for a bad archive."""
    size = path.stat().st_size if path.exists() else 0
    listing = read_archive(path, METADATA_PATHS)

    if listing is None:
        acc = SignalAccumulator()
        return acc.finalize(
            file_name=path.name,
            size_bytes=size,
            infra_match=keywords.matches(path.stem),
            keep=False,
            reason=REASON_OPEN_FAILED,
        )

    acc = extract_signals(listing)
    infra = is_infra(path.stem, acc.mod_id, keywords)
    keep, reason = classify(acc.score, acc.has_data, acc.has_assets, infra, threshold)
    return acc.finalize(
        file_name=path.name,
        size_bytes=size,
        infra_match=infra,
        keep=keep,
        reason=reason,
    )


def scan_directory(
    input_dir: Path,
    keywords: KeywordSet,
    threshold: int = 2,
    extension: str = ".jar",
    on_record: Optional[RecordCallback] = None,
) -> BatchResult:
    """Scan every archive directly inside input_dir, in name order.

    Raises:
        FileNotFoundError: If input_dir does not exist or is not a directory.
    """
    if not input_dir.is_dir():
        raise FileNotFoundError(f"Input directory not found: {input_dir}")

    records: List[ScanRecord] = []
    for fp in iter_archives(input_dir, extension):
        record = scan_archive(fp, keywords, threshold)
        records.append(record)
        if on_record is not None:
            on_record(record)
    return BatchResult(records=tuple(records))

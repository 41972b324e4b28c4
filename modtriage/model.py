# modtriage/model.py

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Mapping, Tuple

LOADER_FORGE = "forge"
LOADER_FABRIC = "fabric"
LOADER_QUILT = "quilt"
LOADER_UNKNOWN = "unknown"

COUNTER_NAMES: Tuple[str, ...] = (
    "recipes",
    "loot",
    "advancements",
    "tag",
    "tag:entity",
    "tag:biome",
    "tag:structure",
    "worldgen:biome",
    "worldgen:feature",
    "worldgen:placed-feature",
    "worldgen:structure",
    "worldgen:structure-set",
    "worldgen:dimension-type",
    "worldgen:dimension",
    "model",
    "lang",
    "sound",
)

# advancements and tag sub-counters are tracked but never scored
SCORE_COUNTERS: Tuple[str, ...] = tuple(
    name for name in COUNTER_NAMES
    if name != "advancements" and not name.startswith("tag:")
)


def signal_score(counters: Mapping[str, int]) -> int:
    """Sum the scoring subset of a counter mapping."""
    return sum(counters.get(name, 0) for name in SCORE_COUNTERS)


@dataclass(frozen=True)
class ArchiveEntry:
    """One file inside an archive."""
    path: str   # forward-slash path, no leading "./" or "/"
    size: int   # uncompressed bytes


@dataclass(frozen=True)
class ArchiveListing:
    """Entries of one archive plus the raw bytes of its readable metadata files."""
    entries: Tuple[ArchiveEntry, ...]
    metadata: Mapping[str, bytes] = field(default_factory=dict)


@dataclass(frozen=True)
class Identity:
    """Identity fields pulled from a metadata file. Either field may be empty."""
    mod_id: str = ""
    name: str = ""

    def __bool__(self) -> bool:
        return bool(self.mod_id or self.name)


@dataclass(frozen=True)
class ScanRecord:
    """Represents one classified archive (one row in the reports)."""
    file_name: str
    size_bytes: int
    counter_items: Tuple[Tuple[str, int], ...]
    has_data: bool
    has_assets: bool
    mod_id: str
    name: str
    loader: str        # one of: forge | fabric | quilt | unknown
    infra_match: bool
    keep: bool
    reason: str        # empty when kept

    @property
    def counters(self) -> Mapping[str, int]:
        return MappingProxyType(dict(self.counter_items))

    @property
    def score(self) -> int:
        return signal_score(self.counters)


class SignalAccumulator:
    """Mutable builder filled during the single entry pass, then finalized once."""

    def __init__(self) -> None:
        self.counters: Dict[str, int] = {name: 0 for name in COUNTER_NAMES}
        self.has_data = False
        self.has_assets = False
        self.mod_id = ""
        self.name = ""
        self.loader = LOADER_UNKNOWN

    def bump(self, counter: str) -> None:
        self.counters[counter] += 1

    def add_identity(self, loader: str, identity: Identity) -> None:
        """Fill identity fields that are still empty; earlier sources win."""
        if not identity:
            return
        if self.loader == LOADER_UNKNOWN:
            self.loader = loader
        if not self.mod_id and identity.mod_id:
            self.mod_id = identity.mod_id
        if not self.name and identity.name:
            self.name = identity.name

    @property
    def score(self) -> int:
        return signal_score(self.counters)

    def finalize(
        self,
        file_name: str,
        size_bytes: int,
        infra_match: bool,
        keep: bool,
        reason: str,
    ) -> ScanRecord:
        return ScanRecord(
            file_name=file_name,
            size_bytes=size_bytes,
            counter_items=tuple((name, self.counters[name]) for name in COUNTER_NAMES),
            has_data=self.has_data,
            has_assets=self.has_assets,
            mod_id=self.mod_id,
            name=self.name,
            loader=self.loader,
            infra_match=infra_match,
            keep=keep,
            reason=reason,
        )


@dataclass(frozen=True)
class BatchResult:
    """All records of one run, partitioned into kept and excluded."""
    records: Tuple[ScanRecord, ...]

    @property
    def kept(self) -> Tuple[ScanRecord, ...]:
        return tuple(r for r in self.records if r.keep)

    @property
    def excluded(self) -> Tuple[ScanRecord, ...]:
        return tuple(r for r in self.records if not r.keep)

    @property
    def total_bytes(self) -> int:
        return sum(r.size_bytes for r in self.records)

    @property
    def kept_bytes(self) -> int:
        return sum(r.size_bytes for r in self.kept)

    def reason_counts(self) -> Dict[str, int]:
        return dict(Counter(r.reason for r in self.excluded))

    def loader_counts(self) -> Dict[str, int]:
        return dict(Counter(r.loader for r in self.kept))


@dataclass(frozen=True)
class RunConfig:
    """Resolved settings for one run (JSON params merged with CLI flags)."""
    input_dir: Path
    output_dir: Path
    report_dir: Path
    min_signal: int = 2
    extension: str = ".jar"
    extra_keywords: Tuple[str, ...] = ()
    dry_run: bool = False
    verbose: bool = False

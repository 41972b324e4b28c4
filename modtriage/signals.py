# modtriage/signals.py

"""
Structural signal extraction: one pass over an archive listing, counting
entries by path rules and pulling identity from known metadata files.
"""
from __future__ import annotations
from typing import Callable, Dict, Sequence, Tuple
import json
import re

from .model import (
    LOADER_FABRIC,
    LOADER_FORGE,
    LOADER_QUILT,
    ArchiveListing,
    Identity,
    SignalAccumulator,
)

DATA_ROOT = "data"
ASSETS_ROOT = "assets"

# --- path rules -----------------------------------------------------------------
# A predicate receives the path segments after "<root>/<namespace>/".

Predicate = Callable[[Sequence[str]], bool]
Rule = Tuple[Predicate, str]


def _folder(*names: str) -> Predicate:
    """Match files below data/<ns>/<name>/ for any of the given names."""
    return lambda rest: len(rest) > 1 and rest[0] in names


def _subfolder(parent: str, *names: str) -> Predicate:
    """Match files below data/<ns>/<parent>/<name>/."""
    return lambda rest: len(rest) > 2 and rest[0] == parent and rest[1] in names


DATA_RULES: Tuple[Rule, ...] = (
    (_folder("recipes", "recipe"), "recipes"),
    (_folder("loot_tables", "loot_table"), "loot"),
    (_folder("advancements", "advancement"), "advancements"),
    (_folder("tags"), "tag"),
    (_subfolder("worldgen", "biome"), "worldgen:biome"),
    (_subfolder("worldgen", "configured_feature"), "worldgen:feature"),
    (_subfolder("worldgen", "placed_feature"), "worldgen:placed-feature"),
    (_subfolder("worldgen", "structure"), "worldgen:structure"),
    (_subfolder("worldgen", "structure_set"), "worldgen:structure-set"),
    (_folder("dimension_type"), "worldgen:dimension-type"),
    (_folder("dimension"), "worldgen:dimension"),
)

# Applied to segments after "tags/"; informational, a subset of "tag".
TAG_RULES: Tuple[Rule, ...] = (
    (lambda rest: len(rest) > 1 and rest[0] in ("entity_types", "entity_type"), "tag:entity"),
    (lambda rest: len(rest) > 2 and rest[0] == "worldgen" and rest[1] == "biome", "tag:biome"),
    (lambda rest: len(rest) > 2 and rest[0] == "worldgen" and rest[1] == "structure", "tag:structure"),
)

ASSET_RULES: Tuple[Rule, ...] = (
    (lambda rest: len(rest) > 1 and rest[0] == "models", "model"),
    (lambda rest: len(rest) == 2 and rest[0] == "lang" and rest[1].lower().endswith(".json"), "lang"),
    (lambda rest: len(rest) == 1 and rest[0] == "sounds.json", "sound"),
)


def match_rule(rules: Sequence[Rule], rest: Sequence[str]) -> str | None:
    """Return the counter of the first rule that matches, or None."""
    for predicate, counter in rules:
        if predicate(rest):
            return counter
    return None


# --- metadata readers ------------------------------------------------------------


def _manifest_field(key: str) -> re.Pattern[str]:
    return re.compile(
        r"^[ \t]*" + key + r"[ \t]*=[ \t]*(?:\"([^\"\r\n]*)\"|'([^'\r\n]*)')",
        re.IGNORECASE | re.MULTILINE,
    )


_MANIFEST_ID = _manifest_field("modId")
_MANIFEST_NAME = _manifest_field("displayName")
# dependency tables may also carry modId; identity comes from [[mods]] onward
_MODS_HEADER = re.compile(r"^[ \t]*\[\[[ \t]*mods[ \t]*\]\]", re.IGNORECASE | re.MULTILINE)


def _quoted(match: re.Match[str] | None) -> str:
    if match is None:
        return ""
    value = match.group(1) if match.group(1) is not None else match.group(2)
    return value.strip()


def _decode(raw: bytes) -> str | None:
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        return None


def read_manifest_identity(raw: bytes) -> Identity | None:
    """Pull modId/displayName from a mods.toml by line pattern, not a full TOML parse."""
    text = _decode(raw)
    if text is None:
        return None
    header = _MODS_HEADER.search(text)
    start = header.start() if header else 0
    identity = Identity(
        mod_id=_quoted(_MANIFEST_ID.search(text, start)),
        name=_quoted(_MANIFEST_NAME.search(text, start)),
    )
    return identity or None


def _str_field(obj: object, *keys: str) -> str:
    """Walk nested dict keys and return a stripped string, or ''."""
    for key in keys:
        if not isinstance(obj, dict):
            return ""
        obj = obj.get(key)
    return obj.strip() if isinstance(obj, str) else ""


def read_descriptor_identity(raw: bytes) -> Identity | None:
    """Pull id/name from a fabric.mod.json or quilt.mod.json descriptor."""
    text = _decode(raw)
    if text is None:
        return None
    try:
        data = json.loads(text, strict=False)
    except (ValueError, RecursionError):
        return None
    if not isinstance(data, dict):
        return None

    mod_id = _str_field(data, "id") or _str_field(data, "quilt_loader", "id")
    name = (
        _str_field(data, "name")
        or _str_field(data, "metadata", "name")
        or _str_field(data, "quilt_loader", "metadata", "name")
    )
    identity = Identity(mod_id=mod_id, name=name)
    return identity or None


MetadataReader = Callable[[bytes], "Identity | None"]

METADATA_SOURCES: Dict[str, Tuple[str, MetadataReader]] = {
    "META-INF/mods.toml": (LOADER_FORGE, read_manifest_identity),
    "META-INF/neoforge.mods.toml": (LOADER_FORGE, read_manifest_identity),
    "fabric.mod.json": (LOADER_FABRIC, read_descriptor_identity),
    "quilt.mod.json": (LOADER_QUILT, read_descriptor_identity),
}
METADATA_PATHS: Tuple[str, ...] = tuple(METADATA_SOURCES)


def _read_identity(reader: MetadataReader, raw: bytes) -> Identity | None:
    """Run a metadata reader; anything it raises counts as a failed read."""
    try:
        return reader(raw)
    except Exception:
        return None


# --- public API -----------------------------------------------------------------


def extract_signals(listing: ArchiveListing) -> SignalAccumulator:
    """Count structural signals and collect identity in a single pass over entries."""
    acc = SignalAccumulator()

    for entry in listing.entries:
        parts = entry.path.split("/")
        root = parts[0]

        if root == DATA_ROOT and len(parts) > 1:
            acc.has_data = True
            rest = parts[2:]
            counter = match_rule(DATA_RULES, rest)
            if counter is None:
                continue
            acc.bump(counter)
            if counter == "tag":
                sub = match_rule(TAG_RULES, rest[1:])
                if sub is not None:
                    acc.bump(sub)

        elif root == ASSETS_ROOT and len(parts) > 1:
            acc.has_assets = True
            counter = match_rule(ASSET_RULES, parts[2:])
            if counter is not None:
                acc.bump(counter)

        elif entry.path in METADATA_SOURCES:
            raw = listing.metadata.get(entry.path)
            if raw is None:
                continue
            loader, reader = METADATA_SOURCES[entry.path]
            identity = _read_identity(reader, raw)
            if identity is None:
                continue
            acc.add_identity(loader, identity)

    return acc

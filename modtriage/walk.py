# modtriage/walk.py

from __future__ import annotations
from pathlib import Path
from typing import Iterator


def normalize_extension(ext: str) -> str:
    """Return '.ext' in lower case for 'ext', '.EXT', etc."""
    ext = (ext or "").strip().lower()
    if ext and not ext.startswith("."):
        ext = "." + ext
    return ext


def iter_archives(root: Path, extension: str = ".jar") -> Iterator[Path]:
    """Iterate over archives directly inside a directory (not recursive).

    Args:
        root (Path): Directory to scan.
        extension (str): Archive extension to accept, case-insensitive.

    Yields:
        Path: Matching regular files, sorted by name.
    """
    ext = normalize_extension(extension)
    for p in sorted(root.iterdir(), key=lambda x: x.name):
        if p.is_file() and p.suffix.lower() == ext:
            yield p

# modtriage/output.py

from __future__ import annotations
from pathlib import Path
import shutil


def overlaps(target: Path, protected: Path) -> bool:
    """True if target is protected itself or one of its parents."""
    t = target.resolve()
    p = protected.resolve()
    return t == p or t in p.parents


def reset_dir(path: Path) -> None:
    """Delete a directory tree if present and recreate it empty."""
    if path.is_dir():
        shutil.rmtree(path)
    elif path.exists():
        path.unlink()
    path.mkdir(parents=True, exist_ok=True)


def copy_archive(src: Path, dest_dir: Path) -> Path | Exception:
    """Copy an archive byte-for-byte into dest_dir, overwriting a same-name file.

    Returns the destination Path, or the caught Exception object if the copy
    fails.

    Args:
        src (Path): Archive to copy.
        dest_dir (Path): Existing output directory.

    Returns:
        Path | Exception: Result of the copy operation.
    """
    try:
        dest = dest_dir / src.name
        shutil.copy2(src, dest)
        return dest
    except Exception as exc:
        return exc

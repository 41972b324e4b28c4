# modtriage/archive.py

from __future__ import annotations
from pathlib import Path
from typing import Dict, Iterable, List
import zipfile
import zlib

from .model import ArchiveEntry, ArchiveListing

# everything zipfile can raise on a damaged or foreign file
_OPEN_ERRORS = (
    zipfile.BadZipFile,
    zipfile.LargeZipFile,
    OSError,
    EOFError,
    ValueError,
    RuntimeError,
    NotImplementedError,
    zlib.error,
)


def normalize_entry_path(name: str) -> str:
    """Return an entry name with forward slashes and no leading './' or '/'."""
    path = name.replace("\\", "/")
    while path.startswith("./"):
        path = path[2:]
    return path.lstrip("/")


def _read_metadata(z: zipfile.ZipFile, infos: Iterable[zipfile.ZipInfo], wanted: Iterable[str]) -> Dict[str, bytes]:
    """Read the raw bytes of each wanted metadata entry; unreadable ones are left out."""
    wanted_set = set(wanted)
    out: Dict[str, bytes] = {}
    for info in infos:
        path = normalize_entry_path(info.filename)
        if path not in wanted_set or path in out:
            continue
        try:
            out[path] = z.read(info)
        except _OPEN_ERRORS:
            continue
    return out


def read_archive(path: Path, metadata_paths: Iterable[str] = ()) -> ArchiveListing | None:
    """Open a mod archive and list its file entries.

    The archive handle is closed before returning on every path. Directory
    entries are skipped.

    Args:
        path (Path): Archive on disk.
        metadata_paths (Iterable[str]): Entry paths whose bytes should be read
            while the archive is open.

    Returns:
        ArchiveListing | None: The listing, or None if the file cannot be
        opened or listed as a zip archive.
    """
    try:
        with zipfile.ZipFile(path, "r") as z:
            infos = [i for i in z.infolist() if not i.is_dir()]
            entries: List[ArchiveEntry] = [
                ArchiveEntry(path=normalize_entry_path(i.filename), size=i.file_size)
                for i in infos
            ]
            metadata = _read_metadata(z, infos, metadata_paths)
    except _OPEN_ERRORS:
        return None
    return ArchiveListing(entries=tuple(entries), metadata=metadata)

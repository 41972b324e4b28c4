"""Shared fixtures for the mod triage test suite."""
from __future__ import annotations

import json
import zipfile
from pathlib import Path
from typing import Callable, Dict, Union

import pytest

from modtriage.keywords import KeywordSet

Content = Union[str, bytes]
JarFactory = Callable[..., Path]


def write_jar(path: Path, files: Dict[str, Content]) -> Path:
    """Write a zip archive whose entries are the given path -> content pairs.

    Paths ending in "/" are written as directory entries.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_STORED) as z:
        for name, content in files.items():
            if name.endswith("/"):
                z.writestr(zipfile.ZipInfo(name), b"")
            else:
                z.writestr(name, content)
    return path


@pytest.fixture
def mods_dir(tmp_path: Path) -> Path:
    d = tmp_path / "mods"
    d.mkdir()
    return d


@pytest.fixture
def make_jar(mods_dir: Path) -> JarFactory:
    """Factory: make_jar("name.jar", {"entry/path": "content"}) -> Path in mods_dir."""

    def _make(name: str, files: Dict[str, Content], directory: Path | None = None) -> Path:
        return write_jar((directory or mods_dir) / name, files)

    return _make


@pytest.fixture
def keywords() -> KeywordSet:
    return KeywordSet.default()


@pytest.fixture
def content_files() -> Dict[str, Content]:
    """A small gameplay mod: recipes, loot, worldgen and assets."""
    return {
        "fabric.mod.json": json.dumps({"id": "dragonquests", "name": "Dragon Quests"}),
        "data/dragonquests/recipe/scale_armor.json": "{}",
        "data/dragonquests/recipe/scale_sword.json": "{}",
        "data/dragonquests/loot_table/chests/lair.json": "{}",
        "data/dragonquests/worldgen/structure/lair.json": "{}",
        "assets/dragonquests/lang/en_us.json": "{}",
        "assets/dragonquests/models/item/scale.json": "{}",
    }


@pytest.fixture
def library_files() -> Dict[str, Content]:
    """A code-only library: a manifest and classes, no data or assets."""
    return {
        "META-INF/mods.toml": 'modLoader="javafml"\n[[mods]]\nmodId="geckolib"\ndisplayName="GeckoLib"\n',
        "software/bernie/geckolib/GeckoLib.class": b"\xca\xfe\xba\xbe",
    }

# modtriage/keywords.py

from __future__ import annotations
from typing import Iterable, Tuple
import re

# Loader names, library naming conventions, and well-known library/infra mod ids.
DEFAULT_KEYWORDS: Tuple[str, ...] = (
    # loaders
    "forge", "neoforge", "fabric", "fabricloader", "quilt", "qsl", "minecraftforge",
    # naming conventions
    "api", "lib", "library", "libs", "core", "compat", "framework", "toolkit",
    "kotlin", "scala", "mixin", "mixinextras",
    # curated library / infra mods
    "architectury", "cloth-config", "clothconfig", "geckolib", "playeranimator",
    "jei", "rei", "emi", "patchouli", "curios", "trinkets", "accessories",
    "kotlinforforge", "fabric-language-kotlin", "balm", "bookshelf", "puzzleslib",
    "moonlight", "citadel", "terrablender", "owo", "owo-lib", "resourcefullib",
    "resourcefulconfig", "creativecore", "collective", "cupboard", "midnightlib",
    "yacl", "yet-another-config-lib", "modmenu", "forgeconfigapiport",
    "cardinal-components", "fzzy-config", "lithostitched", "blueprint",
    "autoreglib", "kffmod", "sodium", "lithium", "iris", "ferritecore",
    "modernfix", "entityculling", "krypton", "starlight", "c2me", "jade",
    "wthit", "appleskin", "configured", "catalogue", "controlling", "searchables",
    "placebo", "supermartijn642corelib", "supermartijn642configlib", "prism",
    "iceberg", "mru", "coroutil", "zeta", "lodestone", "smartbrainlib",
)

_SEP = r"[^a-z0-9]+"


def normalize_keyword(word: str) -> str:
    return word.strip().lower()


def _word_pattern(keyword: str) -> re.Pattern[str]:
    """Whole-word pattern: alphanumeric runs bounded by separators or string ends."""
    parts = [re.escape(p) for p in re.split(_SEP, keyword) if p]
    return re.compile(r"(?<![a-z0-9])" + _SEP.join(parts) + r"(?![a-z0-9])")


class KeywordSet:
    """Immutable, sorted, deduplicated set of infra keywords with whole-word matching."""

    __slots__ = ("_words", "_patterns")

    def __init__(self, words: Iterable[str]) -> None:
        cleaned = {normalize_keyword(w) for w in words}
        cleaned = {w for w in cleaned if re.search(r"[a-z0-9]", w)}
        self._words: Tuple[str, ...] = tuple(sorted(cleaned))
        self._patterns = tuple((w, _word_pattern(w)) for w in self._words)

    @classmethod
    def default(cls, extra: Iterable[str] = ()) -> "KeywordSet":
        return cls(tuple(DEFAULT_KEYWORDS) + tuple(extra))

    @property
    def words(self) -> Tuple[str, ...]:
        return self._words

    def __len__(self) -> int:
        return len(self._words)

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and normalize_keyword(word) in self._words

    def first_match(self, candidate: str) -> str | None:
        """Return the first keyword found as a whole word in candidate, or None."""
        text = (candidate or "").lower()
        if not text:
            return None
        for word, pattern in self._patterns:
            if pattern.search(text):
                return word
        return None

    def matches(self, candidate: str) -> bool:
        return self.first_match(candidate) is not None


def is_infra(stem: str, mod_id: str, keywords: KeywordSet) -> bool:
    """True if the file stem or (when present) the mod id hits a keyword."""
    if keywords.matches(stem):
        return True
    return bool(mod_id) and keywords.matches(mod_id)

# modtriage/classify.py

from __future__ import annotations
from typing import Tuple

REASON_INFRA = "infra/library keyword match"
REASON_EMPTY = "no assets/data present"
REASON_OPEN_FAILED = "archive open failed"
REASON_FALLBACK = "heuristic skip"


def low_signal_reason(threshold: int) -> str:
    return f"low signal (score<{threshold})"


def classify(
    score: int,
    has_data: bool,
    has_assets: bool,
    infra: bool,
    threshold: int,
) -> Tuple[bool, str]:
    """Decide whether an archive is content (keep) or infrastructure (exclude).

    A score at or above the threshold keeps the archive regardless of name.
    Below it, any data/assets presence keeps it unless it looks like a
    library add-on. With neither root present it is excluded.

    Returns:
        Tuple[bool, str]: (keep, reason); reason is empty when kept.
    """
    if score >= threshold:
        keep = True
    elif has_data or has_assets:
        keep = not infra
    else:
        keep = False

    if keep:
        return True, ""
    if infra:
        return False, REASON_INFRA
    if not (has_data or has_assets):
        return False, REASON_EMPTY
    if score < threshold:
        return False, low_signal_reason(threshold)
    return False, REASON_FALLBACK

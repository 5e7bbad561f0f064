from __future__ import annotations
from collections import Counter
from typing import Dict, List, Optional, Sequence, Tuple
from .types import BOARD_SIZE, GROUP_COUNT, GROUP_SIZE, SolutionGroup, Word


def normalize_label(w: str) -> str:
    return " ".join(w.strip().upper().split())


def check_partition(words: Sequence[Word]) -> Tuple[bool, str]:
    """
    Check that the words partition into GROUP_COUNT groups of GROUP_SIZE.
    Rules:
    - exactly 16 words
    - group ids are exactly 0..3, each held by 4 words
    - labels are non-empty and unique (compared after normalization)
    """
    if len(words) != BOARD_SIZE:
        return False, f"Expected {BOARD_SIZE} words, got {len(words)}."

    for w in words:
        if not isinstance(w, Word):
            return False, f"Expected Word records, got {type(w).__name__}."
        if not isinstance(w.label, str) or not normalize_label(w.label):
            return False, "Word labels must be non-empty strings."

    counts = Counter(w.group_id for w in words)
    expected_ids = set(range(GROUP_COUNT))
    if set(counts) != expected_ids:
        return False, f"Group ids must be exactly {sorted(expected_ids)}, got {sorted(counts, key=repr)}."

    short = {gid: n for gid, n in counts.items() if n != GROUP_SIZE}
    if short:
        return False, f"Each group needs {GROUP_SIZE} words; got counts {dict(sorted(short.items()))}."

    seen = set()
    dups = []
    for w in words:
        key = normalize_label(w.label)
        if key in seen:
            dups.append(key)
        seen.add(key)
    if dups:
        return False, f"Duplicate entries found: {sorted(set(dups))}"
    return True, ""


def build_groups(words: Sequence[Word], themes: Optional[Dict[int, str]] = None) -> Tuple[SolutionGroup, ...]:
    """Collect the words into SolutionGroups, ordered by group id."""
    themes = themes or {}
    by_id: Dict[int, List[Word]] = {}
    for w in words:
        by_id.setdefault(w.group_id, []).append(w)
    return tuple(
        SolutionGroup(group_id=gid, words=tuple(by_id[gid]), theme=themes.get(gid, ""))
        for gid in sorted(by_id)
    )

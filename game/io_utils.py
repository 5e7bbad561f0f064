from __future__ import annotations
from pathlib import Path
from typing import Dict, List, Sequence, Tuple
from pydantic import BaseModel, Field, ValidationError
from .errors import InvalidPuzzleDefinition
from .groups import check_partition, normalize_label
from .types import GROUP_COUNT, GROUP_SIZE, Word

ParsedGroup = Tuple[str, List[str]]


class GroupSpec(BaseModel):
    theme: str = ""
    words: List[str] = Field(..., min_length=GROUP_SIZE, max_length=GROUP_SIZE)


class PuzzleFile(BaseModel):
    groups: List[GroupSpec] = Field(..., min_length=GROUP_COUNT, max_length=GROUP_COUNT)


def parse_groups(text: str) -> List[ParsedGroup]:
    """
    Parse a puzzle from raw text, one group per line.
    Rules:
    - Blank lines are skipped
    - A line is either "THEME: W1, W2, W3, W4" or just "W1, W2, W3, W4"
    - Entries are comma-separated; internal spaces in phrases are kept
    - Normalize by stripping, collapsing multiple spaces, and uppercasing
    """
    groups: List[ParsedGroup] = []
    for line in text.strip().splitlines():
        line = line.strip()
        if not line:
            continue
        theme = ""
        if ":" in line:
            theme, line = line.split(":", 1)
            theme = " ".join(theme.split())
        words = [normalize_label(p) for p in line.split(",")]
        groups.append((theme, [w for w in words if w]))
    return groups


def words_from_groups(groups: Sequence[ParsedGroup]) -> Tuple[List[Word], Dict[int, str]]:
    # group ids follow line order
    words: List[Word] = []
    themes: Dict[int, str] = {}
    for gid, (theme, labels) in enumerate(groups):
        if theme:
            themes[gid] = theme
        words.extend(Word(label=normalize_label(w), group_id=gid) for w in labels)
    return words, themes


def validate_words(words: Sequence[Word]) -> Tuple[bool, str]:
    return check_partition(words)


def load_puzzle(path: str) -> List[ParsedGroup]:
    """Read a puzzle from a .json file (PuzzleFile schema) or a plain text file."""
    p = Path(path)
    text = p.read_text(encoding="utf-8")
    if p.suffix.lower() != ".json":
        return parse_groups(text)

    try:
        puzzle = PuzzleFile.model_validate_json(text)
    except ValidationError as e:
        raise InvalidPuzzleDefinition(f"Malformed puzzle file {path}: {e}") from e
    return [(g.theme.strip(), [normalize_label(w) for w in g.words]) for g in puzzle.groups]

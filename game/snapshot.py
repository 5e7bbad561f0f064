from __future__ import annotations
from pathlib import Path
from typing import Dict, List
from pydantic import BaseModel, Field, ValidationError
from .errors import InvalidPuzzleDefinition
from .types import MAX_MISTAKES, Status


class WordRecord(BaseModel):
    label: str
    group_id: int


class SessionSnapshot(BaseModel):
    """
    Plain-data copy of a PuzzleSession, enough to rebuild it with PuzzleSession.restore().
    `words` is in tile-id order; `order` holds the unsolved tile ids in display order.
    `guesses` is the full submit history; restore() replays it against
    `solved_groups` and `mistakes_remaining`.
    """

    words: List[WordRecord]
    themes: Dict[int, str] = Field(default_factory=dict)
    order: List[int]
    solved_groups: List[int] = Field(default_factory=list, description="Group ids in the order they were solved.")
    selection: List[int] = Field(default_factory=list)
    mistakes_remaining: int = MAX_MISTAKES
    status: Status = Status.IN_PROGRESS
    guesses: List[List[int]] = Field(default_factory=list)


def save_snapshot(session, path: str) -> str:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(session.snapshot().model_dump_json(indent=2), encoding="utf-8")
    return str(p)


def load_snapshot(path: str) -> SessionSnapshot:
    text = Path(path).read_text(encoding="utf-8")
    try:
        return SessionSnapshot.model_validate_json(text)
    except ValidationError as e:
        raise InvalidPuzzleDefinition(f"Malformed snapshot {path}: {e}") from e

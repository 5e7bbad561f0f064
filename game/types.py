from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

GROUP_COUNT = 4
GROUP_SIZE = 4
MAX_MISTAKES = 4
BOARD_SIZE = GROUP_COUNT * GROUP_SIZE


class Status(str, Enum):
    IN_PROGRESS = "in_progress"
    WON = "won"
    LOST = "lost"


@dataclass(frozen=True)
class Word:
    label: str
    group_id: int


@dataclass(frozen=True)
class SolutionGroup:
    group_id: int
    words: Tuple[Word, ...]
    theme: str = ""

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(w.label for w in self.words)


@dataclass(frozen=True)
class Tile:
    # tile_id is the word's index in the puzzle definition; display order lives on the session
    tile_id: int
    word: Word

    @property
    def label(self) -> str:
        return self.word.label

    @property
    def group_id(self) -> int:
        return self.word.group_id


@dataclass(frozen=True)
class SubmitResult:
    solved: bool
    group_id: Optional[int]
    mistakes_remaining: int
    status: Status
    one_away: bool = False

    def to_dict(self) -> dict:
        return {
            "solved": self.solved,
            "group_id": self.group_id,
            "mistakes_remaining": self.mistakes_remaining,
            "status": self.status.value,
            "one_away": self.one_away,
        }

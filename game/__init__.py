from .errors import IncompleteSelection, InvalidPuzzleDefinition, PuzzleError, UnknownGroup, UnknownTile
from .session import PuzzleSession
from .snapshot import SessionSnapshot, load_snapshot, save_snapshot
from .types import MAX_MISTAKES, SolutionGroup, Status, SubmitResult, Tile, Word

__all__ = [
    "PuzzleSession",
    "Word",
    "SolutionGroup",
    "Tile",
    "Status",
    "SubmitResult",
    "SessionSnapshot",
    "save_snapshot",
    "load_snapshot",
    "PuzzleError",
    "InvalidPuzzleDefinition",
    "IncompleteSelection",
    "UnknownTile",
    "UnknownGroup",
    "MAX_MISTAKES",
]

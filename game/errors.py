from __future__ import annotations


class PuzzleError(Exception):
    """Base class for puzzle session errors."""


class InvalidPuzzleDefinition(PuzzleError, ValueError):
    """The words do not form 4 groups of 4 (or a snapshot is inconsistent)."""


class IncompleteSelection(PuzzleError):
    """submit() was called without exactly 4 selected tiles."""

    def __init__(self, selected: int) -> None:
        super().__init__(f"Select 4 tiles before submitting (selected {selected}).")
        self.selected = selected


class UnknownTile(PuzzleError, KeyError):
    def __init__(self, tile_id: object) -> None:
        super().__init__(tile_id)
        self.tile_id = tile_id

    def __str__(self) -> str:
        return f"Unknown tile id: {self.tile_id!r}"


class UnknownGroup(PuzzleError, KeyError):
    def __init__(self, group_id: object) -> None:
        super().__init__(group_id)
        self.group_id = group_id

    def __str__(self) -> str:
        return f"Unknown group id: {self.group_id!r}"

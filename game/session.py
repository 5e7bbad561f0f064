"""
Puzzle session: the state machine behind a Connections board.

A session owns one puzzle (16 words in 4 groups of 4) and tracks:
- the display order of the unsolved tiles
- the player's current selection (at most 4 tiles)
- mistakes remaining (starts at 4)
- the groups solved so far, in the order they were found
- the outcome status (in progress, won, lost)

Everything is synchronous and in-process. The only randomness is shuffle(),
drawn from a numpy Generator so a fixed seed gives a fixed order.
"""

from __future__ import annotations
import logging
import operator
from collections import Counter
from typing import Dict, List, Optional, Sequence, Tuple
import numpy as np
from .errors import IncompleteSelection, InvalidPuzzleDefinition, UnknownGroup, UnknownTile
from .groups import build_groups, check_partition
from .snapshot import SessionSnapshot, WordRecord
from .types import GROUP_COUNT, GROUP_SIZE, MAX_MISTAKES, SolutionGroup, Status, SubmitResult, Tile, Word

logger = logging.getLogger(__name__)


class PuzzleSession:
    def __init__(
        self,
        words: Sequence[Word],
        *,
        rng: Optional[np.random.Generator] = None,
        themes: Optional[Dict[int, str]] = None,
    ) -> None:
        words = list(words)
        ok, msg = check_partition(words)
        if not ok:
            raise InvalidPuzzleDefinition(msg)

        self._tiles: Tuple[Tile, ...] = tuple(Tile(i, w) for i, w in enumerate(words))
        self._groups: Tuple[SolutionGroup, ...] = build_groups(words, themes)
        self._rng = rng if rng is not None else np.random.default_rng()

        self._order: List[int] = [t.tile_id for t in self._tiles]
        self._selection: List[int] = []
        self._solved: List[int] = []
        self._mistakes_remaining = MAX_MISTAKES
        self._status = Status.IN_PROGRESS
        self._guesses: List[Tuple[int, ...]] = []

    @classmethod
    def create(
        cls,
        words: Sequence[Word],
        *,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
        themes: Optional[Dict[int, str]] = None,
    ) -> "PuzzleSession":
        """
        Start a session from 16 words. Tiles keep the input order until shuffled.
        Pass `seed` (or a ready `rng`) to make shuffles reproducible.
        Raises InvalidPuzzleDefinition unless the words form 4 groups of 4.
        """
        if rng is None:
            rng = np.random.default_rng(seed)
        session = cls(words, rng=rng, themes=themes)
        logger.debug("Created session with groups %s", [g.labels for g in session.groups])
        return session

    # Inspection

    @property
    def status(self) -> Status:
        return self._status

    @property
    def is_over(self) -> bool:
        return self._status is not Status.IN_PROGRESS

    @property
    def mistakes_remaining(self) -> int:
        return self._mistakes_remaining

    @property
    def selection(self) -> Tuple[int, ...]:
        return tuple(self._selection)

    @property
    def solved_groups(self) -> Tuple[int, ...]:
        return tuple(self._solved)

    @property
    def groups(self) -> Tuple[SolutionGroup, ...]:
        return self._groups

    @property
    def guesses(self) -> Tuple[Tuple[int, ...], ...]:
        return tuple(self._guesses)

    @property
    def tiles(self) -> Tuple[Tile, ...]:
        """Full display order: solved groups first (in solve order), then unsolved tiles."""
        solved = [t for gid in self._solved for t in self._tiles if t.group_id == gid]
        return tuple(solved) + self.unsolved_tiles

    @property
    def unsolved_tiles(self) -> Tuple[Tile, ...]:
        return tuple(self._tiles[i] for i in self._order)

    def tile(self, tile_id: int) -> Tile:
        # accepts any integer type (numpy ints included), but not bools
        if isinstance(tile_id, bool):
            raise UnknownTile(tile_id)
        try:
            idx = operator.index(tile_id)
        except TypeError:
            raise UnknownTile(tile_id) from None
        if not 0 <= idx < len(self._tiles):
            raise UnknownTile(tile_id)
        return self._tiles[idx]

    def group(self, group_id: int) -> SolutionGroup:
        if isinstance(group_id, bool):
            raise UnknownGroup(group_id)
        try:
            idx = operator.index(group_id)
        except TypeError:
            raise UnknownGroup(group_id) from None
        if not 0 <= idx < GROUP_COUNT:
            raise UnknownGroup(group_id)
        return self._groups[idx]

    def is_selected(self, tile_id: int) -> bool:
        return tile_id in self._selection

    def is_solved(self, tile_id: int) -> bool:
        return self.tile(tile_id).group_id in self._solved

    # Operations

    def toggle_select(self, tile_id: int) -> Tuple[int, ...]:
        """
        Select or deselect a tile and return the current selection.
        Silently ignored when the game is over, the tile is already solved,
        or 4 tiles are already selected.
        """
        tile = self.tile(tile_id)
        if self.is_over:
            return self.selection

        if tile.tile_id in self._selection:
            self._selection.remove(tile.tile_id)
        elif tile.group_id in self._solved:
            pass
        elif len(self._selection) >= GROUP_SIZE:
            pass
        else:
            self._selection.append(tile.tile_id)
        return self.selection

    def deselect_all(self) -> Tuple[int, ...]:
        self._selection.clear()
        return self.selection

    def submit(self) -> SubmitResult:
        """
        Commit the 4 selected tiles as a guess.

        If all 4 share a group the group is solved; otherwise one mistake is spent.
        The selection is cleared either way. A guess with 3 tiles from one group
        is still a mistake; it is only flagged as `one_away` in the result.

        On a finished game this does nothing and reports the current state.
        Raises IncompleteSelection (with no state change) unless exactly 4 tiles are selected.
        """
        if self.is_over:
            return self._result(solved=False, group_id=None)

        if len(self._selection) != GROUP_SIZE:
            raise IncompleteSelection(len(self._selection))

        guess = tuple(self._selection)
        self._guesses.append(guess)
        self._selection.clear()

        counts = Counter(self._tiles[i].group_id for i in guess)
        group_id, hits = counts.most_common(1)[0]

        if hits == GROUP_SIZE:
            self._solved.append(group_id)
            self._order = [i for i in self._order if self._tiles[i].group_id != group_id]
            logger.debug("Solved group %d %s", group_id, self._groups[group_id].labels)
            if len(self._solved) == GROUP_COUNT:
                self._status = Status.WON
                logger.info("Puzzle won with %d mistakes remaining", self._mistakes_remaining)
            return self._result(solved=True, group_id=group_id)

        self._mistakes_remaining -= 1
        logger.debug("Wrong guess %s; %d mistakes remaining", guess, self._mistakes_remaining)
        if self._mistakes_remaining == 0:
            self._status = Status.LOST
            logger.info("Puzzle lost with %d of %d groups solved", len(self._solved), GROUP_COUNT)
        return self._result(solved=False, group_id=None, one_away=hits == GROUP_SIZE - 1)

    def shuffle(self) -> Tuple[Tile, ...]:
        """Uniformly permute the unsolved tiles; solved tiles keep their place. Returns the display order."""
        if not self.is_over:
            perm = self._rng.permutation(len(self._order))
            self._order = [self._order[int(i)] for i in perm]
        return self.tiles

    def _result(self, solved: bool, group_id: Optional[int], one_away: bool = False) -> SubmitResult:
        return SubmitResult(
            solved=solved,
            group_id=group_id,
            mistakes_remaining=self._mistakes_remaining,
            status=self._status,
            one_away=one_away,
        )

    # Save / restore

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            words=[WordRecord(label=t.label, group_id=t.group_id) for t in self._tiles],
            themes={g.group_id: g.theme for g in self._groups if g.theme},
            order=list(self._order),
            solved_groups=list(self._solved),
            selection=list(self._selection),
            mistakes_remaining=self._mistakes_remaining,
            status=self._status,
            guesses=[list(g) for g in self._guesses],
        )

    @classmethod
    def restore(
        cls,
        snapshot: SessionSnapshot,
        *,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> "PuzzleSession":
        """Rebuild a session from a snapshot. Raises InvalidPuzzleDefinition if the snapshot is inconsistent."""
        words = [Word(label=w.label, group_id=w.group_id) for w in snapshot.words]
        session = cls.create(words, seed=seed, rng=rng, themes=dict(snapshot.themes))

        solved = list(snapshot.solved_groups)
        if len(set(solved)) != len(solved) or any(gid not in range(GROUP_COUNT) for gid in solved):
            raise InvalidPuzzleDefinition(f"Bad solved groups in snapshot: {solved}")

        unsolved = sorted(t.tile_id for t in session._tiles if t.group_id not in solved)
        order = list(snapshot.order)
        if sorted(order) != unsolved:
            raise InvalidPuzzleDefinition("Snapshot order must list every unsolved tile exactly once.")

        selection = list(snapshot.selection)
        if len(set(selection)) != len(selection) or len(selection) > GROUP_SIZE or not set(selection) <= set(order):
            raise InvalidPuzzleDefinition(f"Bad selection in snapshot: {selection}")

        mistakes = snapshot.mistakes_remaining
        if not 0 <= mistakes <= MAX_MISTAKES:
            raise InvalidPuzzleDefinition(f"mistakes_remaining out of range: {mistakes}")

        if len(solved) == GROUP_COUNT:
            expected = Status.WON
        elif mistakes == 0:
            expected = Status.LOST
        else:
            expected = Status.IN_PROGRESS
        if snapshot.status != expected:
            raise InvalidPuzzleDefinition(f"Snapshot status {snapshot.status.value} does not match its counters.")
        if expected is not Status.IN_PROGRESS and selection:
            raise InvalidPuzzleDefinition("A finished game cannot have a selection.")

        # replaying the history must reproduce the solved groups and the mistake count
        guesses = [tuple(g) for g in snapshot.guesses]
        replayed: List[int] = []
        wrong = 0
        for g in guesses:
            if len(set(g)) != GROUP_SIZE or len(g) != GROUP_SIZE or any(i not in range(len(session._tiles)) for i in g):
                raise InvalidPuzzleDefinition(f"Bad guess in snapshot: {list(g)}")
            group_ids = {session._tiles[i].group_id for i in g}
            if len(group_ids) == 1:
                replayed.append(group_ids.pop())
            else:
                wrong += 1
        if replayed != solved or wrong != MAX_MISTAKES - mistakes:
            raise InvalidPuzzleDefinition("Snapshot guesses do not match its solved groups and mistakes.")

        session._solved = solved
        session._order = order
        session._selection = selection
        session._mistakes_remaining = mistakes
        session._status = expected
        session._guesses = guesses
        return session

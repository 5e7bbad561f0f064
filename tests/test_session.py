import numpy as np
import pytest
from game import IncompleteSelection, InvalidPuzzleDefinition, PuzzleSession, Status, UnknownGroup, UnknownTile, Word

GROUPS = {
    0: ["W1", "W2", "W3", "W4"],
    1: ["W5", "W6", "W7", "W8"],
    2: ["W9", "W10", "W11", "W12"],
    3: ["W13", "W14", "W15", "W16"],
}


def make_words():
    return [Word(label, gid) for gid, labels in GROUPS.items() for label in labels]


def select(session, *tile_ids):
    for i in tile_ids:
        session.toggle_select(i)


def lose(session):
    for _ in range(4):
        select(session, 0, 4, 8, 12)
        session.submit()


def test_create_initial_state():
    s = PuzzleSession.create(make_words(), seed=1)
    assert [t.label for t in s.tiles] == [f"W{i}" for i in range(1, 17)]
    assert [t.tile_id for t in s.tiles] == list(range(16))
    assert s.selection == ()
    assert s.mistakes_remaining == 4
    assert s.solved_groups == ()
    assert s.status is Status.IN_PROGRESS
    assert [g.labels for g in s.groups] == [tuple(v) for v in GROUPS.values()]


def _relabel(words, idx, **changes):
    w = words[idx]
    words[idx] = Word(changes.get("label", w.label), changes.get("group_id", w.group_id))
    return words


@pytest.mark.parametrize("words", [
    make_words()[:15],
    make_words() + [Word("EXTRA", 3)],
    _relabel(make_words(), 0, group_id=1),          # 3 / 5 split
    [Word(w.label, w.group_id + 1) for w in make_words()],  # ids 1..4
    _relabel(make_words(), 5, label="W1"),          # duplicate label
    _relabel(make_words(), 5, label="w1 "),         # duplicate after normalization
    _relabel(make_words(), 5, label="   "),         # empty label
    [],
])
def test_create_rejects_bad_partition(words):
    with pytest.raises(InvalidPuzzleDefinition):
        PuzzleSession.create(words)


def test_invalid_definition_is_a_value_error():
    with pytest.raises(ValueError):
        PuzzleSession.create(make_words()[:4])


def test_toggle_select_adds_and_removes():
    s = PuzzleSession.create(make_words())
    assert s.toggle_select(3) == (3,)
    assert s.toggle_select(7) == (3, 7)
    assert s.toggle_select(3) == (7,)
    assert s.is_selected(7) and not s.is_selected(3)


def test_selection_never_exceeds_four():
    s = PuzzleSession.create(make_words())
    for i in range(16):
        s.toggle_select(i)
        assert len(s.selection) <= 4
    assert s.selection == (0, 1, 2, 3)
    # deselecting frees a slot
    s.toggle_select(1)
    assert s.toggle_select(9) == (0, 2, 3, 9)


def test_toggle_unknown_tile_raises():
    s = PuzzleSession.create(make_words())
    for bad in (-1, 16, "3", None):
        with pytest.raises(UnknownTile):
            s.toggle_select(bad)
    assert s.selection == ()


def test_toggle_accepts_numpy_ints():
    s = PuzzleSession.create(make_words())
    assert s.toggle_select(np.int64(3)) == (3,)
    assert type(s.selection[0]) is int
    assert s.toggle_select(np.int32(3)) == ()
    with pytest.raises(UnknownTile):
        s.toggle_select(True)


def test_group_lookup():
    s = PuzzleSession.create(make_words())
    assert s.group(2).labels == ("W9", "W10", "W11", "W12")
    assert s.group(np.int64(0)).group_id == 0
    for bad in (-1, 4, "1", None):
        with pytest.raises(UnknownGroup):
            s.group(bad)


def test_deselect_all():
    s = PuzzleSession.create(make_words())
    assert s.deselect_all() == ()
    select(s, 0, 5, 10)
    assert s.deselect_all() == ()
    assert s.selection == ()
    assert s.mistakes_remaining == 4


@pytest.mark.parametrize("count", [0, 1, 3])
def test_submit_incomplete_selection(count):
    s = PuzzleSession.create(make_words())
    select(s, *range(count))
    with pytest.raises(IncompleteSelection):
        s.submit()
    assert s.selection == tuple(range(count))
    assert s.mistakes_remaining == 4
    assert s.solved_groups == ()
    assert s.status is Status.IN_PROGRESS
    assert s.guesses == ()


def test_submit_correct_group():
    s = PuzzleSession.create(make_words())
    select(s, 8, 9, 10, 11)
    r = s.submit()
    assert r.solved is True
    assert r.group_id == 2
    assert r.mistakes_remaining == 4
    assert r.status is Status.IN_PROGRESS
    assert set(s.solved_groups) == {2}
    assert s.selection == ()
    assert all(s.is_solved(i) for i in (8, 9, 10, 11))


def test_submit_wrong_group_costs_one_mistake():
    s = PuzzleSession.create(make_words())
    select(s, 0, 1, 4, 5)
    r = s.submit()
    assert r.solved is False
    assert r.group_id is None
    assert r.one_away is False
    assert r.mistakes_remaining == 3
    assert s.mistakes_remaining == 3
    assert s.selection == ()
    assert s.solved_groups == ()


def test_one_away_is_still_a_mistake():
    s = PuzzleSession.create(make_words())
    select(s, 0, 1, 2, 4)
    r = s.submit()
    assert r.solved is False
    assert r.one_away is True
    assert r.mistakes_remaining == 3


def test_scenario_solve_then_miss():
    s = PuzzleSession.create(make_words())
    select(s, 0, 1, 2, 3)
    r = s.submit()
    assert (r.solved, r.group_id, r.mistakes_remaining, r.status) == (True, 0, 4, Status.IN_PROGRESS)

    # w1 is solved now, so only w5, w9, w13 get selected
    select(s, 0, 4, 8, 12)
    assert s.selection == (4, 8, 12)
    s.toggle_select(5)
    r = s.submit()
    assert r.solved is False
    assert r.mistakes_remaining == 3


def test_solved_tiles_are_not_selectable():
    s = PuzzleSession.create(make_words())
    select(s, 0, 1, 2, 3)
    s.submit()
    assert s.toggle_select(2) == ()


def test_win_after_four_groups():
    s = PuzzleSession.create(make_words())
    select(s, 0, 1, 4, 5)
    s.submit()
    for gid in (3, 1, 0, 2):
        select(s, *range(gid * 4, gid * 4 + 4))
        r = s.submit()
        assert r.solved and r.group_id == gid
    assert r.status is Status.WON
    assert s.status is Status.WON
    assert s.is_over
    assert s.solved_groups == (3, 1, 0, 2)
    assert s.mistakes_remaining == 3
    assert s.unsolved_tiles == ()

    # a won game is frozen too
    before = s.snapshot()
    assert s.toggle_select(1) == ()
    r = s.submit()
    assert (r.solved, r.group_id, r.status, r.mistakes_remaining) == (False, None, Status.WON, 3)
    s.shuffle()
    s.deselect_all()
    assert s.snapshot() == before


def test_lose_after_four_mistakes():
    s = PuzzleSession.create(make_words())
    results = []
    for _ in range(4):
        select(s, 0, 4, 8, 12)
        results.append(s.submit())
    assert [r.mistakes_remaining for r in results] == [3, 2, 1, 0]
    assert [r.status for r in results] == [Status.IN_PROGRESS] * 3 + [Status.LOST]
    assert s.status is Status.LOST
    assert len(s.guesses) == 4


def test_terminal_session_ignores_mutation():
    s = PuzzleSession.create(make_words(), seed=3)
    lose(s)
    before = s.snapshot()

    assert s.toggle_select(1) == ()
    r = s.submit()
    assert r.solved is False
    assert r.status is Status.LOST
    assert r.mistakes_remaining == 0
    s.shuffle()
    s.deselect_all()

    assert s.snapshot() == before


def test_solved_tiles_move_to_front():
    s = PuzzleSession.create(make_words())
    select(s, 12, 13, 14, 15)
    s.submit()
    assert [t.tile_id for t in s.tiles[:4]] == [12, 13, 14, 15]
    assert [t.tile_id for t in s.unsolved_tiles] == list(range(12))


def test_sessions_are_independent():
    a = PuzzleSession.create(make_words())
    b = PuzzleSession.create(make_words())
    select(a, 0, 1, 2, 3)
    a.submit()
    assert b.solved_groups == ()
    assert b.selection == ()

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence
from .errors import IncompleteSelection
from .io_utils import ParsedGroup, words_from_groups
from .session import PuzzleSession
from .types import GROUP_COUNT, Status

HEADER = "Create four groups of four!"

HELP_TEXT = """Commands:
  1-16 (or a word)   select / deselect a tile; several at once: 1 5 9 13
                     phrases work alone (ice cream) or comma-separated (ice cream, tart)
  submit, enter      submit the 4 selected tiles
  shuffle, s         shuffle the remaining tiles
  deselect, d        deselect all
  help, ?            show this help
  quit, q            leave the game"""


@dataclass
class GameParams:
    seed: Optional[int] = None
    shuffle_on_start: bool = True
    show_one_away: bool = True
    debug: bool = False


def new_session(groups: Sequence[ParsedGroup], params: GameParams) -> PuzzleSession:
    # Core entrypoint for the CLI; raises InvalidPuzzleDefinition on a bad puzzle
    words, themes = words_from_groups(groups)
    session = PuzzleSession.create(words, seed=params.seed, themes=themes)
    if params.shuffle_on_start:
        session.shuffle()
    return session


def group_label(session: PuzzleSession, group_id: int) -> str:
    group = session.group(group_id)
    words = ", ".join(group.labels)
    return f"{group.theme.upper()}: {words}" if group.theme else words


def _resolve_tile(session: PuzzleSession, token: str) -> Optional[int]:
    # 1-based position among the unsolved tiles, or a word label
    unsolved = session.unsolved_tiles
    if token.isdigit():
        pos = int(token)
        if 1 <= pos <= len(unsolved):
            return unsolved[pos - 1].tile_id
        return None
    label = " ".join(token.upper().split())
    for t in unsolved:
        if t.label == label:
            return t.tile_id
    return None


def _selection_labels(session: PuzzleSession) -> List[str]:
    return [session.tile(i).label for i in session.selection]


def submit_message(session: PuzzleSession, result, params: GameParams) -> str:
    if result.solved:
        msg = f"Solved! {group_label(session, result.group_id)}"
    elif result.one_away and params.show_one_away:
        msg = "One away..."
    else:
        msg = "Not quite."

    if result.status is Status.WON:
        msg += "\nYou found all four groups!"
    elif result.status is Status.LOST:
        msg += "\nOut of mistakes. Better luck next time."
    return msg


def handle_command(session: PuzzleSession, command: str, params: GameParams) -> Dict[str, Any]:
    """Apply one text command to the session and return a JSON-friendly response."""
    cmd = command.strip()
    key = cmd.lower()

    if key in ("q", "quit", "exit"):
        return {"ok": True, "action": "quit"}

    if key in ("?", "help"):
        return {"ok": True, "action": "help", "message": HELP_TEXT}

    if session.is_over:
        return {"ok": False, "error": "The game is over.", "status": session.status.value}

    if key in ("", "enter", "submit"):
        try:
            result = session.submit()
        except IncompleteSelection as e:
            return {"ok": False, "error": str(e), "selection": _selection_labels(session)}
        resp: Dict[str, Any] = {"ok": True, "action": "submit", **result.to_dict()}
        if not params.show_one_away:
            resp["one_away"] = False
        resp["message"] = submit_message(session, result, params)
        return resp

    if key in ("s", "shuffle"):
        tiles = session.shuffle()
        return {"ok": True, "action": "shuffle", "tiles": [t.label for t in tiles]}

    if key in ("d", "deselect", "deselect all"):
        session.deselect_all()
        return {"ok": True, "action": "deselect", "selection": []}

    # A whole phrase label ("ice cream") wins over splitting on spaces
    if "," not in cmd:
        tile_id = _resolve_tile(session, cmd)
        if tile_id is not None:
            session.toggle_select(tile_id)
            return {"ok": True, "action": "toggle", "selection": _selection_labels(session)}

    # Resolve every token before toggling so a bad token changes nothing
    tokens = cmd.split(",") if "," in cmd else cmd.split()
    tile_ids = []
    for token in tokens:
        token = token.strip()
        if not token:
            continue
        tile_id = _resolve_tile(session, token)
        if tile_id is None:
            return {"ok": False, "error": f"No tile matches {token!r}. Type 'help' for commands."}
        tile_ids.append(tile_id)

    for tile_id in tile_ids:
        session.toggle_select(tile_id)
    return {"ok": True, "action": "toggle", "selection": _selection_labels(session)}


def render_board(session: PuzzleSession) -> str:
    lines: List[str] = [HEADER, ""]

    for gid in session.solved_groups:
        lines.append(f"  * {group_label(session, gid)}")
    if session.solved_groups:
        lines.append("")

    unsolved = session.unsolved_tiles
    if unsolved:
        width = max(len(t.label) for t in unsolved) + 2
        for row in range(0, len(unsolved), GROUP_COUNT):
            cells = []
            for pos, t in enumerate(unsolved[row:row + GROUP_COUNT], start=row + 1):
                label = f"[{t.label}]" if session.is_selected(t.tile_id) else f" {t.label} "
                cells.append(f"{pos:>2} {label:<{width}}")
            lines.append(" ".join(cells).rstrip())
        lines.append("")

    circles = " ".join("●" for _ in range(session.mistakes_remaining))
    lines.append(f"Mistakes remaining: {circles}".rstrip())

    if session.status is Status.LOST:
        lines.append("")
        lines.append("Answers:")
        for g in session.groups:
            if g.group_id not in session.solved_groups:
                lines.append(f"  - {group_label(session, g.group_id)}")
    return "\n".join(lines)

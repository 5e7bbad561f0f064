from __future__ import annotations
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List
from game.app import GameParams, handle_command, new_session, render_board
from game.errors import InvalidPuzzleDefinition
from game.io_utils import ParsedGroup, load_puzzle, parse_groups
from game.session import PuzzleSession
from game.snapshot import load_snapshot, save_snapshot


def read_groups(args: argparse.Namespace) -> List[ParsedGroup]:
    if args.words:
        # "--words" takes groups separated by ';'
        return parse_groups("\n".join(args.words.split(";")))

    if args.file:
        return load_puzzle(args.file)

    # stop at a blank line so stdin stays open for moves
    print("Paste 4 groups, one per line (THEME: W1, W2, W3, W4), then a blank line:")
    lines = []
    try:
        for line in iter(input, ""):
            lines.append(line)
    except EOFError:
        pass
    return parse_groups("\n".join(lines))


def start_session(args: argparse.Namespace, params: GameParams) -> PuzzleSession:
    if args.load:
        return PuzzleSession.restore(load_snapshot(args.load), seed=params.seed)
    return new_session(read_groups(args), params)


def play(session: PuzzleSession, params: GameParams) -> None:
    print(render_board(session))
    while not session.is_over:
        try:
            command = input("\n> ")
        except EOFError:
            print()
            return

        resp = handle_command(session, command, params)
        if params.debug:
            print(json.dumps(resp))

        if not resp["ok"]:
            print(resp["error"])
            continue

        action = resp["action"]
        if action == "quit":
            return
        if action == "help":
            print(resp["message"])
            continue
        if action == "submit":
            print(resp["message"])
        print()
        print(render_board(session))


def main():
    parser = argparse.ArgumentParser(description="Connections puzzle (terminal)")
    parser.add_argument("--words", type=str, help="Four groups separated by ';', words within a group by ','.")
    parser.add_argument("--file", type=str, help="Puzzle file: .json ({'groups': [{'theme', 'words'}]}) or text, one group per line.")
    parser.add_argument("--load", type=str, help="Resume from a saved session snapshot (JSON).")
    parser.add_argument("--save", type=str, help="Write a session snapshot (JSON) here on exit.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for shuffling (reproducible tile order).")
    parser.add_argument("--no-shuffle", action="store_true", help="Keep the puzzle's word order at start.")
    parser.add_argument("--no-hints", action="store_true", help="Don't report 'one away' guesses.")
    parser.add_argument("--json", action="store_true", help="Print the final session snapshot as JSON.")
    parser.add_argument("--debug", action="store_true", help="Print debug diagnostics.")

    args = parser.parse_args()
    params = GameParams(
        seed=args.seed,
        shuffle_on_start=not args.no_shuffle,
        show_one_away=not args.no_hints,
        debug=args.debug,
    )

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        session = start_session(args, params)
    except InvalidPuzzleDefinition as e:
        print(f"Input error: {e}")
        print("Tip: give 4 groups of 4 distinct words, e.g. 'FISH: BASS, PIKE, SOLE, CARP'.")
        sys.exit(1)
    except FileNotFoundError as e:
        print(f"Input error: {e}")
        sys.exit(1)

    play(session, params)

    if args.save:
        path = save_snapshot(session, args.save)
        print(f"Saved session to {Path(path)}")

    if args.json:
        print(session.snapshot().model_dump_json(indent=2))


if __name__ == "__main__":
    main()

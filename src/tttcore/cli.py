from __future__ import annotations

import argparse
import logging
from typing import Callable, Optional

from . import ai
from .arena import run_arena
from .config import load_settings
from .evaluator import evaluate
from .game_basics import SYMBOLS, current_player, format_board, is_valid_state, parse_board, parse_mark
from .session import GameSession
from .tactics import blocking_moves, immediate_winning_moves

DIFFICULTIES = [d.value for d in ai.Difficulty]


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="ttt", description="Tic-tac-toe engine CLI")
    sub = p.add_subparsers(dest="cmd")
    p.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    p.add_argument("--version", action="store_true", help="Print version and exit")
    p.add_argument(
        "--info",
        action="store_true",
        help="Print environment and dependency info and exit",
    )
    p.add_argument("--seed", type=int, default=None, help="Seed for the shared random source")

    board_help = "Board string, 9 cells of 0/1/2 or ./X/O, e.g. 100020000"

    p_eval = sub.add_parser("evaluate", help="Report winner, draw or in progress for a board")
    p_eval.add_argument("--board", required=True, help=board_help)

    p_move = sub.add_parser("move", help="Ask the AI for a move on a board")
    p_move.add_argument("--board", required=True, help=board_help)
    p_move.add_argument("--ai", default=None, help="Mark the AI plays (X or O; default: side to move)")
    p_move.add_argument("--difficulty", choices=DIFFICULTIES, default=None, help="AI difficulty")

    p_tac = sub.add_parser("tactics", help="List immediate wins and blocks for side-to-move")
    p_tac.add_argument("--board", required=True, help=board_help)

    p_play = sub.add_parser("play", help="Play an interactive game in the terminal")
    p_play.add_argument("--mode", choices=["cpu", "human"], default=None, help="Vs computer or two players")
    p_play.add_argument("--ai", default=None, help="Mark the computer plays (X or O)")
    p_play.add_argument("--difficulty", choices=DIFFICULTIES, default=None, help="AI difficulty")
    p_play.add_argument("--delay", type=float, default=None, help="Computer thinking delay in seconds")

    p_arena = sub.add_parser("arena", help="Pit two difficulties against each other")
    p_arena.add_argument("--x", dest="x_difficulty", choices=DIFFICULTIES, default="impossible")
    p_arena.add_argument("--o", dest="o_difficulty", choices=DIFFICULTIES, default="impossible")
    p_arena.add_argument("--games", type=int, default=100, help="Number of games (default: 100)")

    return p


def _print_info() -> None:
    import importlib.util
    import platform
    import sys

    print(f"python={sys.version.split()[0]} platform={platform.platform()}")
    for pkg in ["numpy"]:
        spec = importlib.util.find_spec(pkg)
        if spec is None:
            print(f"{pkg}=<not installed>")
        else:
            mod = __import__(pkg)
            ver = getattr(mod, "__version__", "?")
            print(f"{pkg}={ver}")


def _read_board(raw: str, require_valid: bool = True) -> list[int]:
    board = parse_board(raw)
    if require_valid and not is_valid_state(board):
        raise ValueError("Board is not a valid reachable state.")
    return board


def play_interactive(
    session: GameSession,
    read: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
) -> None:
    """Terminal loop: 1-9 plays a cell, r resets the round, n starts a new match, q quits.

    The computer answers through the session's deferred move, so it waits the
    configured delay before playing.
    """
    while True:
        if session.is_ai_turn:
            session.schedule_ai_move()
            session.wait_for_ai_move()
            continue
        write(format_board(session.board))
        write(session.status_text())
        s = session.scores
        write(f"X {s.x} | draws {s.draws} | O {s.o}")
        try:
            cmd = read("> ").strip().lower()
        except EOFError:
            return
        if cmd == "q":
            return
        if cmd == "r":
            session.reset_round()
        elif cmd == "n":
            session.new_match()
        elif cmd.isdigit() and 1 <= int(cmd) <= 9:
            if not session.click(int(cmd) - 1):
                write("Cell unavailable.")
        else:
            write("Enter 1-9, r (reset round), n (new match) or q (quit).")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if getattr(ns, "verbose", False) else logging.INFO,
                        format="[%(levelname)s] %(message)s")

    # Early exits
    if getattr(ns, "version", False):
        try:
            from importlib.metadata import version as _ver

            print(_ver("tttcore"))
        except Exception:
            print("unknown")
        return 0
    if getattr(ns, "info", False):
        _print_info()
        return 0

    try:
        settings = load_settings()
    except ValueError as e:
        logging.error("%s", e)
        return 2
    seed: Optional[int] = ns.seed if ns.seed is not None else settings.seed
    if seed is not None:
        ai.seed(seed)

    try:
        if ns.cmd == "evaluate":
            b = _read_board(ns.board, require_valid=False)
            st = evaluate(b)
            logging.info(
                "status=%s winner=%s line=%s",
                st.kind.value,
                SYMBOLS[st.winner] if st.winner else None,
                list(st.line) if st.line else None,
            )
            return 0

        if ns.cmd == "move":
            b = _read_board(ns.board)
            mark = parse_mark(ns.ai) if ns.ai else current_player(b)
            difficulty = ns.difficulty or settings.difficulty
            mv = ai.select_move(b, mark, difficulty)
            logging.info("ai=%s difficulty=%s move=%d", SYMBOLS[mark], ai.Difficulty.parse(difficulty).value, mv)
            return 0

        if ns.cmd == "tactics":
            b = _read_board(ns.board)
            p = current_player(b)
            logging.info(
                "to_move=%s wins=%s blocks=%s",
                SYMBOLS[p],
                immediate_winning_moves(b, p),
                blocking_moves(b, p),
            )
            return 0

        if ns.cmd == "play":
            overrides = {}
            if ns.mode:
                overrides["mode"] = ns.mode
            if ns.ai:
                overrides["ai_mark"] = ns.ai
            if ns.difficulty:
                overrides["difficulty"] = ns.difficulty
            if ns.delay is not None:
                overrides["ai_delay"] = ns.delay
            session = GameSession.from_settings(settings, **overrides)
            play_interactive(session)
            return 0

        if ns.cmd == "arena":
            if ns.games < 1:
                logging.error("--games must be positive: %s", ns.games)
                return 2
            res = run_arena(ns.x_difficulty, ns.o_difficulty, games=ns.games, seed=seed)
            logging.info(
                "games=%d x_wins=%d o_wins=%d draws=%d",
                res.games, res.x_wins, res.o_wins, res.draws,
            )
            return 0
    except ValueError as e:
        logging.error("%s", e)
        return 2

    parser.print_help()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

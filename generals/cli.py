"""
Generals CLI - Command-line interface for the engine.

Usage:
    generals play        Play side1 against the computer in the terminal
    generals simulate    Let the computer play both sides
    generals presets     List the built-in setup formations
    generals serve       Run the HTTP API with uvicorn
"""

import argparse
import logging
import os
import random
import sys


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Generals - Game of the Generals Rules Engine",
        prog="generals",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play against the computer")
    play_parser.add_argument("--preset", help="Setup preset for your pieces (default: random)")
    play_parser.add_argument("--behavior", default="balanced", help="Computer behavior")
    play_parser.add_argument("--difficulty", default="medium", help="Computer difficulty")
    play_parser.add_argument("--seed", type=int, help="Random seed")

    # Simulate command
    sim_parser = subparsers.add_parser("simulate", help="Computer vs computer")
    sim_parser.add_argument("--side1", default="aggressive", help="side1 behavior, or 'random' for a baseline")
    sim_parser.add_argument("--side2", default="defensive", help="side2 behavior, or 'random' for a baseline")
    sim_parser.add_argument("--difficulty", default="hard", help="Difficulty for both sides")
    sim_parser.add_argument("--seed", type=int, help="Random seed")
    sim_parser.add_argument("--max-turns", type=int, default=500, help="Stop after this many turns")
    sim_parser.add_argument("--show-board", action="store_true", help="Print the final board")

    # Presets command
    subparsers.add_parser("presets", help="List setup presets")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)

    if args.command == "play":
        cmd_play(args)
    elif args.command == "simulate":
        cmd_simulate(args)
    elif args.command == "presets":
        cmd_presets(args)
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def _parse_move(text):
    """'5 4 4 4' or '5,4 4,4' -> (from_row, from_col, to_row, to_col)."""
    parts = text.replace(",", " ").split()
    if len(parts) != 4:
        raise ValueError("enter a move as: from_row from_col to_row to_col")
    return tuple(int(p) for p in parts)


def cmd_play(args):
    """Interactive game against the computer."""
    from .engine_core.errors import EngineError
    from .engine_core.move import Move
    from .engine_core.move_generator import has_legal_move
    from .engine_core.pieces import Side
    from .engine_core.presets import preset_placements
    from .engine_core.setup import random_setup
    from .session import GameLoop, SessionManager

    rng = random.Random(args.seed)
    manager = SessionManager(rng=rng)
    try:
        setup = preset_placements(args.preset, Side.SIDE1) if args.preset else random_setup(Side.SIDE1, rng)
        session = manager.create_session(
            side1_setup=setup,
            behavior=args.behavior,
            difficulty=args.difficulty,
        )
    except (KeyError, ValueError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    loop = GameLoop(manager, session.session_id)
    print(f"Session {session.session_id}: you are side1 (a), the computer is side2 (b).")
    print("Pieces show owner and rank ordinal; ?? is a hidden enemy piece.")
    print("Enter moves as 'from_row from_col to_row to_col', or 'quit' to surrender.\n")

    while session.is_playing:
        print(session.board.render(Side.SIDE1))
        if not has_legal_move(session.board, Side.SIDE1):
            print("You have no legal move and pass.")
            manager.pass_turn(session.session_id, Side.SIDE1)
            session = loop.session
            if session.is_playing:
                loop.play_ai_turn(Side.SIDE2)
                session = loop.session
            continue

        try:
            text = input("> ").strip()
        except EOFError:
            text = "quit"
        if text in ("quit", "q", "exit"):
            session = manager.surrender(session.session_id, Side.SIDE1)
            break

        try:
            result = loop.play_human_move(Side.SIDE1, Move.of(*_parse_move(text)))
        except ValueError as e:
            print(f"  {e}")
            continue
        except EngineError as e:
            print(f"  {e.code.value}: {e.message}")
            continue

        for line in result.changes:
            print(f"  {line}")
        session = loop.session

    print(session.board.render())
    print(f"\nGame over: {session.winner.value} wins ({session.termination_reason.value})")


def _simulation_bot(side, behavior, difficulty, rng):
    """A GeneralsBot for a behavior name, or a RandomPolicy for 'random'."""
    from .bots import GeneralsBot, RandomPolicy

    if behavior == "random":
        return RandomPolicy(seed=rng.randrange(2**32))
    return GeneralsBot.for_profile(side, behavior, difficulty, rng=rng)


def cmd_simulate(args):
    """Play a full computer-vs-computer game."""
    from .engine_core.move_generator import legal_moves
    from .engine_core.pieces import Side
    from .engine_core.setup import random_setup
    from .engine_core.summary import summarize_match
    from .session import SessionManager

    rng = random.Random(args.seed)
    manager = SessionManager(rng=rng)
    try:
        bots = {
            Side.SIDE1: _simulation_bot(Side.SIDE1, args.side1, args.difficulty, rng),
            Side.SIDE2: _simulation_bot(Side.SIDE2, args.side2, args.difficulty, rng),
        }
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    session = manager.create_session(
        side1_setup=random_setup(Side.SIDE1, rng),
        computer_side=None,
    )
    sid = session.session_id
    session = manager.commit_setup(sid, Side.SIDE2, random_setup(Side.SIDE2, rng))

    turns = 0
    while session.is_playing and turns < args.max_turns:
        side = session.current_turn
        candidates = legal_moves(session.board, side)
        if candidates:
            decision = bots[side].select_move(session.board, side, candidates)
            manager.propose_move(sid, side, decision.move)
        else:
            manager.pass_turn(sid, side)
        session = manager.get_session(sid)
        turns += 1

    if args.show_board:
        print(session.board.render())
        print()

    summary = summarize_match(session)
    print(f"side1: {args.side1}, side2: {args.side2}, difficulty: {args.difficulty}")
    if session.is_finished:
        print(f"Winner: {summary.winner.value} ({summary.reason.value}) after {summary.move_count} moves")
    else:
        print(f"No result after {summary.move_count} moves")
    for side, stats in summary.stats.items():
        print(
            f"  {side.value}: {stats.challenges} challenges, "
            f"{stats.pieces_eliminated} eliminated, {stats.pieces_lost} lost, "
            f"{stats.spies_revealed} spies revealed"
        )


def cmd_presets(args):
    """List the built-in setup formations."""
    from .engine_core.pieces import Side
    from .engine_core.presets import list_presets

    for preset in list_presets():
        print(f"{preset.name}: {preset.description}")
        rows = {}
        for p in preset.placements_for(Side.SIDE1):
            rows.setdefault(p.position.row, []).append(p)
        for row in sorted(rows):
            cells = ", ".join(f"{p.rank.label}@{p.position.col}" for p in sorted(rows[row], key=lambda p: p.position.col))
            print(f"  row {row}: {cells}")
        print()


def cmd_serve(args):
    """Run the HTTP API."""
    logging.basicConfig(
        level=os.getenv("GENERALS_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        import uvicorn
    except ImportError:
        print("uvicorn not installed. Install with: pip install uvicorn")
        sys.exit(1)

    from .api.app import create_app
    uvicorn.run(create_app(), host=args.host, port=args.port)


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
Replay a recorded game through the queen engine.

Usage:
    # Replay a transcript recorded with QUEEN_RECORD_INPUT=true
    python tools/replay_game.py --transcript logs/queen_input.log

    # Same input, experimental tuning, with per-turn reasoning
    python tools/replay_game.py --transcript logs/queen_input.log --config configs/experimental.json --explain

This script:
1. Reads the transcript (tagged or plain judge input)
2. Feeds it to a fresh TurnDriver
3. Prints each turn's two command lines (and reasoning with --explain)
"""

import argparse
import logging
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from engine.errors import ArenaError
from engine.game_state_logger import read_transcript
from engine.strategy_config import StrategyConfig, get_config
from engine.turn_driver import TurnDriver


def main() -> int:
    parser = argparse.ArgumentParser(description="Replay a recorded game through the queen engine")
    parser.add_argument('--transcript', required=True, type=Path, help="Recorded input transcript")
    parser.add_argument('--config', type=str, default=None, help="Strategy config JSON to use")
    parser.add_argument('--explain', action='store_true', help="Print the reasoning for each turn")
    parser.add_argument('--verbose', '-v', action='store_true', help="Debug logging to stderr")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
    )

    lines = iter(read_transcript(args.transcript))

    def read_line() -> str:
        try:
            return next(lines)
        except StopIteration:
            raise EOFError from None

    strategy_config = StrategyConfig(args.config) if args.config else get_config()
    driver = TurnDriver(read_line=read_line, write_line=lambda line: None,
                        strategy_config=strategy_config,
                        record_input=False, log_decisions=False)

    driver.setup()
    try:
        while True:
            decision = driver.play_turn()
            action, production = decision.commands()
            print(f"{driver.turn:4d}  {action:<24} {production:<10} {decision.state}")
            if args.explain:
                print(f"      {decision.reasoning}")
    except EOFError:
        pass
    except ArenaError as e:
        print(f"Replay aborted on turn {driver.turn + 1}: {e}", file=sys.stderr)
        return 1

    print(f"\n{driver.turn} turns replayed")
    return 0


if __name__ == '__main__':
    sys.exit(main())

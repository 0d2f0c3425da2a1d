"""
Queen Bot - judge entry point.

Reads the game from stdin, writes two command lines per turn to stdout.
All logging goes to stderr (and optionally a log file), never stdout.
"""

import logging
import os
import sys

from config import config
from engine.errors import ArenaError
from engine.strategy_config import set_config_path
from engine.turn_driver import TurnDriver

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

logger = logging.getLogger(__name__)


def setup_logging() -> None:
    handlers = [logging.StreamHandler(sys.stderr)]
    if config.LOG_TO_FILE:
        os.makedirs(config.LOG_DIR, exist_ok=True)
        handlers.append(logging.FileHandler(config.LOG_FILE_PATH))

    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL, logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
    )


def emit(line: str) -> None:
    """Send one command to the judge"""
    print(line, flush=True)


def main() -> int:
    setup_logging()
    if config.STRATEGY_CONFIG:
        set_config_path(config.STRATEGY_CONFIG)

    driver = TurnDriver(read_line=input, write_line=emit)
    try:
        turns = driver.run()
    except ArenaError:
        logger.exception(f"Fatal error on turn {driver.turn}, aborting")
        return 1
    logger.info(f"Finished after {turns} turns")
    return 0


if __name__ == '__main__':
    sys.exit(main())

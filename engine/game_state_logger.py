"""
Game Input Recorder

Captures every raw input line the judge sends, tagged with the turn it
belongs to, so a game can be replayed offline with tools/replay_game.py.

Format: one line per input line, "<turn>\\t<raw line>". Turn 0 is the
site list sent before the first turn.
"""

import logging
from pathlib import Path
from typing import List, Optional, TextIO

from config import config

logger = logging.getLogger(__name__)

# Transcript file path
TRANSCRIPT_PATH = Path(config.LOG_DIR) / f"{config.BOT_NAME}_input.log"

_log_file: Optional[TextIO] = None
_initialized: bool = False


def _ensure_initialized(path: Optional[Path] = None):
    """Lazily open the transcript file."""
    global _log_file, _initialized

    if _initialized:
        return

    target = path or TRANSCRIPT_PATH
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        _log_file = open(target, 'w', encoding='utf-8')
        logger.info(f"Recording input transcript to {target}")
    except OSError as e:
        logger.error(f"Failed to open input transcript {target}: {e}")
        _log_file = None
    _initialized = True


def log_input_line(turn: int, line: str, path: Optional[Path] = None):
    """
    Record one raw input line.

    Args:
        turn: Turn the line belongs to (0 for the initial site list)
        line: Raw line as read from the judge
        path: Override transcript path (first call only)
    """
    _ensure_initialized(path)

    if _log_file is None:
        return

    _log_file.write(f"{turn}\t{line.rstrip()}\n")
    _log_file.flush()


def close_transcript():
    """Close the transcript so the next game starts a fresh file."""
    global _log_file, _initialized
    if _log_file is not None:
        _log_file.close()
    _log_file = None
    _initialized = False


def read_transcript(path: Path) -> List[str]:
    """
    Read a recorded transcript back into raw input lines.

    Lines without a turn tag are taken verbatim, so a plain copy of the
    judge input works too.
    """
    lines = []
    with open(path, 'r', encoding='utf-8') as f:
        for raw in f:
            raw = raw.rstrip('\n')
            if not raw.strip():
                continue
            tag, sep, rest = raw.partition('\t')
            lines.append(rest if sep and tag.isdigit() else raw)
    return lines

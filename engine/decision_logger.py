"""
Decision Logger

One block per turn recording what the queen did and why: the mode she
acted in, both command lines, the reasoning string, and the threat
picture. Read alongside the input transcript when tuning threat bands.

Written through its own "decisions" logger with propagation off, so the
blocks never show up in the stderr stream.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from config import config

DECISION_LOG_PATH = Path(config.LOG_DIR) / f"{config.BOT_NAME}_decisions.log"

decision_logger = logging.getLogger("decisions")
decision_logger.setLevel(logging.INFO)
decision_logger.propagate = False

_handler: Optional[logging.FileHandler] = None


def _attach_file_handler():
    """Open the log file on the first decision of a game"""
    global _handler
    if _handler is not None:
        return
    DECISION_LOG_PATH.parent.mkdir(parents=True, exist_ok=True)
    _handler = logging.FileHandler(str(DECISION_LOG_PATH))
    _handler.setFormatter(logging.Formatter('%(message)s'))
    decision_logger.addHandler(_handler)


def _key_values(label: str, values: Dict) -> str:
    return f"{label}: " + ", ".join(f"{k}={v}" for k, v in values.items())


def log_decision(turn: int, state: str, action: str, production: str,
                 reasoning: str = "",
                 context: Optional[dict] = None,
                 situation: Optional[dict] = None):
    """
    Append one turn's block to the decision log.

    Args:
        turn: 1-based turn number
        state: Strategy state the action came from
        action: Queen command line as sent
        production: Training command line as sent
        reasoning: Why the state machine chose the action
        context: BrainContext.to_dict()
        situation: QueenSenses.summary()
    """
    _attach_file_handler()

    block: List[str] = [
        f"=== TURN {turn} @ {datetime.now().isoformat()} ===",
        f"State: {state}",
        f"Action: {action}",
        f"Production: {production}",
    ]
    if reasoning:
        block.append(f"Reasoning: {reasoning}")
    if context:
        block.append(_key_values("Context", context))
    if situation:
        block.append(_key_values("Situation", situation))
    block.append("")

    decision_logger.info("\n".join(block))


def close_decision_log():
    """Flush and detach the file at the end of a game"""
    global _handler
    if _handler is None:
        return
    decision_logger.removeHandler(_handler)
    _handler.close()
    _handler = None

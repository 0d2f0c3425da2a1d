"""
Brain Package

Decision-making for the queen, separate from the game-facing engine.
The state machine is pure; QueenBrain carries the current state between
turns and is what the turn driver talks to.
"""

from .interface import Brain, BrainContext, BrainDecision
from .queen_brain import QueenBrain
from .state_machine import (
    Mode,
    StrategyParams,
    StrategyState,
    decide_action,
    defensive_trigger,
    needs_first_garrison,
    next_state,
    should_extract_instead,
)

__all__ = [
    'Brain',
    'BrainContext',
    'BrainDecision',
    'QueenBrain',
    'Mode',
    'StrategyParams',
    'StrategyState',
    'decide_action',
    'defensive_trigger',
    'needs_first_garrison',
    'next_state',
    'should_extract_instead',
]

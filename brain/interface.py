"""
Brain Interface - The contract between the turn driver and decision-making AI.

The driver hands the brain a BrainContext (world, economy, queen) once per
turn and gets back a BrainDecision: exactly one queen action and one
production directive, plus the reasoning behind them for the logs.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, List, Optional

from engine.commands import AgentAction, Train
from engine.models import Site

if TYPE_CHECKING:
    from engine.economy import Economy
    from engine.queen import Queen
    from engine.senses import QueenSenses
    from engine.world_model import WorldModel


@dataclass
class BrainContext:
    """
    Everything the brain needs to make a decision.

    The queen's senses must already be refreshed for this turn.
    """
    world: 'WorldModel'
    economy: 'Economy'
    queen: 'Queen'
    turn: int = 0

    @property
    def senses(self) -> 'QueenSenses':
        if self.queen.senses is None:
            raise RuntimeError("Queen senses not refreshed this turn")
        return self.queen.senses

    def touched_site(self) -> Optional[Site]:
        return self.queen.touched_site(self.world)

    def to_dict(self) -> dict:
        """Convert to dictionary for logging"""
        return {
            'turn': self.turn,
            'gold': self.economy.balance,
            'saving': self.economy.should_save,
            'queen': str(self.queen.location),
            'queen_hp': self.queen.health,
            'touching': self.queen.touched_site_id,
        }


@dataclass
class BrainDecision:
    """
    The brain's decision output.

    Simple structure: what to do, what to train, and why.
    """
    action: AgentAction
    production: Train
    reasoning: str
    state: Any = None  # strategy state the action was produced from

    def commands(self) -> List[str]:
        """The two judge lines: queen action first, then training"""
        return [self.action.to_command(), self.production.to_command()]

    def to_dict(self) -> dict:
        """Convert to dictionary for logging"""
        return {
            'state': str(self.state),
            'action': self.action.to_command(),
            'production': self.production.to_command(),
            'reasoning': self.reasoning,
        }


class Brain(ABC):
    """
    Abstract base class for queen decision-making.

    The driver only calls these methods - it doesn't care how the
    brain decides internally.
    """

    @abstractmethod
    def make_decision(self, context: BrainContext) -> BrainDecision:
        """
        Given this turn's context, return a decision.

        This is the ONLY method the driver calls during play.

        Args:
            context: World, economy and queen for the current turn

        Returns:
            BrainDecision with action, production and reasoning
        """
        pass

    def on_game_start(self) -> None:
        """Called once after the sites are registered, before turn 1"""

    def on_game_end(self, turns_played: int) -> None:
        """Called once when input runs out"""

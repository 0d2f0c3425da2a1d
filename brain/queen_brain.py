"""
Queen Brain

The stateful holder around the pure state machine. Once per turn it:
1. Transitions from last turn's state against the fresh snapshot
2. Picks the action for the resulting state
3. Records the pending structure intent when building on a site we don't own
4. Asks the economy for the production directive
"""

import logging
from typing import Optional

from engine.commands import AgentAction, Build

from .interface import Brain, BrainContext, BrainDecision
from .state_machine import StrategyParams, StrategyState, decide_action, next_state

logger = logging.getLogger(__name__)


class QueenBrain(Brain):
    """Finite-state controller for the queen"""

    def __init__(self, params: Optional[StrategyParams] = None,
                 initial_state: Optional[StrategyState] = None):
        self.params = params or StrategyParams.from_config()
        self._initial_state = initial_state or StrategyState.exploring()
        self.state = self._initial_state
        self.transitions = 0

    def on_game_start(self) -> None:
        self.state = self._initial_state
        self.transitions = 0
        logger.info(f"🧠 Queen brain ready, starting in {self.state}")

    def make_decision(self, context: BrainContext) -> BrainDecision:
        previous = self.state
        self.state = next_state(previous, context, self.params)
        if self.state != previous:
            self.transitions += 1
            logger.info(f"🔀 Turn {context.turn}: {previous} -> {self.state}")

        action, reasoning = decide_action(self.state, context, self.params)
        self._record_intent(action, context)
        production = context.economy.production_order(context.world)
        context.queen.current_state = self.state

        logger.debug(f"Turn {context.turn}: {self.state} -> {action.to_command()} ({reasoning})")
        return BrainDecision(action=action, production=production, reasoning=reasoning, state=self.state)

    def _record_intent(self, action: AgentAction, context: BrainContext) -> None:
        """Building on a site we don't own: remember what, for when ownership flips"""
        if not isinstance(action, Build):
            return
        if not context.world.get_site(action.site_id).is_friendly:
            context.world.set_pending_structure(action.order)

    def on_game_end(self, turns_played: int) -> None:
        logger.info(f"🏁 Game over after {turns_played} turns ({self.transitions} mode changes, "
                    f"final mode {self.state})")

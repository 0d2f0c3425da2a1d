"""
Turn Driver

Glue between the judge and the brain. Per turn:
    read snapshot -> update economy and world -> refresh queen
    -> brain decision -> write queen action line, then training line

The driver holds no decision logic of its own.
"""

import logging
from typing import Callable, Optional

from brain import Brain, BrainContext, BrainDecision, QueenBrain, StrategyParams
from config import config

from . import decision_logger, game_state_logger
from .economy import Economy
from .errors import ProtocolViolation
from .parser import TurnInputParser
from .queen import Queen
from .strategy_config import StrategyConfig, get_config
from .world_model import WorldModel

logger = logging.getLogger(__name__)


class TurnDriver:
    """Runs one game against a line-based judge"""

    def __init__(self, read_line: Callable[[], str], write_line: Callable[[str], None],
                 brain: Optional[Brain] = None,
                 strategy_config: Optional[StrategyConfig] = None,
                 record_input: Optional[bool] = None,
                 log_decisions: Optional[bool] = None):
        """
        Args:
            read_line: Returns the next judge line, raises EOFError at end of input
            write_line: Sends one command line to the judge
            brain: Decision maker (default: QueenBrain tuned from strategy_config)
            strategy_config: Tuning source (default: global strategy config)
            record_input: Record raw input for replay (default: config.RECORD_INPUT)
            log_decisions: Write the decision log (default: config.DECISION_LOG_ENABLED)
        """
        cfg = strategy_config or get_config()
        self._read_line = read_line
        self._write_line = write_line
        self.record_input = config.RECORD_INPUT if record_input is None else record_input
        self.log_decisions = config.DECISION_LOG_ENABLED if log_decisions is None else log_decisions

        self.parser = TurnInputParser(self._read)
        self.world = WorldModel()
        self.economy = Economy.from_config(cfg)
        self.brain = brain or QueenBrain(StrategyParams.from_config(cfg))
        self.queen: Optional[Queen] = None
        self.turn = 0
        self._setup_done = False

    def _read(self) -> str:
        line = self._read_line()
        if self.record_input:
            # Lines read while parsing turn N are tagged N (setup is turn 0)
            game_state_logger.log_input_line(self.turn + 1 if self._setup_done else 0, line)
        return line

    def setup(self) -> None:
        """Read the site list sent before the first turn"""
        self.world.register_sites(self.parser.read_site_definitions())
        self._setup_done = True
        self.brain.on_game_start()

    def play_turn(self) -> BrainDecision:
        """
        Play one turn.

        Raises:
            EOFError: input ended
            ArenaError: snapshot inconsistent with tracked state (fatal)
        """
        snapshot = self.parser.read_turn(len(self.world))
        self.turn += 1

        self.economy.update(snapshot.gold)
        self.world.apply_site_updates(snapshot.site_updates)
        commander = self.world.replace_units(snapshot.units)
        if commander is None:
            raise ProtocolViolation(f"Turn {self.turn}: no friendly queen in snapshot")

        if self.queen is None:
            self.queen = Queen(commander)
        self.queen.update(commander, snapshot.touched_site, self.world)
        senses = self.queen.refresh_senses(self.world)
        logger.debug(f"Turn {self.turn} situation: {senses.summary()}")

        context = BrainContext(world=self.world, economy=self.economy, queen=self.queen, turn=self.turn)
        decision = self.brain.make_decision(context)

        for line in decision.commands():
            self._write_line(line)

        if self.log_decisions:
            decision_logger.log_decision(
                turn=self.turn,
                state=str(decision.state),
                action=decision.action.to_command(),
                production=decision.production.to_command(),
                reasoning=decision.reasoning,
                context=context.to_dict(),
                situation=senses.summary(),
            )
        return decision

    def run(self) -> int:
        """
        Play until input runs out.

        Returns:
            Number of turns played
        """
        self.setup()
        try:
            while True:
                self.play_turn()
        except EOFError:
            logger.info(f"Input exhausted after {self.turn} turns")
        finally:
            if self.record_input:
                game_state_logger.close_transcript()
            if self.log_decisions:
                decision_logger.close_decision_log()
        self.brain.on_game_end(self.turn)
        return self.turn

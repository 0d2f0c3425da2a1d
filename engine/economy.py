"""
Economy

Tracks the gold balance and the save/spend flag.

The save flag has hysteresis: it switches on when the balance drops
below the low-water mark and off only once the balance climbs above the
high-water mark. In between it keeps its previous value, so the bot
doesn't flap between saving and spending every turn.
"""

import logging
from typing import TYPE_CHECKING, Optional

from .commands import Train
from .strategy_config import StrategyConfig, get_config

if TYPE_CHECKING:
    from .world_model import WorldModel

logger = logging.getLogger(__name__)

DEFAULT_HIGH_WATER = 140
DEFAULT_LOW_WATER = 20


class Economy:
    """Gold balance plus hysteresis save flag"""

    def __init__(self, high_water: int = DEFAULT_HIGH_WATER,
                 low_water: int = DEFAULT_LOW_WATER,
                 should_save: bool = True):
        if low_water > high_water:
            raise ValueError(f"low_water ({low_water}) must not exceed high_water ({high_water})")
        self.high_water = high_water
        self.low_water = low_water
        self.balance = 0
        # Start out saving: nothing to train with on turn 1
        self.should_save = should_save

    @classmethod
    def from_config(cls, config: Optional[StrategyConfig] = None) -> 'Economy':
        cfg = config or get_config()
        return cls(
            high_water=int(cfg.get('economy', 'high_water', DEFAULT_HIGH_WATER)),
            low_water=int(cfg.get('economy', 'low_water', DEFAULT_LOW_WATER)),
        )

    def update(self, balance: int) -> bool:
        """
        Record this turn's balance and return the resulting save flag.
        """
        self.balance = balance
        if balance > self.high_water:
            if self.should_save:
                logger.info(f"💰 Saved plenty ({balance} gold) - spending")
            self.should_save = False
        elif balance < self.low_water:
            if not self.should_save:
                logger.info(f"💸 Spent plenty ({balance} gold) - saving")
            self.should_save = True
        return self.should_save

    def production_order(self, world: 'WorldModel') -> Train:
        """
        Production directive for this turn.

        Saving trains nothing. Otherwise train at our first garrison, if any.
        """
        if self.should_save:
            return Train()
        garrisons = world.friendly_garrisons()
        if garrisons:
            return Train(garrisons[0].site_id)
        return Train()

    def __repr__(self):
        return f"Economy(balance={self.balance}, save={self.should_save})"

"""
Queen (commander) entity.

The one unit we control. Unlike other units it keeps its identity across
turns, along with the site it is touching, the strategy state the brain
last chose, and the sensing view for the current turn.
"""

import logging
from typing import TYPE_CHECKING, Any, Optional

from .geometry import Point
from .models import Owner, Site, Unit
from .senses import QueenSenses
from .strategy_config import ThreatBand

if TYPE_CHECKING:
    from .world_model import WorldModel

logger = logging.getLogger(__name__)


class Queen:
    """Our commander, refreshed from each snapshot"""

    def __init__(self, unit: Unit):
        self.unit_id = unit.unit_id
        self.owner = Owner.SELF
        self.location: Point = unit.location
        self.health = unit.health
        self.touched_site_id: Optional[int] = None

        # Set by the brain after each decision (a brain.state_machine.StrategyState)
        self.current_state: Any = None
        self.senses: Optional[QueenSenses] = None

    def update(self, unit: Unit, touched_site_id: Optional[int], world: 'WorldModel') -> None:
        """
        Take position, health and touched site from this turn's snapshot.

        Raises:
            NotFound: if the touched site is not registered
        """
        if touched_site_id is not None:
            world.get_site(touched_site_id)
        if unit.health < self.health:
            logger.debug(f"Queen took {self.health - unit.health} damage ({unit.health} left)")
        self.unit_id = unit.unit_id
        self.location = unit.location
        self.health = unit.health
        self.touched_site_id = touched_site_id

    def refresh_senses(self, world: 'WorldModel') -> QueenSenses:
        self.senses = QueenSenses(world, self.location)
        return self.senses

    def is_touching_site(self) -> bool:
        return self.touched_site_id is not None

    def touched_site(self, world: 'WorldModel') -> Optional[Site]:
        if self.touched_site_id is None:
            return None
        return world.get_site(self.touched_site_id)

    def is_under_attack(self, band: ThreatBand) -> bool:
        if self.senses is None:
            raise RuntimeError("Queen senses not refreshed this turn")
        return self.senses.is_under_threat(band.radius, band.count)

    def __repr__(self):
        return f"Queen({self.location}, hp={self.health}, touching={self.touched_site_id})"

"""Pytest fixtures for queen engine tests."""
import sys
from pathlib import Path
from typing import List, Optional

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from brain import BrainContext, StrategyParams
from engine.economy import Economy
from engine.geometry import Point
from engine.models import (
    BuildOrder,
    Owner,
    Site,
    SiteDefinition,
    SiteUpdate,
    StructureKind,
    UnitKind,
    UnitObservation,
)
from engine.queen import Queen
from engine.world_model import WorldModel

_ORDER_FOR_STRUCTURE = {
    StructureKind.NONE: BuildOrder.MINE,
    StructureKind.MINE: BuildOrder.MINE,
    StructureKind.TOWER: BuildOrder.TOWER,
    StructureKind.GARRISON: BuildOrder.BARRACKS_KNIGHT,
}


class Arena:
    """
    Hand-built arena for tests.

    Add sites and units, place the queen, then call context() to get the
    BrainContext a turn would see.
    """

    def __init__(self, economy: Optional[Economy] = None):
        self.world = WorldModel()
        self.economy = economy or Economy()
        self.queen: Optional[Queen] = None
        self.turn = 1
        self._queen_obs = UnitObservation(Point(0, 0), Owner.SELF, UnitKind.COMMANDER, 200)
        self._touching: Optional[int] = None
        self._units: List[UnitObservation] = []

    def add_site(self, site_id: int, x: int, y: int, radius: int = 60) -> Site:
        return self.world.register_site(SiteDefinition(site_id, Point(x, y), radius))

    def set_site(self, site_id: int, structure: StructureKind = StructureKind.NONE,
                 owner: Owner = Owner.NONE, gold: int = 200, cap: int = 3,
                 param1: int = -1, param2: int = -1) -> Site:
        """Apply a site update, supplying the build intent when we capture it"""
        if owner is Owner.SELF and not self.world.get_site(site_id).is_friendly:
            self.world.set_pending_structure(_ORDER_FOR_STRUCTURE[structure])
        return self.world.apply_site_update(
            SiteUpdate(site_id, gold, cap, structure, owner, param1, param2)
        )

    def place_queen(self, x: int, y: int, touching: Optional[int] = None, health: int = 200):
        self._queen_obs = UnitObservation(Point(x, y), Owner.SELF, UnitKind.COMMANDER, health)
        self._touching = touching

    def add_unit(self, x: int, y: int, owner: Owner = Owner.ENEMY,
                 kind: UnitKind = UnitKind.MELEE, health: int = 25):
        self._units.append(UnitObservation(Point(x, y), owner, kind, health))

    def add_enemy_melee(self, x: int, y: int, count: int = 1):
        for _ in range(count):
            self.add_unit(x, y)

    def clear_units(self):
        self._units = []

    def context(self) -> BrainContext:
        commander = self.world.replace_units([self._queen_obs] + self._units)
        if self.queen is None:
            self.queen = Queen(commander)
        self.queen.update(commander, self._touching, self.world)
        self.queen.refresh_senses(self.world)
        return BrainContext(world=self.world, economy=self.economy, queen=self.queen, turn=self.turn)


@pytest.fixture
def arena():
    """Empty arena with a saving economy and the queen at the origin."""
    return Arena()


@pytest.fixture
def params():
    """Production strategy parameters."""
    return StrategyParams()

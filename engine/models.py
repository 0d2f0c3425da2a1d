"""
Data models for arena entities.

These are the typed records the turn parser produces and the World Model
stores. Wire codes from the judge map directly onto the enum values.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional

from .errors import StructureMismatch
from .geometry import Point


class Owner(Enum):
    """Who holds a site or unit"""
    NONE = -1
    SELF = 0
    ENEMY = 1


class StructureKind(Enum):
    """What currently stands on a site"""
    NONE = -1
    MINE = 0
    TOWER = 1
    GARRISON = 2  # "BARRACKS" on the wire


class UnitKind(Enum):
    """Unit types, -1 is the commander (queen)"""
    COMMANDER = -1
    MELEE = 0     # KNIGHT
    RANGED = 1    # ARCHER
    HEAVY = 2     # GIANT


# Garrison variant token per trained unit kind
GARRISON_VARIANTS = {
    UnitKind.MELEE: "KNIGHT",
    UnitKind.RANGED: "ARCHER",
    UnitKind.HEAVY: "GIANT",
}


class BuildOrder(Enum):
    """Structures the queen can be ordered to build, valued by their output token"""
    MINE = "MINE"
    TOWER = "TOWER"
    BARRACKS_KNIGHT = "BARRACKS-KNIGHT"
    BARRACKS_ARCHER = "BARRACKS-ARCHER"
    BARRACKS_GIANT = "BARRACKS-GIANT"

    @property
    def token(self) -> str:
        return self.value

    @classmethod
    def garrison(cls, variant: str) -> 'BuildOrder':
        """Garrison order for a variant name ("KNIGHT", "ARCHER" or "GIANT")"""
        name = variant.upper()
        if name not in GARRISON_VARIANTS.values():
            raise ValueError(f"Unknown garrison variant: {variant}")
        return cls(f"BARRACKS-{name}")


# =============================================================================
# STRUCTURE VIEWS
# =============================================================================
# param1/param2 mean different things per structure kind. The views below
# are the typed projections; Site.as_*() refuses the wrong kind.

@dataclass(frozen=True)
class TowerView:
    hp: int
    attack_range: int


@dataclass(frozen=True)
class MineView:
    level: int  # current extraction rate
    cap: int    # max extraction rate for this site


@dataclass(frozen=True)
class GarrisonView:
    cooldown: int                  # turns until the garrison can train again
    unit_kind: Optional[UnitKind]  # what it trains


@dataclass(frozen=True)
class Site:
    """
    A capturable structure slot.

    Location and radius never change. The remaining fields are refreshed
    from the snapshot every turn via updated().
    """
    site_id: int
    location: Point
    radius: int
    structure: StructureKind = StructureKind.NONE
    owner: Owner = Owner.NONE
    resource_remaining: int = -1   # -1 if unknown
    resource_cap: int = -1         # max extraction rate, -1 if unknown
    param1: int = -1
    param2: int = -1

    @property
    def is_friendly(self) -> bool:
        return self.owner is Owner.SELF

    @property
    def is_hostile(self) -> bool:
        return self.owner is Owner.ENEMY

    @property
    def is_empty(self) -> bool:
        return self.structure is StructureKind.NONE

    @property
    def is_mine(self) -> bool:
        return self.structure is StructureKind.MINE

    @property
    def is_tower(self) -> bool:
        return self.structure is StructureKind.TOWER

    @property
    def is_garrison(self) -> bool:
        return self.structure is StructureKind.GARRISON

    @property
    def max_extraction(self) -> int:
        return self.resource_cap

    def as_tower(self) -> TowerView:
        self._require(StructureKind.TOWER)
        return TowerView(hp=self.param1, attack_range=self.param2)

    def as_mine(self) -> MineView:
        self._require(StructureKind.MINE)
        return MineView(level=self.param1, cap=self.resource_cap)

    def as_garrison(self) -> GarrisonView:
        self._require(StructureKind.GARRISON)
        try:
            unit_kind = UnitKind(self.param2)
        except ValueError:
            unit_kind = None
        return GarrisonView(cooldown=self.param1, unit_kind=unit_kind)

    def _require(self, kind: StructureKind):
        if self.structure is not kind:
            raise StructureMismatch(
                f"Site {self.site_id} holds {self.structure.name}, not {kind.name}"
            )

    def updated(self, update: 'SiteUpdate') -> 'Site':
        """Copy of this site with the mutable fields taken from update"""
        return replace(
            self,
            structure=update.structure,
            owner=update.owner,
            resource_remaining=update.resource_remaining,
            resource_cap=update.resource_cap,
            param1=update.param1,
            param2=update.param2,
        )

    def __str__(self):
        return f"Site({self.site_id}@{self.location}, {self.structure.name}, owner={self.owner.name})"


@dataclass(frozen=True)
class Unit:
    """A unit observed in the current snapshot. Ids are only valid for one turn."""
    unit_id: int
    owner: Owner
    location: Point
    kind: UnitKind
    health: int

    @property
    def is_enemy(self) -> bool:
        return self.owner is Owner.ENEMY

    @property
    def is_friendly(self) -> bool:
        return self.owner is Owner.SELF

    @property
    def is_melee(self) -> bool:
        return self.kind is UnitKind.MELEE

    @property
    def is_commander(self) -> bool:
        return self.kind is UnitKind.COMMANDER


# =============================================================================
# TURN INPUT RECORDS
# =============================================================================

@dataclass(frozen=True)
class SiteDefinition:
    """Static site data sent once before the first turn"""
    site_id: int
    location: Point
    radius: int


@dataclass(frozen=True)
class SiteUpdate:
    """Per-turn site delta"""
    site_id: int
    resource_remaining: int
    resource_cap: int
    structure: StructureKind
    owner: Owner
    param1: int
    param2: int


@dataclass(frozen=True)
class UnitObservation:
    """Per-turn unit sighting; the position in the unit list is its id"""
    location: Point
    owner: Owner
    kind: UnitKind
    health: int


@dataclass
class TurnSnapshot:
    """Everything the judge sends for one turn"""
    gold: int
    touched_site: Optional[int]
    site_updates: List[SiteUpdate] = field(default_factory=list)
    units: List[UnitObservation] = field(default_factory=list)

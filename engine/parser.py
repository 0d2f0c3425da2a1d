"""
Turn input parser.

The judge sends plain whitespace-separated integers:

    Once, before turn 1:
        numSites
        siteId x y radius                      (numSites lines)

    Every turn:
        gold touchedSite                       (touchedSite -1 if none)
        siteId gold maxMineSize structureType owner param1 param2   (numSites lines)
        numUnits
        x y owner unitType health              (numUnits lines)

Malformed input is a ProtocolViolation: there is no sensible way to keep
playing against a judge we no longer understand.
"""

import logging
from typing import Callable, List, Optional, Tuple

from .errors import ProtocolViolation
from .geometry import Point
from .models import (
    Owner,
    SiteDefinition,
    SiteUpdate,
    StructureKind,
    TurnSnapshot,
    UnitKind,
    UnitObservation,
)

logger = logging.getLogger(__name__)

NO_SITE = -1


def _ints(line: str, expected: int, what: str) -> List[int]:
    parts = line.split()
    if len(parts) != expected:
        raise ProtocolViolation(f"Expected {expected} fields for {what}, got {len(parts)}: {line!r}")
    try:
        return [int(p) for p in parts]
    except ValueError:
        raise ProtocolViolation(f"Non-integer field in {what}: {line!r}") from None


def _enum(enum_cls, value: int, what: str):
    try:
        return enum_cls(value)
    except ValueError:
        raise ProtocolViolation(f"Unknown {what} code {value}") from None


class TurnInputParser:
    """Reads judge input lines into typed records"""

    def __init__(self, read_line: Callable[[], str]):
        """
        Args:
            read_line: Returns the next input line; raises EOFError at end of input
        """
        self._read_line = read_line

    # ========== Line parsers ==========

    @staticmethod
    def parse_site_definition(line: str) -> SiteDefinition:
        site_id, x, y, radius = _ints(line, 4, "site definition")
        return SiteDefinition(site_id, Point(x, y), radius)

    @staticmethod
    def parse_turn_header(line: str) -> Tuple[int, Optional[int]]:
        """Returns (gold, touched_site) with touched_site None when not touching"""
        gold, touched = _ints(line, 2, "turn header")
        return gold, (None if touched == NO_SITE else touched)

    @staticmethod
    def parse_site_update(line: str) -> SiteUpdate:
        site_id, gold, max_mine, structure, owner, param1, param2 = _ints(line, 7, "site update")
        return SiteUpdate(
            site_id=site_id,
            resource_remaining=gold,
            resource_cap=max_mine,
            structure=_enum(StructureKind, structure, "structure type"),
            owner=_enum(Owner, owner, "owner"),
            param1=param1,
            param2=param2,
        )

    @staticmethod
    def parse_unit(line: str) -> UnitObservation:
        x, y, owner, unit_type, health = _ints(line, 5, "unit")
        return UnitObservation(
            location=Point(x, y),
            owner=_enum(Owner, owner, "owner"),
            kind=_enum(UnitKind, unit_type, "unit type"),
            health=health,
        )

    # ========== Block readers ==========

    def _read_count(self, what: str) -> int:
        (count,) = _ints(self._read_line(), 1, what)
        if count < 0:
            raise ProtocolViolation(f"Negative {what}: {count}")
        return count

    def read_site_definitions(self) -> List[SiteDefinition]:
        num_sites = self._read_count("site count")
        sites = [self.parse_site_definition(self._read_line()) for _ in range(num_sites)]
        logger.debug(f"Parsed {len(sites)} site definitions")
        return sites

    def read_turn(self, num_sites: int) -> TurnSnapshot:
        """
        Read one full turn.

        Args:
            num_sites: Number of site lines the judge sends (fixed for the game)
        """
        gold, touched = self.parse_turn_header(self._read_line())
        site_updates = [self.parse_site_update(self._read_line()) for _ in range(num_sites)]
        num_units = self._read_count("unit count")
        units = [self.parse_unit(self._read_line()) for _ in range(num_units)]
        return TurnSnapshot(gold=gold, touched_site=touched, site_updates=site_updates, units=units)

"""
World Model

Tracks everything the engine knows about the arena:
- Sites (registered once before turn 1, refreshed in place every turn)
- Units (replaced wholesale from each snapshot, ids valid for one turn)
- The pending structure intent bridging BUILD orders to ownership changes
- Which structure each friendly site was built as

Sites and units are immutable records; queries return fresh lists so
callers can never mutate the registries outside the update entry points.
"""

import logging
from typing import Callable, Dict, Iterable, List, Optional

from .errors import NotFound, ProtocolViolation
from .geometry import Point
from .models import (
    BuildOrder,
    Owner,
    Site,
    SiteDefinition,
    SiteUpdate,
    Unit,
    UnitObservation,
)

logger = logging.getLogger(__name__)

SitePredicate = Callable[[Site], bool]
UnitPredicate = Callable[[Unit], bool]


class WorldModel:
    """
    Site and unit registries keyed by id.

    The self-owned commander is never stored as a unit here; replace_units()
    hands it back to the caller, which owns the Queen entity.
    """

    def __init__(self):
        self._sites: Dict[int, Site] = {}
        self._units: Dict[int, Unit] = {}

        # Structure we just ordered on a site we don't own yet
        self._pending_structure: Optional[BuildOrder] = None
        # Structure each friendly site was captured as
        self._structure_by_site: Dict[int, BuildOrder] = {}

    def __len__(self):
        return len(self._sites)

    # ========== Registration ==========

    def register_site(self, definition: SiteDefinition) -> Site:
        if definition.site_id in self._sites:
            raise ProtocolViolation(f"Site {definition.site_id} registered twice")
        site = Site(definition.site_id, definition.location, definition.radius)
        self._sites[site.site_id] = site
        return site

    def register_sites(self, definitions: Iterable[SiteDefinition]) -> None:
        for definition in definitions:
            self.register_site(definition)
        logger.info(f"Registered {len(self._sites)} sites")

    # ========== Lookups ==========

    def get_site(self, site_id: int) -> Site:
        try:
            return self._sites[site_id]
        except KeyError:
            raise NotFound(f"Site {site_id} is not registered") from None

    def get_unit(self, unit_id: int) -> Unit:
        try:
            return self._units[unit_id]
        except KeyError:
            raise NotFound(f"Unit {unit_id} is not in the current snapshot") from None

    def sites_where(self, predicate: Optional[SitePredicate] = None,
                    near: Optional[Point] = None) -> List[Site]:
        """
        Sites matching predicate.

        Args:
            predicate: Filter; all sites when None
            near: When given, results are ordered nearest-first to this point

        Returns:
            New list of matching sites (registry order when near is None)
        """
        sites = [s for s in self._sites.values() if predicate is None or predicate(s)]
        if near is not None:
            sites.sort(key=lambda s: s.location.distance(near))
        return sites

    def units_where(self, predicate: Optional[UnitPredicate] = None,
                    near: Optional[Point] = None) -> List[Unit]:
        """Units matching predicate, nearest-first to `near` when given"""
        units = [u for u in self._units.values() if predicate is None or predicate(u)]
        if near is not None:
            units.sort(key=lambda u: u.location.distance(near))
        return units

    def all_sites(self) -> List[Site]:
        return self.sites_where()

    def all_units(self) -> List[Unit]:
        return self.units_where()

    # ========== Site Queries ==========

    def friendly_sites(self) -> List[Site]:
        return self.sites_where(lambda s: s.is_friendly)

    def hostile_sites(self) -> List[Site]:
        return self.sites_where(lambda s: s.is_hostile)

    def hostile_towers(self) -> List[Site]:
        return self.sites_where(lambda s: s.is_hostile and s.is_tower)

    def friendly_towers(self) -> List[Site]:
        return self.sites_where(lambda s: s.is_friendly and s.is_tower)

    def friendly_garrisons(self) -> List[Site]:
        return self.sites_where(lambda s: s.is_friendly and s.is_garrison)

    def sites_with_resources(self, minimum: int = 30) -> List[Site]:
        return self.sites_where(lambda s: s.resource_remaining > minimum)

    def safe_build_sites(self, near: Optional[Point] = None) -> List[Site]:
        """
        Sites we don't own that no enemy tower covers.

        A site is covered when its distance to a hostile tower is within
        (<=) that tower's attack range.
        """
        towers = [(t.location, t.as_tower().attack_range) for t in self.hostile_towers()]

        def is_safe(site: Site) -> bool:
            if site.is_friendly:
                return False
            return all(site.location.distance(loc) > reach for loc, reach in towers)

        return self.sites_where(is_safe, near=near)

    # ========== Unit Queries ==========

    def enemy_units(self) -> List[Unit]:
        return self.units_where(lambda u: u.is_enemy)

    def friendly_units(self) -> List[Unit]:
        return self.units_where(lambda u: u.is_friendly)

    # ========== Pending Structure Intent ==========

    @property
    def pending_structure(self) -> Optional[BuildOrder]:
        return self._pending_structure

    def set_pending_structure(self, order: BuildOrder) -> None:
        """Record what we are about to build on a site we don't own yet"""
        if self._pending_structure is not None and self._pending_structure is not order:
            logger.debug(f"Pending structure {self._pending_structure.token} replaced by {order.token}")
        self._pending_structure = order

    def recorded_structure(self, site_id: int) -> Optional[BuildOrder]:
        """The structure a friendly site was captured as, if we saw the capture"""
        return self._structure_by_site.get(site_id)

    # ========== Updates ==========

    def apply_site_update(self, update: SiteUpdate) -> Site:
        """
        Refresh one site from the snapshot.

        Capturing a site consumes the pending structure intent; losing a
        site forgets what we built there.

        Raises:
            ProtocolViolation: unknown site id, or a capture with no pending intent
        """
        site = self._sites.get(update.site_id)
        if site is None:
            raise ProtocolViolation(f"Update for unknown site {update.site_id}")

        if not site.is_friendly and update.owner is Owner.SELF:
            if self._pending_structure is None:
                raise ProtocolViolation(
                    f"Site {update.site_id} became ours with no pending structure intent"
                )
            self._structure_by_site[update.site_id] = self._pending_structure
            logger.info(f"🏗️  Captured site {update.site_id} as {self._pending_structure.token}")
            self._pending_structure = None
        elif site.is_friendly and update.owner is not Owner.SELF:
            self._structure_by_site.pop(update.site_id, None)
            logger.info(f"💥 Lost site {update.site_id} (now {update.owner.name})")

        refreshed = site.updated(update)
        self._sites[update.site_id] = refreshed
        return refreshed

    def apply_site_updates(self, updates: Iterable[SiteUpdate]) -> None:
        for update in updates:
            self.apply_site_update(update)

    def replace_units(self, observations: Iterable[UnitObservation]) -> Optional[Unit]:
        """
        Replace the whole unit roster from a snapshot.

        Unit ids are positions in the observation list.

        Returns:
            Our commander's unit record, or None if it was not observed
        """
        self._units = {}
        commander: Optional[Unit] = None
        for unit_id, obs in enumerate(observations):
            unit = Unit(unit_id, obs.owner, obs.location, obs.kind, obs.health)
            if unit.is_friendly and unit.is_commander:
                if commander is not None:
                    raise ProtocolViolation("Snapshot contains two friendly commanders")
                commander = unit
            else:
                self._units[unit_id] = unit
        logger.debug(f"Unit roster replaced: {len(self._units)} units")
        return commander

    def __repr__(self):
        return (f"WorldModel(sites={len(self._sites)}, units={len(self._units)}, "
                f"pending={self._pending_structure.token if self._pending_structure else None})")

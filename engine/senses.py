"""
Queen Senses

Situational facts derived from the World Model relative to the queen's
position: nearby threats, escape headings, safe build targets and rally
points. A QueenSenses instance is bound to one turn's world and location
and is rebuilt every turn.
"""

import logging
from typing import TYPE_CHECKING, List, Optional

import numpy as np

from .errors import NoSafeSiteAvailable
from .geometry import Point, Ray
from .models import Site, Unit

if TYPE_CHECKING:
    from .world_model import WorldModel

logger = logging.getLogger(__name__)


class QueenSenses:
    """
    Threat and target queries from the queen's point of view.

    Enemy melee distances are computed once per turn with numpy and
    reused by every radius query.
    """

    def __init__(self, world: 'WorldModel', location: Point):
        self._world = world
        self.location = location

        self._melee: List[Unit] = world.units_where(lambda u: u.is_enemy and u.is_melee)
        if self._melee:
            coords = np.array([(u.location.x, u.location.y) for u in self._melee], dtype=float)
            self._melee_distances = np.hypot(coords[:, 0] - location.x, coords[:, 1] - location.y)
        else:
            self._melee_distances = np.empty(0)

    # ========== Threats ==========

    def nearby_enemy_melee(self, radius: float) -> List[Unit]:
        """Enemy melee units strictly closer than radius"""
        return [u for u, d in zip(self._melee, self._melee_distances) if d < radius]

    def threat_count(self, radius: float) -> int:
        return int(np.count_nonzero(self._melee_distances < radius))

    def is_under_threat(self, radius: float, count_threshold: int) -> bool:
        """True when at least count_threshold enemy melee units are within radius"""
        return self.threat_count(radius) >= count_threshold

    def average_threat_location(self, radius: float) -> Point:
        """
        Centroid of enemy melee within radius.

        Raises:
            ValueError: if no enemy melee is within radius (guard with is_under_threat)
        """
        return Point.average([u.location for u in self.nearby_enemy_melee(radius)])

    def flee_vector(self, radius: float) -> Ray:
        """Heading from the queen directly away from the nearby horde's centroid"""
        return Ray(self.location, self.average_threat_location(radius)).opposite()

    def nearest_enemy_melee(self) -> Optional[Unit]:
        if not self._melee:
            return None
        return self._melee[int(np.argmin(self._melee_distances))]

    def enemy_towers_in_range(self) -> List[Site]:
        """Enemy towers whose attack range covers the queen"""
        return [
            t for t in self._world.hostile_towers()
            if t.location.distance(self.location) <= t.as_tower().attack_range
        ]

    # ========== Targets ==========

    def nearest_safe_build_site(self) -> Site:
        """
        Closest site we don't own that no enemy tower covers.

        Raises:
            NoSafeSiteAvailable: if every candidate is owned or covered
        """
        sites = self._world.safe_build_sites(near=self.location)
        if not sites:
            raise NoSafeSiteAvailable(f"No safe build sites from {self.location}")
        return sites[0]

    def nearest_friendly_tower(self) -> Optional[Site]:
        towers = self._world.sites_where(lambda s: s.is_friendly and s.is_tower, near=self.location)
        return towers[0] if towers else None

    def summary(self) -> dict:
        """Compact situation snapshot for logging"""
        return {
            'location': str(self.location),
            'enemy_melee': len(self._melee),
            'nearest_melee': round(float(self._melee_distances.min()), 1) if self._melee else None,
            'towers_covering': [t.site_id for t in self.enemy_towers_in_range()],
        }

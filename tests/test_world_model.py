"""
Tests for the World Model: registries, site updates, pending structure
intent, and unit roster replacement.
"""

import pytest

from engine.errors import NotFound, ProtocolViolation, StructureMismatch
from engine.geometry import Point
from engine.models import (
    BuildOrder,
    Owner,
    SiteDefinition,
    SiteUpdate,
    StructureKind,
    UnitKind,
    UnitObservation,
)
from engine.world_model import WorldModel


def make_update(site_id, structure=StructureKind.NONE, owner=Owner.NONE,
                gold=200, cap=3, param1=-1, param2=-1):
    return SiteUpdate(site_id, gold, cap, structure, owner, param1, param2)


@pytest.fixture
def world():
    w = WorldModel()
    w.register_sites([
        SiteDefinition(0, Point(100, 100), 60),
        SiteDefinition(1, Point(500, 100), 70),
        SiteDefinition(2, Point(900, 100), 80),
    ])
    return w


class TestRegistration:
    """Site registration and lookup"""

    def test_register_and_get(self, world):
        site = world.get_site(1)
        assert site.location == Point(500, 100)
        assert site.radius == 70
        assert site.owner is Owner.NONE
        assert site.structure is StructureKind.NONE

    def test_duplicate_registration_rejected(self, world):
        with pytest.raises(ProtocolViolation):
            world.register_site(SiteDefinition(1, Point(0, 0), 50))

    def test_unknown_site_not_found(self, world):
        with pytest.raises(NotFound):
            world.get_site(42)

    def test_not_found_is_a_key_error(self, world):
        with pytest.raises(KeyError):
            world.get_site(42)

    def test_unknown_unit_not_found(self, world):
        with pytest.raises(NotFound):
            world.get_unit(0)

    def test_len_counts_sites(self, world):
        assert len(world) == 3


class TestSiteUpdates:
    """apply_site_update semantics"""

    def test_update_unknown_site_is_protocol_violation(self, world):
        with pytest.raises(ProtocolViolation):
            world.apply_site_update(make_update(99))

    def test_update_refreshes_fields_and_keeps_geometry(self, world):
        world.apply_site_update(make_update(0, StructureKind.MINE, Owner.ENEMY, gold=150, cap=4, param1=2))
        site = world.get_site(0)
        assert site.is_hostile
        assert site.is_mine
        assert site.resource_remaining == 150
        assert site.max_extraction == 4
        assert site.location == Point(100, 100)
        assert site.radius == 60

    def test_capture_without_intent_is_protocol_violation(self, world):
        with pytest.raises(ProtocolViolation):
            world.apply_site_update(make_update(0, StructureKind.MINE, Owner.SELF, param1=1))

    def test_capture_consumes_intent(self, world):
        world.set_pending_structure(BuildOrder.MINE)
        world.apply_site_update(make_update(0, StructureKind.MINE, Owner.SELF, param1=1))
        assert world.pending_structure is None
        assert world.recorded_structure(0) is BuildOrder.MINE

    def test_capture_records_garrison_variant(self, world):
        world.set_pending_structure(BuildOrder.BARRACKS_ARCHER)
        world.apply_site_update(make_update(1, StructureKind.GARRISON, Owner.SELF, param1=0, param2=1))
        assert world.recorded_structure(1) is BuildOrder.BARRACKS_ARCHER

    def test_staying_friendly_does_not_need_intent(self, world):
        world.set_pending_structure(BuildOrder.TOWER)
        world.apply_site_update(make_update(0, StructureKind.TOWER, Owner.SELF, param1=200, param2=250))
        # Reinforcing an owned tower: no ownership change, no intent required
        world.apply_site_update(make_update(0, StructureKind.TOWER, Owner.SELF, param1=300, param2=280))
        assert world.get_site(0).param1 == 300

    def test_losing_site_discards_recorded_structure(self, world):
        world.set_pending_structure(BuildOrder.TOWER)
        world.apply_site_update(make_update(2, StructureKind.TOWER, Owner.SELF, param1=200, param2=250))
        world.apply_site_update(make_update(2, StructureKind.NONE, Owner.NONE))
        assert world.recorded_structure(2) is None
        assert not world.get_site(2).is_friendly

    def test_intent_survives_unrelated_updates(self, world):
        world.set_pending_structure(BuildOrder.MINE)
        world.apply_site_updates([make_update(0), make_update(1), make_update(2)])
        assert world.pending_structure is BuildOrder.MINE


class TestStructureViews:
    """Kind-checked projections of param1/param2"""

    def test_tower_view(self, world):
        world.apply_site_update(make_update(1, StructureKind.TOWER, Owner.ENEMY, param1=650, param2=310))
        tower = world.get_site(1).as_tower()
        assert tower.hp == 650
        assert tower.attack_range == 310

    def test_tower_specialization_follows_every_update(self, world):
        world.apply_site_update(make_update(1, StructureKind.TOWER, Owner.ENEMY, param1=650, param2=310))
        world.apply_site_update(make_update(1, StructureKind.TOWER, Owner.ENEMY, param1=600, param2=300))
        assert world.get_site(1).as_tower().attack_range == 300

    def test_wrong_view_raises(self, world):
        world.apply_site_update(make_update(1, StructureKind.TOWER, Owner.ENEMY, param1=650, param2=310))
        with pytest.raises(StructureMismatch):
            world.get_site(1).as_mine()

    def test_mine_view(self, world):
        world.apply_site_update(make_update(0, StructureKind.MINE, Owner.ENEMY, cap=5, param1=2))
        mine = world.get_site(0).as_mine()
        assert mine.level == 2
        assert mine.cap == 5

    def test_garrison_view(self, world):
        world.apply_site_update(make_update(0, StructureKind.GARRISON, Owner.ENEMY, param1=3, param2=2))
        garrison = world.get_site(0).as_garrison()
        assert garrison.cooldown == 3
        assert garrison.unit_kind is UnitKind.HEAVY


class TestQueries:
    """Filtered and proximity-ordered queries"""

    def test_sites_where_orders_by_proximity(self, world):
        sites = world.sites_where(near=Point(1000, 100))
        assert [s.site_id for s in sites] == [2, 1, 0]

    def test_sites_where_filters(self, world):
        world.apply_site_update(make_update(1, StructureKind.TOWER, Owner.ENEMY, param1=400, param2=300))
        assert [s.site_id for s in world.hostile_towers()] == [1]
        assert [s.site_id for s in world.sites_where(lambda s: s.is_empty)] == [0, 2]

    def test_query_results_are_copies(self, world):
        sites = world.all_sites()
        sites.clear()
        assert len(world.all_sites()) == 3

    def test_safe_build_sites_exclude_tower_coverage(self, world):
        # Tower at site 1 (500, 100) covers up to 400: sites 0 and 2 sit exactly on the edge
        world.apply_site_update(make_update(1, StructureKind.TOWER, Owner.ENEMY, param1=400, param2=400))
        assert world.safe_build_sites() == []

    def test_safe_build_sites_outside_range(self, world):
        world.apply_site_update(make_update(1, StructureKind.TOWER, Owner.ENEMY, param1=400, param2=399))
        safe = world.safe_build_sites(near=Point(0, 100))
        assert [s.site_id for s in safe] == [0, 2]

    def test_safe_build_sites_exclude_friendly(self, world):
        world.set_pending_structure(BuildOrder.MINE)
        world.apply_site_update(make_update(0, StructureKind.MINE, Owner.SELF, param1=1))
        assert [s.site_id for s in world.safe_build_sites()] == [1, 2]

    def test_sites_with_resources(self, world):
        world.apply_site_updates([
            make_update(0, gold=10),
            make_update(1, gold=31),
            make_update(2, gold=-1),
        ])
        assert [s.site_id for s in world.sites_with_resources()] == [1]


class TestUnitRoster:
    """replace_units and unit queries"""

    def test_commander_returned_not_stored(self, world):
        commander = world.replace_units([
            UnitObservation(Point(10, 10), Owner.ENEMY, UnitKind.MELEE, 25),
            UnitObservation(Point(20, 20), Owner.SELF, UnitKind.COMMANDER, 200),
        ])
        assert commander is not None
        assert commander.unit_id == 1
        assert commander.location == Point(20, 20)
        assert [u.unit_id for u in world.all_units()] == [0]
        with pytest.raises(NotFound):
            world.get_unit(1)

    def test_enemy_commander_is_a_unit(self, world):
        world.replace_units([UnitObservation(Point(10, 10), Owner.ENEMY, UnitKind.COMMANDER, 200)])
        assert world.get_unit(0).is_commander
        assert world.get_unit(0).is_enemy

    def test_roster_replaced_wholesale(self, world):
        world.replace_units([UnitObservation(Point(10, 10), Owner.ENEMY, UnitKind.MELEE, 25)] * 3)
        world.replace_units([UnitObservation(Point(50, 50), Owner.SELF, UnitKind.RANGED, 45)])
        assert len(world.all_units()) == 1
        assert world.enemy_units() == []
        assert len(world.friendly_units()) == 1

    def test_missing_commander_returns_none(self, world):
        assert world.replace_units([]) is None

    def test_two_friendly_commanders_rejected(self, world):
        queen = UnitObservation(Point(20, 20), Owner.SELF, UnitKind.COMMANDER, 200)
        with pytest.raises(ProtocolViolation):
            world.replace_units([queen, queen])

    def test_units_where_orders_by_proximity(self, world):
        world.replace_units([
            UnitObservation(Point(300, 0), Owner.ENEMY, UnitKind.MELEE, 25),
            UnitObservation(Point(100, 0), Owner.ENEMY, UnitKind.MELEE, 25),
            UnitObservation(Point(200, 0), Owner.ENEMY, UnitKind.HEAVY, 200),
        ])
        ordered = world.units_where(near=Point(0, 0))
        assert [u.unit_id for u in ordered] == [1, 2, 0]


class TestBuildOrder:
    """Garrison orders are limited to the trainable unit kinds"""

    @pytest.mark.parametrize("variant,order", [
        ("KNIGHT", BuildOrder.BARRACKS_KNIGHT),
        ("archer", BuildOrder.BARRACKS_ARCHER),
        ("Giant", BuildOrder.BARRACKS_GIANT),
    ])
    def test_garrison_variants(self, variant, order):
        assert BuildOrder.garrison(variant) is order

    def test_unknown_variant_rejected(self):
        with pytest.raises(ValueError):
            BuildOrder.garrison("QUEEN")

    def test_tokens(self):
        assert BuildOrder.BARRACKS_GIANT.token == "BARRACKS-GIANT"
        assert BuildOrder.MINE.token == "MINE"

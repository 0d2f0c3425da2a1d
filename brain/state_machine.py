"""
Queen Strategy State Machine

The queen is always in exactly one behavioral mode:

    EXPLORING          walk to the nearest safe site and claim it
    FLEEING            get away from an enemy horde
    CAPTURING_SITE     just reached an open site, choose what to build
    EXPANDING_TOWER    keep reinforcing a tower until it maxes out
    EXPANDING_MINE     keep upgrading a mine until it maxes out
    BUILDING_GARRISON  one-shot garrison order

Each turn the driver first computes next_state() from the previous state
against the current snapshot, then decide_action() on the result. Both are
pure functions of (state, context, params); recording the pending
structure intent for a BUILD is left to the caller (QueenBrain).

Transition priority, first match wins:

    EXPLORING       -> CAPTURING_SITE(s)  touching a site we don't own
                    -> FLEEING            under the flee_trigger band
                    -> EXPLORING
    CAPTURING_SITE  -> EXPANDING_TOWER    defensive trigger
                    -> EXPANDING_MINE     no garrison needed (and s is not our new garrison)
                    -> EXPLORING
    EXPANDING_TOWER -> itself while param1 < param2, else EXPLORING
    EXPANDING_MINE  -> itself while param1 < max extraction, else EXPLORING
    FLEEING         -> itself while under the flee_hold band, else EXPLORING
    BUILDING_GARRISON -> EXPLORING
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional, Tuple

from engine.commands import AgentAction, Build, Move, Wait
from engine.errors import NoSafeSiteAvailable
from engine.models import BuildOrder, Site
from engine.strategy_config import StrategyConfig, ThreatBand, get_config

from .interface import BrainContext

logger = logging.getLogger(__name__)


class Mode(Enum):
    EXPLORING = "Exploring"
    FLEEING = "Fleeing"
    CAPTURING_SITE = "CapturingSite"
    EXPANDING_TOWER = "ExpandingTower"
    EXPANDING_MINE = "ExpandingMine"
    BUILDING_GARRISON = "BuildingGarrison"


SITE_MODES = frozenset({
    Mode.CAPTURING_SITE,
    Mode.EXPANDING_TOWER,
    Mode.EXPANDING_MINE,
    Mode.BUILDING_GARRISON,
})


@dataclass(frozen=True)
class StrategyState:
    """A mode plus, for site-bound modes, the id of the site it works on"""
    mode: Mode
    site_id: Optional[int] = None

    def __post_init__(self):
        if self.mode in SITE_MODES and self.site_id is None:
            raise ValueError(f"{self.mode.value} needs a site")
        if self.mode not in SITE_MODES and self.site_id is not None:
            raise ValueError(f"{self.mode.value} does not take a site")

    @classmethod
    def exploring(cls) -> 'StrategyState':
        return cls(Mode.EXPLORING)

    @classmethod
    def fleeing(cls) -> 'StrategyState':
        return cls(Mode.FLEEING)

    @classmethod
    def capturing_site(cls, site_id: int) -> 'StrategyState':
        return cls(Mode.CAPTURING_SITE, site_id)

    @classmethod
    def expanding_tower(cls, site_id: int) -> 'StrategyState':
        return cls(Mode.EXPANDING_TOWER, site_id)

    @classmethod
    def expanding_mine(cls, site_id: int) -> 'StrategyState':
        return cls(Mode.EXPANDING_MINE, site_id)

    @classmethod
    def building_garrison(cls, site_id: int) -> 'StrategyState':
        return cls(Mode.BUILDING_GARRISON, site_id)

    def __str__(self):
        if self.site_id is None:
            return self.mode.value
        return f"{self.mode.value}({self.site_id})"


@dataclass(frozen=True)
class StrategyParams:
    """
    Every tunable threshold the state machine uses.

    Defaults are the production values; from_config() reads overrides
    from the strategy config file.
    """
    flee_trigger: ThreatBand = ThreatBand(160, 7)
    flee_hold: ThreatBand = ThreatBand(120, 4)
    explore_tower: ThreatBand = ThreatBand(400, 4)
    defend_far: ThreatBand = ThreatBand(600, 7)
    defend_near: ThreatBand = ThreatBand(200, 3)
    flee_touching: ThreatBand = ThreatBand(400, 4)
    flee_open: ThreatBand = ThreatBand(100, 5)
    depleting_mine_threshold: int = 100
    garrison_kind: str = "KNIGHT"
    garrison_target: int = 1

    BANDS = ('flee_trigger', 'flee_hold', 'explore_tower', 'defend_far',
             'defend_near', 'flee_touching', 'flee_open')

    @classmethod
    def from_config(cls, config: Optional[StrategyConfig] = None) -> 'StrategyParams':
        cfg = config or get_config()
        defaults = cls()
        bands = {name: cfg.get_threat_band(name, getattr(defaults, name)) for name in cls.BANDS}
        params = cls(
            depleting_mine_threshold=int(cfg.get(
                'fleeing', 'depleting_mine_threshold', defaults.depleting_mine_threshold)),
            garrison_kind=str(cfg.get('garrison', 'unit_kind', defaults.garrison_kind)).upper(),
            garrison_target=int(cfg.get('garrison', 'target_count', defaults.garrison_target)),
            **bands,
        )
        # Unknown garrison variants fail at startup rather than on the first order
        BuildOrder.garrison(params.garrison_kind)
        return params

    @property
    def garrison_order(self) -> BuildOrder:
        return BuildOrder.garrison(self.garrison_kind)


Decision = Tuple[AgentAction, str]


# =============================================================================
# SITUATION CHECKS
# =============================================================================

def under_threat(ctx: BrainContext, band: ThreatBand) -> bool:
    return ctx.senses.is_under_threat(band.radius, band.count)


def defensive_trigger(ctx: BrainContext, params: StrategyParams) -> bool:
    """Many attackers at range, or a few right on top of us"""
    return under_threat(ctx, params.defend_far) or under_threat(ctx, params.defend_near)


def needs_first_garrison(ctx: BrainContext, params: StrategyParams) -> bool:
    return (not ctx.economy.should_save
            and len(ctx.world.friendly_garrisons()) < params.garrison_target)


def should_extract_instead(ctx: BrainContext, params: StrategyParams) -> bool:
    return not needs_first_garrison(ctx, params) and not defensive_trigger(ctx, params)


def _is_our_garrison(site: Site) -> bool:
    return site.is_friendly and site.is_garrison


# =============================================================================
# TRANSITIONS
# =============================================================================

def _next_from_exploring(state: StrategyState, ctx: BrainContext, params: StrategyParams) -> StrategyState:
    site = ctx.touched_site()
    if site is not None and not site.is_friendly:
        return StrategyState.capturing_site(site.site_id)
    if under_threat(ctx, params.flee_trigger):
        return StrategyState.fleeing()
    return state


def _next_from_capturing(state: StrategyState, ctx: BrainContext, params: StrategyParams) -> StrategyState:
    site = ctx.world.get_site(state.site_id)
    if defensive_trigger(ctx, params):
        return StrategyState.expanding_tower(site.site_id)
    # A garrison is built once; once it stands here there is nothing to expand
    if should_extract_instead(ctx, params) and not _is_our_garrison(site):
        return StrategyState.expanding_mine(site.site_id)
    return StrategyState.exploring()


def _next_from_expanding_tower(state: StrategyState, ctx: BrainContext, params: StrategyParams) -> StrategyState:
    site = ctx.world.get_site(state.site_id)
    if site.param1 < site.param2:
        return state
    return StrategyState.exploring()


def _next_from_expanding_mine(state: StrategyState, ctx: BrainContext, params: StrategyParams) -> StrategyState:
    site = ctx.world.get_site(state.site_id)
    if site.param1 < site.max_extraction:
        return state
    return StrategyState.exploring()


def _next_from_fleeing(state: StrategyState, ctx: BrainContext, params: StrategyParams) -> StrategyState:
    if under_threat(ctx, params.flee_hold):
        return state
    return StrategyState.exploring()


def _next_from_building_garrison(state: StrategyState, ctx: BrainContext, params: StrategyParams) -> StrategyState:
    return StrategyState.exploring()


_TRANSITIONS: Dict[Mode, Callable[[StrategyState, BrainContext, StrategyParams], StrategyState]] = {
    Mode.EXPLORING: _next_from_exploring,
    Mode.CAPTURING_SITE: _next_from_capturing,
    Mode.EXPANDING_TOWER: _next_from_expanding_tower,
    Mode.EXPANDING_MINE: _next_from_expanding_mine,
    Mode.FLEEING: _next_from_fleeing,
    Mode.BUILDING_GARRISON: _next_from_building_garrison,
}


def next_state(state: StrategyState, ctx: BrainContext, params: StrategyParams) -> StrategyState:
    """Pure transition: the mode to act in this turn, given last turn's mode"""
    return _TRANSITIONS[state.mode](state, ctx, params)


# =============================================================================
# ACTIONS
# =============================================================================

def approach_safe_site(ctx: BrainContext) -> Decision:
    """
    Move toward the nearest safe build site.

    With no safe site left, rally at our nearest tower, or WAIT if we
    have none.
    """
    try:
        site = ctx.senses.nearest_safe_build_site()
    except NoSafeSiteAvailable:
        tower = ctx.senses.nearest_friendly_tower()
        if tower is None:
            logger.warning("No safe build site and no tower to rally at - waiting")
            return Wait(), "no safe site, no rally point"
        logger.warning(f"No safe build site - rallying at tower {tower.site_id}")
        return Move(tower.location), f"rallying at tower {tower.site_id}"
    return Move(site.location), f"approaching safe site {site.site_id}"


def _act_exploring(state: StrategyState, ctx: BrainContext, params: StrategyParams) -> Decision:
    site = ctx.touched_site()
    if site is not None and not site.is_friendly:
        if under_threat(ctx, params.explore_tower):
            return Build(site.site_id, BuildOrder.TOWER), f"threatened ({params.explore_tower}) on open site"
        return Build(site.site_id, BuildOrder.MINE), "open site, no pressure"
    return approach_safe_site(ctx)


def _move_away_from_horde(ctx: BrainContext, band: ThreatBand) -> Decision:
    if under_threat(ctx, band):
        heading = ctx.senses.flee_vector(band.radius)
        return Move(heading.target), f"away from horde ({band})"
    return approach_safe_site(ctx)


def _act_fleeing(state: StrategyState, ctx: BrainContext, params: StrategyParams) -> Decision:
    site = ctx.touched_site()
    if site is None:
        return _move_away_from_horde(ctx, params.flee_open)

    if site.is_friendly and site.is_mine and site.resource_remaining < params.depleting_mine_threshold:
        return Build(site.site_id, BuildOrder.TOWER), "tower over depleting mine"
    # Empty sites and garrisons, ours included
    if not site.is_tower and not site.is_mine:
        return Build(site.site_id, BuildOrder.TOWER), "tower on undeveloped site"
    if not site.is_friendly:
        return Build(site.site_id, BuildOrder.TOWER), "tower on enemy site"
    return _move_away_from_horde(ctx, params.flee_touching)


def _act_capturing(state: StrategyState, ctx: BrainContext, params: StrategyParams) -> Decision:
    site_id = state.site_id
    if defensive_trigger(ctx, params):
        return Build(site_id, BuildOrder.TOWER), "defensive tower"
    if needs_first_garrison(ctx, params):
        return Build(site_id, params.garrison_order), "first garrison"
    return Build(site_id, BuildOrder.MINE), "safe to expand production"


def _act_expanding_tower(state: StrategyState, ctx: BrainContext, params: StrategyParams) -> Decision:
    return Build(state.site_id, BuildOrder.TOWER), "reinforcing tower"


def _act_expanding_mine(state: StrategyState, ctx: BrainContext, params: StrategyParams) -> Decision:
    return Build(state.site_id, BuildOrder.MINE), "upgrading mine"


def _act_building_garrison(state: StrategyState, ctx: BrainContext, params: StrategyParams) -> Decision:
    return Build(state.site_id, params.garrison_order), "building garrison"


_ACTIONS: Dict[Mode, Callable[[StrategyState, BrainContext, StrategyParams], Decision]] = {
    Mode.EXPLORING: _act_exploring,
    Mode.FLEEING: _act_fleeing,
    Mode.CAPTURING_SITE: _act_capturing,
    Mode.EXPANDING_TOWER: _act_expanding_tower,
    Mode.EXPANDING_MINE: _act_expanding_mine,
    Mode.BUILDING_GARRISON: _act_building_garrison,
}


def decide_action(state: StrategyState, ctx: BrainContext, params: StrategyParams) -> Decision:
    """
    The queen action for a state.

    Returns:
        (action, reasoning) tuple
    """
    return _ACTIONS[state.mode](state, ctx, params)

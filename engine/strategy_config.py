"""
Strategy tuning.

Threat bands, economy water marks and the other thresholds the queen
plays by live in a JSON file so they can be tuned between games without
touching code:

    {
      "name": "production",
      "version": "1.2.0",
      "threat_bands": {"flee_trigger": {"radius": 160, "count": 7}, ...},
      "economy": {"high_water": 140, "low_water": 20},
      "fleeing": {"depleting_mine_threshold": 100},
      "garrison": {"unit_kind": "KNIGHT", "target_count": 1}
    }

Lookups always take a default, so a missing or broken file degrades to
the built-in production values instead of stopping the bot.

The file is configs/production.json unless STRATEGY_CONFIG points elsewhere.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "configs" / "production.json"


@dataclass(frozen=True)
class ThreatBand:
    """
    A (radius, count) threat level.

    The queen is under threat at this level when at least `count` enemy
    melee units are strictly closer than `radius`.
    """
    radius: int
    count: int

    def __str__(self):
        return f"{self.count} within {self.radius}"


def _resolve_path(config_path: Optional[str]) -> Path:
    if config_path:
        return Path(config_path)
    return Path(os.environ.get('STRATEGY_CONFIG') or DEFAULT_CONFIG_PATH)


def _read_json(path: Path) -> Optional[Dict[str, Any]]:
    """Parsed file contents, or None when the file is missing or unreadable"""
    if not path.is_file():
        logger.warning(f"⚠️  No strategy config at {path}, playing on built-in defaults")
        return None
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Strategy config {path} is not valid JSON ({e}), playing on built-in defaults")
        return None
    except OSError as e:
        logger.error(f"Could not read strategy config {path}: {e}")
        return None
    if not isinstance(data, dict):
        logger.error(f"Strategy config {path} must hold a JSON object, got {type(data).__name__}")
        return None
    return data


class StrategyConfig:
    """Sectioned tuning values read from one JSON file"""

    def __init__(self, config_path: Optional[str] = None):
        """
        Args:
            config_path: JSON file to read. Falls back to $STRATEGY_CONFIG,
                         then configs/production.json.
        """
        self.path = _resolve_path(config_path)
        self._data: Dict[str, Any] = {}
        self._loaded = False
        self.reload()

    def reload(self):
        """Re-read the file, e.g. after editing bands mid-session"""
        data = _read_json(self.path)
        self._loaded = data is not None
        self._data = data or {}
        if self._loaded:
            logger.info(f"📋 Strategy config '{self.name}' v{self.version} from {self.path}")
            self._log_tuning()

    def _log_tuning(self):
        for band_name, band in sorted(self.section('threat_bands').items()):
            logger.debug(f"  band {band_name}: {band.get('count')} within {band.get('radius')}")
        eco = self.section('economy')
        logger.debug(f"  economy: save below {eco.get('low_water')}, spend above {eco.get('high_water')}")

    @property
    def name(self) -> str:
        return self._data.get('name', 'default')

    @property
    def version(self) -> str:
        return self._data.get('version', '0.0.0')

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def section(self, section: str) -> Dict[str, Any]:
        return self._data.get(section, {})

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """Value of section.key, or default when either is absent"""
        return self.section(section).get(key, default)

    def get_threat_band(self, name: str, default: ThreatBand) -> ThreatBand:
        """
        Named band from the threat_bands section.

        Either field may be omitted and keeps the value from default.
        """
        band = self.section('threat_bands').get(name, {})
        return ThreatBand(
            radius=int(band.get('radius', default.radius)),
            count=int(band.get('count', default.count)),
        )

    def as_dict(self) -> Dict[str, Any]:
        return dict(self._data)


_active: Optional[StrategyConfig] = None


def get_config() -> StrategyConfig:
    """Process-wide config, loaded on first use"""
    global _active
    if _active is None:
        _active = StrategyConfig()
    return _active


def set_config_path(path: str) -> StrategyConfig:
    """Switch the process-wide config to another file"""
    global _active
    _active = StrategyConfig(path)
    return _active

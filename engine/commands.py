"""
Commands the engine emits each turn.

One agent action (Move, Build or Wait) followed by one production
directive (Train). to_command() renders the exact judge line.
"""

from dataclasses import dataclass
from typing import Optional, Union

from .geometry import Point
from .models import BuildOrder


@dataclass(frozen=True)
class Move:
    target: Point

    def to_command(self) -> str:
        return f"MOVE {self.target.x} {self.target.y}"


@dataclass(frozen=True)
class Build:
    site_id: int
    order: BuildOrder

    def to_command(self) -> str:
        return f"BUILD {self.site_id} {self.order.token}"


@dataclass(frozen=True)
class Wait:
    def to_command(self) -> str:
        return "WAIT"


AgentAction = Union[Move, Build, Wait]


@dataclass(frozen=True)
class Train:
    """Production directive. site_id None trains nothing (TRAIN with no site)."""
    site_id: Optional[int] = None

    def to_command(self) -> str:
        if self.site_id is None:
            return "TRAIN"
        return f"TRAIN {self.site_id}"

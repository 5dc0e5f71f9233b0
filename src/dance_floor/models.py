"""Record types shared by the dance-floor engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

Role = Literal["lead", "follow", "both", "unknown"]
UnitType = Literal["pair", "solo"]
MemberSide = Literal["leader", "follower"]

ROLES: tuple[Role, ...] = ("lead", "follow", "both", "unknown")


@dataclass(frozen=True)
class DancerRow:
    """A single roster entry as supplied by the caller."""

    name: str
    role: Role = "unknown"
    ts: Optional[int] = None
    wish: Optional[str] = None
    paid: Optional[bool] = None


@dataclass(frozen=True)
class DanceUnit:
    """A pair ``(leader, follower)`` or a solo ``(member,)``."""

    type: UnitType
    members: tuple[DancerRow, ...]
    unit_key: str
    priority_score: float
    image_num: int


@dataclass(frozen=True)
class PlacedUnit(DanceUnit):
    """A unit with its horizontal position, vertical jitter and mirror flag."""

    x: float
    y_offset: int
    flipped: bool


@dataclass(frozen=True)
class DockLayoutEntry:
    scale: float
    dx: float


@dataclass(frozen=True)
class BubbleAlignment:
    left_member: MemberSide
    right_member: MemberSide

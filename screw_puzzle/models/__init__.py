"""Request models for the HTTP layer."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class NewStageRequest:
    """Stage creation request."""
    stage_number: int = 1
    width: Optional[float] = None
    height: Optional[float] = None
    seed: Optional[int] = None


@dataclass
class HitRequest:
    """Pointer press at stage coordinates."""
    x: float
    y: float
    hit_radius: Optional[float] = None


@dataclass
class ItemRequest:
    """Item use, with a target screw for expose and drill."""
    screw_id: Optional[int] = None

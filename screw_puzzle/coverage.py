"""Coverage queries: which plates cover a screw, and which screws are free."""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from .geometry import Point, point_in_shape, distance
from .state import Screw, Plate, Stage

DEFAULT_HIT_RADIUS = 15.0


@dataclass
class CoverageResult:
    """Outcome of a coverage query. Truthy when the screw is covered."""
    covered: bool
    covering_plates: List[Plate] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.covered

    def to_dict(self) -> dict:
        return {
            'covered': self.covered,
            'covering_plate_ids': [plate.id for plate in self.covering_plates]
        }


def is_covered(screw: Screw, owner: Plate, plates: Iterable[Plate]) -> CoverageResult:
    """
    Find every plate that covers a screw.

    Only plates with a z-order strictly above the owner's are candidates; the
    owner and plates at equal or lower z-order never cover. Removed screws are
    not skipped here.

    Args:
        screw: Screw to test
        owner: Plate the screw belongs to
        plates: All plates of the stage

    Returns:
        CoverageResult with the full set of covering plates
    """
    covering = [
        plate for plate in plates
        if plate.z_order > owner.z_order and point_in_shape(screw.position, plate.shape)
    ]
    return CoverageResult(covered=bool(covering), covering_plates=covering)


def is_screw_covered(screw: Screw, stage: Stage) -> CoverageResult:
    """Coverage query that resolves the owning plate through the stage."""
    return is_covered(screw, stage.plate_of(screw), stage.plates)


def find_removable_screws(stage: Stage) -> List[Tuple[Screw, Plate]]:
    """
    Collect every non-removed, uncovered screw.

    Order follows the stage's plate order, then each plate's screw order.
    """
    removable = []
    for screw, plate in stage.iter_screws():
        if screw.removed:
            continue
        if not is_covered(screw, plate, stage.plates).covered:
            removable.append((screw, plate))
    return removable


def has_any_removable_screw(stage: Stage) -> bool:
    """Return as soon as one removable screw is found."""
    for screw, plate in stage.iter_screws():
        if screw.removed:
            continue
        if not is_covered(screw, plate, stage.plates).covered:
            return True
    return False


def hit_test(point: Point, stage: Stage,
             hit_radius: float = DEFAULT_HIT_RADIUS) -> Optional[Tuple[Screw, Plate]]:
    """
    Find the screw under a pointer position.

    Plates are visited top-most first and the first screw within hit_radius
    wins, even if a screw on a lower plate is closer.

    Args:
        point: Pointer position
        stage: Stage to search
        hit_radius: Maximum distance from the screw center

    Returns:
        (screw, plate) or None
    """
    for plate in sorted(stage.plates, key=lambda p: p.z_order, reverse=True):
        for screw in plate.screws:
            if screw.removed:
                continue
            if distance(point, screw.position) <= hit_radius:
                return screw, plate
    return None


def coverage_map(stage: Stage) -> Dict[int, List[int]]:
    """Map each non-removed screw id to the ids of plates covering it."""
    return {
        screw.id: [p.id for p in is_covered(screw, plate, stage.plates).covering_plates]
        for screw, plate in stage.iter_screws()
        if not screw.removed
    }

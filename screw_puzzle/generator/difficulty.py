"""Difficulty progression by stage number."""

from ..state import DifficultyParams

MAX_PLATE_COUNT = 12
MAX_SCREWS_PER_PLATE = 6
MAX_ELLIPSE_RATIO = 0.7
MIN_PLATE_RADIUS_FLOOR = 40.0
MAX_PLATE_RADIUS_CEILING = 100.0
MAX_OVERLAP_DENSITY = 0.8

# (highest stage number in band, color), lighter wood first
WOOD_COLORS = [
    (10, '#D4A574'),
    (30, '#A67C52'),
    (50, '#8B5A3C'),
]
DARKEST_WOOD = '#6B4423'


def calculate_difficulty_params(stage_number: int) -> DifficultyParams:
    """
    Map a stage number to generation parameters.

    Every value is a capped step function of the stage number and never
    moves back toward an easier setting as the number grows.

    Args:
        stage_number: Stage number (values below 1 are treated as 1)

    Returns:
        Difficulty parameters
    """
    n = max(1, int(stage_number))

    return DifficultyParams(
        plate_count=min(3 + n // 5, MAX_PLATE_COUNT),
        screws_per_plate=min(2 + n // 10, MAX_SCREWS_PER_PLATE),
        ellipse_ratio=min(MAX_ELLIPSE_RATIO, n * 0.05),
        min_plate_radius=max(MIN_PLATE_RADIUS_FLOOR, 60.0 - n * 0.5),
        max_plate_radius=min(MAX_PLATE_RADIUS_CEILING, 80.0 + n * 0.3),
        overlap_density=min(MAX_OVERLAP_DENSITY, 0.3 + n * 0.02)
    )


def get_wood_color(stage_number: int) -> str:
    """Plate color for a stage; darker wood at higher stages."""
    for max_stage, color in WOOD_COLORS:
        if stage_number <= max_stage:
            return color
    return DARKEST_WOOD

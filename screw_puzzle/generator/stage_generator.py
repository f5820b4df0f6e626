"""Randomized stage construction with a solvability gate."""

import logging
import math
import random
from dataclasses import replace
from typing import Optional

from ..coverage import has_any_removable_screw
from ..geometry import Circle, Ellipse, Shape, rotate_point, shape_extent
from ..state import DifficultyParams, IdAllocator, Plate, Stage
from .difficulty import calculate_difficulty_params, get_wood_color

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 10
PLATE_MARGIN = 20.0

# Screw ring, as fractions of the plate radius
SCREW_RING_MIN = 0.6
SCREW_RING_SPREAD = 0.2
SCREW_ANGLE_JITTER = 0.15  # radians, each way
MIN_SCREWS = 2


class StageGenerator:
    """Builds stages from a stage number and viewport bounds."""

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        max_attempts: int = MAX_ATTEMPTS,
        margin: float = PLATE_MARGIN
    ):
        """
        Initialize generator.

        Args:
            rng: Random source; pass a seeded instance for reproducible stages
            max_attempts: Candidates to try before giving up on solvability
            margin: Gap kept between a plate's extent and the bounds
        """
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")
        self.rng = rng if rng is not None else random.Random()
        self.max_attempts = max_attempts
        self.margin = margin

    def generate(self, stage_number: int, width: float, height: float) -> Stage:
        """
        Generate a stage that has at least one removable screw.

        Candidates are rebuilt until one passes the gate. If every attempt
        fails, the last candidate is returned with maybe_unsolvable set.

        Args:
            stage_number: Stage number driving difficulty
            width: Viewport width
            height: Viewport height

        Returns:
            Generated stage
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Bounds must be positive, got {width}x{height}")

        stage = None
        for attempt in range(1, self.max_attempts + 1):
            stage = self._build_candidate(stage_number, width, height)
            stage.attempts = attempt

            if has_any_removable_screw(stage):
                logger.info(
                    "Stage %d generated successfully (attempt %d)", stage_number, attempt
                )
                return stage

            logger.warning(
                "Stage %d has no removable screws, regenerating (attempt %d)",
                stage_number, attempt
            )

        logger.error(
            "Failed to generate a solvable stage %d after %d attempts",
            stage_number, self.max_attempts
        )
        stage.maybe_unsolvable = True
        return stage

    def shuffle(self, stage_number: int, width: float, height: float) -> Stage:
        """Re-roll a stage at the same difficulty."""
        logger.info("Shuffling stage %d", stage_number)
        return self.generate(stage_number, width, height)

    def _build_candidate(self, stage_number: int, width: float, height: float) -> Stage:
        params = calculate_difficulty_params(stage_number)
        wood_color = get_wood_color(stage_number)
        ids = IdAllocator()

        plates = []
        for z_order in range(params.plate_count):
            # Later plates sit on top
            plate = Plate(
                id=ids.next_plate_id(),
                shape=self._random_shape(params, width, height),
                z_order=z_order,
                color=wood_color
            )
            self._place_screws(plate, params, ids, width, height)
            plates.append(plate)

        stage = Stage(
            stage_number=stage_number,
            plates=plates,
            wood_color=wood_color,
            params=params,
            width=width,
            height=height
        )
        stage.validate()
        return stage

    def _random_shape(self, params: DifficultyParams, width: float, height: float) -> Shape:
        rng = self.rng
        is_ellipse = rng.random() < params.ellipse_ratio

        radius_x = params.min_plate_radius + rng.random() * (
            params.max_plate_radius - params.min_plate_radius
        )
        if is_ellipse:
            radius_y = radius_x * (0.5 + rng.random() * 0.4)
            shape = Ellipse(center=(0.0, 0.0), radius_x=radius_x, radius_y=radius_y)
        else:
            shape = Circle(center=(0.0, 0.0), radius=radius_x)

        margin = shape_extent(shape) + self.margin
        center = (
            self._random_coordinate(margin, width),
            self._random_coordinate(margin, height)
        )
        rotation = rng.random() * 2 * math.pi

        if is_ellipse:
            return replace(shape, center=center, rotation=rotation)
        return replace(shape, center=center)

    def _random_coordinate(self, margin: float, extent: float) -> float:
        span = extent - 2 * margin
        if span <= 0:
            # Shape wider than the viewport on this axis
            return extent / 2
        return margin + self.rng.random() * span

    def _place_screws(self, plate: Plate, params: DifficultyParams, ids: IdAllocator,
                      width: float, height: float):
        """
        Ring screws around the plate with small angular and radial jitter.

        Offsets are taken in the plate's own frame, scaled by each semi-axis,
        then rotated with the plate so every screw stays on its plate.
        """
        rng = self.rng
        shape = plate.shape
        screw_count = max(MIN_SCREWS, params.screws_per_plate + math.floor(rng.random() * 3 - 1))

        if isinstance(shape, Ellipse):
            radius_x, radius_y, rotation = shape.radius_x, shape.radius_y, shape.rotation
        else:
            radius_x = radius_y = shape.radius
            rotation = 0.0

        cx, cy = shape.center
        for i in range(screw_count):
            angle = (2 * math.pi * i) / screw_count + (
                rng.random() * 2 * SCREW_ANGLE_JITTER - SCREW_ANGLE_JITTER
            )
            ring = SCREW_RING_MIN + rng.random() * SCREW_RING_SPREAD

            local = (cx + math.cos(angle) * radius_x * ring, cy + math.sin(angle) * radius_y * ring)
            x, y = rotate_point(local, shape.center, rotation)

            plate.add_screw(ids.next_screw_id(), (
                min(max(x, 0.0), width),
                min(max(y, 0.0), height)
            ))


def generate_stage(stage_number: int, width: float, height: float,
                   rng: Optional[random.Random] = None) -> Stage:
    """Generate a validated stage with a one-off generator."""
    return StageGenerator(rng=rng).generate(stage_number, width, height)


def shuffle_stage(stage_number: int, width: float, height: float,
                  rng: Optional[random.Random] = None) -> Stage:
    """Regenerate a stage at the same stage number."""
    return StageGenerator(rng=rng).shuffle(stage_number, width, height)

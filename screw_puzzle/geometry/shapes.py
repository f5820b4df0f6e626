"""Plate shape definitions and rotation helpers."""

import math
import numpy as np
from dataclasses import dataclass
from typing import Tuple, Union

Point = Tuple[float, float]


def rotation_matrix(angle: float) -> np.ndarray:
    """
    Build a 2D rotation matrix.

    Args:
        angle: Rotation in radians, counter-clockwise positive

    Returns:
        2x2 rotation matrix
    """
    cos_a = np.cos(angle)
    sin_a = np.sin(angle)
    return np.array([
        [cos_a, -sin_a],
        [sin_a, cos_a]
    ])


def rotate_point(point: Point, center: Point, angle: float) -> Point:
    """
    Rotate a point about a center.

    Args:
        point: Point to rotate
        center: Pivot point
        angle: Rotation in radians, counter-clockwise positive

    Returns:
        Rotated point
    """
    offset = np.array([point[0] - center[0], point[1] - center[1]])
    rotated = rotation_matrix(angle) @ offset
    return (float(rotated[0] + center[0]), float(rotated[1] + center[1]))


def _check_radius(name: str, value: float):
    if value < 0 or math.isnan(value):
        raise ValueError(f"{name} must be non-negative, got {value}")


@dataclass(frozen=True)
class Circle:
    """Circular plate outline."""
    center: Point
    radius: float

    def __post_init__(self):
        _check_radius('radius', self.radius)

    @property
    def kind(self) -> str:
        return 'circle'

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {
            'type': 'circle',
            'x': self.center[0],
            'y': self.center[1],
            'radius': self.radius
        }


@dataclass(frozen=True)
class Ellipse:
    """Rotated elliptical plate outline."""
    center: Point
    radius_x: float
    radius_y: float
    rotation: float = 0.0  # radians

    def __post_init__(self):
        _check_radius('radius_x', self.radius_x)
        _check_radius('radius_y', self.radius_y)

    @property
    def kind(self) -> str:
        return 'ellipse'

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {
            'type': 'ellipse',
            'x': self.center[0],
            'y': self.center[1],
            'radius_x': self.radius_x,
            'radius_y': self.radius_y,
            'rotation': self.rotation
        }


Shape = Union[Circle, Ellipse]


def shape_from_dict(data: dict) -> Shape:
    """Create a shape from its dictionary representation."""
    center = (float(data['x']), float(data['y']))
    if data['type'] == 'circle':
        return Circle(center=center, radius=float(data['radius']))
    elif data['type'] == 'ellipse':
        return Ellipse(
            center=center,
            radius_x=float(data['radius_x']),
            radius_y=float(data['radius_y']),
            rotation=float(data.get('rotation', 0.0))
        )
    else:
        raise ValueError(f"Unknown shape type: {data['type']}")


def shape_extent(shape: Shape) -> float:
    """Largest distance from the shape's center to its outline."""
    if isinstance(shape, Circle):
        return shape.radius
    return max(shape.radius_x, shape.radius_y)


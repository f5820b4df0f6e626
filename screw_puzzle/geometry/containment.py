"""Point containment tests for plate shapes."""

import numpy as np
from .shapes import Point, Shape, Circle, Ellipse, rotation_matrix


def _coincident(point: Point, center: Point) -> bool:
    return point[0] == center[0] and point[1] == center[1]


def point_in_circle(point: Point, center: Point, radius: float) -> bool:
    """
    Check whether a point lies inside or on a circle.

    Args:
        point: Query point
        center: Circle center
        radius: Circle radius

    Returns:
        True if the squared distance is at most radius squared
    """
    if radius <= 0:
        # Degenerate circle only contains its own center
        return _coincident(point, center)

    dx = point[0] - center[0]
    dy = point[1] - center[1]
    return (dx * dx + dy * dy) <= radius * radius


def point_in_ellipse(point: Point, center: Point, radius_x: float,
                     radius_y: float, rotation: float) -> bool:
    """
    Check whether a point lies inside or on a rotated ellipse.

    The query point is moved into the ellipse's unrotated frame by rotating
    it by -rotation about the center, then tested against
    (x/rx)^2 + (y/ry)^2 <= 1.

    Args:
        point: Query point
        center: Ellipse center
        radius_x: Semi-axis along the ellipse's local x
        radius_y: Semi-axis along the ellipse's local y
        rotation: Ellipse rotation in radians, counter-clockwise positive

    Returns:
        True if the point is inside the ellipse
    """
    if radius_x <= 0 or radius_y <= 0:
        return _coincident(point, center)

    offset = np.array([point[0] - center[0], point[1] - center[1]])
    local_x, local_y = rotation_matrix(-rotation) @ offset

    normalized = (local_x / radius_x) ** 2 + (local_y / radius_y) ** 2
    return bool(normalized <= 1.0)


def point_in_shape(point: Point, shape: Shape) -> bool:
    """Dispatch a containment test on the shape variant."""
    if isinstance(shape, Circle):
        return point_in_circle(point, shape.center, shape.radius)
    elif isinstance(shape, Ellipse):
        return point_in_ellipse(
            point, shape.center, shape.radius_x, shape.radius_y, shape.rotation
        )
    raise TypeError(f"Unsupported shape: {type(shape).__name__}")


def distance(a: Point, b: Point) -> float:
    """Euclidean distance between two points."""
    return float(np.hypot(a[0] - b[0], a[1] - b[1]))

"""Geometry module for plate containment calculations."""

from .shapes import (
    Point,
    Circle,
    Ellipse,
    Shape,
    rotation_matrix,
    rotate_point,
    shape_from_dict,
    shape_extent
)
from .containment import point_in_circle, point_in_ellipse, point_in_shape, distance

__all__ = [
    'Point',
    'Circle',
    'Ellipse',
    'Shape',
    'rotation_matrix',
    'rotate_point',
    'shape_from_dict',
    'shape_extent',
    'point_in_circle',
    'point_in_ellipse',
    'point_in_shape',
    'distance'
]

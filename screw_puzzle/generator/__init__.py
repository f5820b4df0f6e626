"""Stage generation."""

from .difficulty import calculate_difficulty_params, get_wood_color
from .stage_generator import StageGenerator, generate_stage, shuffle_stage, MAX_ATTEMPTS

__all__ = [
    'calculate_difficulty_params',
    'get_wood_color',
    'StageGenerator',
    'generate_stage',
    'shuffle_stage',
    'MAX_ATTEMPTS'
]

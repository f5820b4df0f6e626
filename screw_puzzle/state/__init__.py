"""State management for puzzle stages."""

from .stage import DifficultyParams, IdAllocator, Screw, Plate, Stage, remove_screw

__all__ = ['DifficultyParams', 'IdAllocator', 'Screw', 'Plate', 'Stage', 'remove_screw']

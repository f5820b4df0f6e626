"""Shared test fixtures."""

import random

import pytest

from screw_puzzle.geometry import Circle
from screw_puzzle.generator import StageGenerator
from screw_puzzle.state import Plate, Stage


def make_plate(plate_id, shape, z_order, screw_positions, first_screw_id):
    """Build a plate with screws at fixed positions."""
    plate = Plate(id=plate_id, shape=shape, z_order=z_order, color='#D4A574')
    for offset, position in enumerate(screw_positions):
        plate.add_screw(first_screw_id + offset, position)
    return plate


def make_stage(plates, stage_number=1):
    return Stage(
        stage_number=stage_number,
        plates=plates,
        wood_color='#D4A574',
        width=600.0,
        height=600.0
    )


@pytest.fixture
def two_plate_stage() -> Stage:
    """
    Bottom plate centered at (100, 100) r=50 with screws 1 (covered) and 2.
    Top plate centered at (130, 100) r=40 with screws 3 and 4.
    """
    bottom = make_plate(1, Circle((100.0, 100.0), 50.0), 0, [(100.0, 100.0), (60.0, 100.0)], 1)
    top = make_plate(2, Circle((130.0, 100.0), 40.0), 1, [(130.0, 100.0), (160.0, 100.0)], 3)
    stage = make_stage([bottom, top])
    stage.validate()
    return stage


@pytest.fixture
def seeded_generator() -> StageGenerator:
    return StageGenerator(rng=random.Random(1234))


"""Tests for the game session layer."""

import pytest

from screw_puzzle.errors import ItemUnavailableError
from screw_puzzle.session import (
    GameSession,
    ItemType,
    RemovalOutcome,
    calculate_stage_reward
)


@pytest.fixture
def session(seeded_generator, two_plate_stage) -> GameSession:
    game = GameSession(1, 600, 600, generator=seeded_generator)
    game.stage = two_plate_stage
    return game


def test_covered_screw_is_not_removed(session):
    result = session.try_remove(1)

    assert result.outcome == RemovalOutcome.COVERED
    assert [p.id for p in result.covering_plates] == [2]
    assert not result.screw.removed
    assert session.screws_removed == 0


def test_remove_then_repeat(session):
    first = session.try_remove(2)
    second = session.try_remove(2)

    assert first.outcome == RemovalOutcome.REMOVED
    assert second.outcome == RemovalOutcome.ALREADY_REMOVED
    assert session.screws_removed == 1


def test_unknown_screw(session):
    assert session.try_remove(404).outcome == RemovalOutcome.NOT_FOUND


def test_clearing_plate_then_stage(session):
    session.try_remove(3)
    result = session.try_remove(4)
    assert result.plate_cleared
    assert not result.stage_cleared

    # The top plate is cleared but still covers screw 1
    assert session.try_remove(1).outcome == RemovalOutcome.COVERED

    session.try_remove(2)
    assert session.use_item(ItemType.DRILL, 1).data['stage_cleared']

    assert session.stages_cleared == 1
    assert session.points == calculate_stage_reward(1)
    # Two of each to start, one drill used, one of each granted
    assert session.items[ItemType.DRILL] == 2
    assert session.items[ItemType.HINT] == 3


def test_no_moves_left_while_a_covered_screw_remains(session):
    assert session.get_summary()['has_moves']

    session.try_remove(3)
    assert session.try_remove(4).has_moves
    last = session.try_remove(2)

    # Screw 1 is still under the cleared top plate
    assert last.outcome == RemovalOutcome.REMOVED
    assert not last.has_moves
    assert not last.stage_cleared
    assert not last.to_dict()['has_moves']
    assert not session.try_remove(1).has_moves

    summary = session.get_summary()
    assert not summary['has_moves']
    assert summary['remaining_screws'] == 1


def test_stage_reward():
    assert calculate_stage_reward(1) == 100
    assert calculate_stage_reward(5) == 110
    assert calculate_stage_reward(23) == 140


def test_hint_lists_removable_screws(session):
    result = session.use_item(ItemType.HINT)

    assert [entry['screw_id'] for entry in result.data['screws']] == [2, 3, 4]
    assert session.items[ItemType.HINT] == 1


def test_expose_reports_covering_plates(session):
    result = session.use_item(ItemType.EXPOSE, 1)

    assert result.data == {'screw_id': 1, 'covered': True, 'covering_plate_ids': [2]}
    assert session.items[ItemType.EXPOSE] == 1


def test_drill_ignores_coverage(session):
    result = session.use_item(ItemType.DRILL, 1)

    assert result.data['outcome'] == 'removed'
    assert session.stage.find_screw(1)[0].removed


def test_targeted_item_needs_a_screw(session):
    with pytest.raises(ValueError):
        session.use_item(ItemType.DRILL)
    assert session.items[ItemType.DRILL] == 2


def test_item_unavailable(session):
    session.items[ItemType.HINT] = 0
    with pytest.raises(ItemUnavailableError):
        session.use_item(ItemType.HINT)
    with pytest.raises(ItemUnavailableError):
        session.activate_item(ItemType.HINT)


def test_shuffle_item_regenerates(session):
    old_stage = session.stage
    result = session.use_item(ItemType.SHUFFLE)

    assert session.stage is not old_stage
    assert session.stage.stage_number == 1
    assert result.data == {'stage_number': 1}


def test_click_removes_screw_under_pointer(session):
    result = session.click((60.0, 102.0))
    assert result.outcome == RemovalOutcome.REMOVED
    assert result.screw.id == 2

    assert session.click((400.0, 400.0)) is None


def test_click_with_active_drill(session):
    assert session.activate_item(ItemType.DRILL) is None
    assert session.active_item == ItemType.DRILL

    result = session.click((100.0, 100.0))

    assert result.item == ItemType.DRILL
    assert session.stage.find_screw(1)[0].removed
    assert session.active_item is None


def test_activating_twice_cancels(session):
    session.activate_item(ItemType.EXPOSE)
    session.activate_item(ItemType.EXPOSE)

    assert session.active_item is None
    assert session.items[ItemType.EXPOSE] == 2


def test_next_stage(session):
    stage = session.next_stage()

    assert session.stage_number == 2
    assert stage.stage_number == 2
    assert session.get_summary()['remaining_screws'] == stage.total_screw_count()

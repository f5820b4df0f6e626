"""Game session: removal policy, items and stage progression."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Union

from .coverage import (
    DEFAULT_HIT_RADIUS,
    find_removable_screws,
    has_any_removable_screw,
    hit_test,
    is_covered
)
from .errors import ItemUnavailableError
from .generator import StageGenerator
from .geometry import Point
from .state import Plate, Screw, Stage, remove_screw

logger = logging.getLogger(__name__)

STAGE_BASE_REWARD = 100
STAGE_BONUS_STEP = 5
STAGE_BONUS_POINTS = 10


class ItemType(str, Enum):
    HINT = 'hint'
    EXPOSE = 'expose'
    DRILL = 'drill'
    SHUFFLE = 'shuffle'


# Items that need a screw to act on
TARGETED_ITEMS = {ItemType.EXPOSE, ItemType.DRILL}

DEFAULT_ITEMS = {item: 2 for item in ItemType}


class RemovalOutcome(str, Enum):
    REMOVED = 'removed'
    COVERED = 'covered'
    ALREADY_REMOVED = 'already_removed'
    NOT_FOUND = 'not_found'


def calculate_stage_reward(stage_number: int) -> int:
    """Points for clearing a stage: base reward plus a bonus every few stages."""
    return STAGE_BASE_REWARD + (stage_number // STAGE_BONUS_STEP) * STAGE_BONUS_POINTS


@dataclass
class RemovalResult:
    """What happened on a removal attempt."""
    outcome: RemovalOutcome
    screw: Optional[Screw] = None
    plate: Optional[Plate] = None
    covering_plates: List[Plate] = field(default_factory=list)
    plate_cleared: bool = False
    stage_cleared: bool = False
    reward: int = 0
    has_moves: bool = True  # False once no screw left in place is free

    def to_dict(self) -> dict:
        return {
            'outcome': self.outcome.value,
            'screw': self.screw.to_dict() if self.screw else None,
            'plate_id': self.plate.id if self.plate else None,
            'covering_plate_ids': [p.id for p in self.covering_plates],
            'plate_cleared': self.plate_cleared,
            'stage_cleared': self.stage_cleared,
            'reward': self.reward,
            'has_moves': self.has_moves
        }


@dataclass
class ItemResult:
    """Outcome of an item use."""
    item: ItemType
    data: dict

    def to_dict(self) -> dict:
        return {'item': self.item.value, 'data': self.data}


class GameSession:
    """
    Owns the current stage and applies the removal rule on top of the
    coverage queries.
    """

    def __init__(
        self,
        stage_number: int = 1,
        width: float = 600.0,
        height: float = 600.0,
        generator: Optional[StageGenerator] = None,
        items: Optional[Dict[ItemType, int]] = None
    ):
        self.width = width
        self.height = height
        self.generator = generator if generator is not None else StageGenerator()
        self.items: Dict[ItemType, int] = dict(items if items is not None else DEFAULT_ITEMS)
        self.active_item: Optional[ItemType] = None

        self.points = 0
        self.stages_cleared = 0
        self.screws_removed = 0

        self.stage_number = stage_number
        self.stage: Stage = self.generator.generate(stage_number, width, height)

    def load_stage(self, stage_number: int) -> Stage:
        """Generate and switch to a stage, discarding the current one."""
        logger.info("Loading stage %d", stage_number)
        self.stage = self.generator.generate(stage_number, self.width, self.height)
        self.stage_number = stage_number
        self.active_item = None
        return self.stage

    def next_stage(self) -> Stage:
        return self.load_stage(self.stage_number + 1)

    def shuffle(self) -> Stage:
        """Re-roll the current stage number with a new layout."""
        self.stage = self.generator.shuffle(self.stage_number, self.width, self.height)
        self.active_item = None
        return self.stage

    def try_remove(self, screw_id: int) -> RemovalResult:
        """
        Remove a screw if nothing above covers it.

        Args:
            screw_id: Id of the screw to remove

        Returns:
            RemovalResult describing the outcome
        """
        found = self.stage.find_screw(screw_id)
        if found is None:
            return RemovalResult(outcome=RemovalOutcome.NOT_FOUND)

        screw, plate = found
        if screw.removed:
            return RemovalResult(
                outcome=RemovalOutcome.ALREADY_REMOVED,
                screw=screw,
                plate=plate,
                has_moves=has_any_removable_screw(self.stage)
            )

        coverage = is_covered(screw, plate, self.stage.plates)
        if coverage.covered:
            return RemovalResult(
                outcome=RemovalOutcome.COVERED,
                screw=screw,
                plate=plate,
                covering_plates=coverage.covering_plates,
                has_moves=has_any_removable_screw(self.stage)
            )

        return self._remove(screw, plate)

    def click(self, point: Point,
              hit_radius: float = DEFAULT_HIT_RADIUS) -> Optional[Union[RemovalResult, ItemResult]]:
        """
        Handle a pointer press.

        Applies the active targeted item to the screw under the pointer, or
        tries a normal removal. Returns None when nothing was hit.
        """
        hit = hit_test(point, self.stage, hit_radius)
        if hit is None:
            return None

        screw, _ = hit
        if self.active_item in TARGETED_ITEMS:
            return self.use_item(self.active_item, screw.id)
        return self.try_remove(screw.id)

    def activate_item(self, item: ItemType) -> Optional[ItemResult]:
        """
        Select an item.

        Hint and shuffle act immediately. Expose and drill wait for a click;
        selecting the already active item cancels it.
        """
        item = ItemType(item)
        if self.active_item == item:
            self.cancel_item()
            return None

        self._require(item)
        if item in TARGETED_ITEMS:
            self.active_item = item
            logger.info("Activated item: %s", item.value)
            return None
        return self.use_item(item)

    def cancel_item(self):
        self.active_item = None

    def use_item(self, item: ItemType, screw_id: Optional[int] = None) -> ItemResult:
        """
        Apply an item and consume one from the inventory.

        Args:
            item: Item to use
            screw_id: Target screw, required for expose and drill

        Returns:
            ItemResult with item specific data

        Raises:
            ItemUnavailableError: if none of the item is left
            ValueError: if a targeted item has no valid target
        """
        item = ItemType(item)
        self._require(item)

        if item == ItemType.HINT:
            removable = find_removable_screws(self.stage)
            data = {
                'screws': [
                    {'screw_id': screw.id, 'plate_id': plate.id} for screw, plate in removable
                ]
            }
        elif item == ItemType.SHUFFLE:
            self.shuffle()
            data = {'stage_number': self.stage_number}
        else:
            found = self.stage.find_screw(screw_id) if screw_id is not None else None
            if found is None:
                raise ValueError(f"Item {item.value} needs a screw on the current stage")
            screw, plate = found

            if item == ItemType.EXPOSE:
                coverage = is_covered(screw, plate, self.stage.plates)
                data = {'screw_id': screw.id, **coverage.to_dict()}
            else:
                if screw.removed:
                    raise ValueError(f"Screw {screw.id} is already removed")
                data = self._remove(screw, plate).to_dict()

        self.items[item] -= 1
        self.active_item = None
        logger.info("Consumed %s, remaining: %d", item.value, self.items[item])
        return ItemResult(item=item, data=data)

    def _require(self, item: ItemType):
        if self.items.get(item, 0) <= 0:
            raise ItemUnavailableError(f"No {item.value} items left")

    def _remove(self, screw: Screw, plate: Plate) -> RemovalResult:
        remove_screw(screw)
        self.screws_removed += 1

        result = RemovalResult(
            outcome=RemovalOutcome.REMOVED,
            screw=screw,
            plate=plate,
            has_moves=has_any_removable_screw(self.stage)
        )
        if plate.is_cleared:
            logger.info("Plate %d cleared", plate.id)
            result.plate_cleared = True
            if self.stage.is_cleared:
                result.stage_cleared = True
                result.reward = self._grant_clear_reward()
        return result

    def _grant_clear_reward(self) -> int:
        reward = calculate_stage_reward(self.stage_number)
        self.points += reward
        self.stages_cleared += 1
        for item in ItemType:
            self.items[item] = self.items.get(item, 0) + 1
        logger.info("Stage %d cleared, +%d points", self.stage_number, reward)
        return reward

    def get_summary(self) -> dict:
        """Get summary statistics."""
        return {
            'stage_number': self.stage_number,
            'points': self.points,
            'stages_cleared': self.stages_cleared,
            'screws_removed': self.screws_removed,
            'remaining_screws': self.stage.remaining_screw_count(),
            'items': {item.value: count for item, count in self.items.items()},
            'active_item': self.active_item.value if self.active_item else None,
            'has_moves': has_any_removable_screw(self.stage)
        }

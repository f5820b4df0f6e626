"""Stage state: plates, screws and the difficulty they were built with."""

from dataclasses import dataclass, field, asdict
from typing import Iterator, List, Optional, Tuple

from ..errors import StageIntegrityError
from ..geometry import Point, Shape, shape_from_dict

FIXED_PLATE_FIELDS = ('shape', 'z_order')


@dataclass
class DifficultyParams:
    """Parameter bundle derived from a stage number."""
    plate_count: int
    screws_per_plate: int
    ellipse_ratio: float  # probability of an elliptical plate
    min_plate_radius: float
    max_plate_radius: float
    overlap_density: float  # informational only

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'DifficultyParams':
        return cls(**data)


class IdAllocator:
    """Hands out plate and screw ids for a single stage build."""

    def __init__(self):
        self._next_plate_id = 1
        self._next_screw_id = 1

    def next_plate_id(self) -> int:
        plate_id = self._next_plate_id
        self._next_plate_id += 1
        return plate_id

    def next_screw_id(self) -> int:
        screw_id = self._next_screw_id
        self._next_screw_id += 1
        return screw_id


@dataclass
class Screw:
    """
    A screw pinned to one plate.

    `removed` only goes from False to True; putting a screw back raises
    StageIntegrityError.
    """
    id: int
    plate_id: int  # back-reference for lookup only
    x: float
    y: float
    removed: bool = False

    @property
    def position(self) -> Point:
        return (self.x, self.y)

    def mark_removed(self):
        """Take the screw out. Calling again has no further effect."""
        self.removed = True

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'plate_id': self.plate_id,
            'x': self.x,
            'y': self.y,
            'removed': self.removed
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Screw':
        return cls(
            id=data['id'],
            plate_id=data['plate_id'],
            x=data['x'],
            y=data['y'],
            removed=data.get('removed', False)
        )

    def __setattr__(self, name, value):
        if name == 'removed' and not value and getattr(self, 'removed', False):
            raise StageIntegrityError(f"Screw {self.id} cannot be put back once removed")
        super().__setattr__(name, value)


@dataclass
class Plate:
    """
    A plate in the stack. Owns its screws.

    `shape` and `z_order` are fixed once the plate is built; reassigning
    either raises AttributeError.
    """
    id: int
    shape: Shape
    z_order: int  # higher sits on top
    color: str
    screws: List[Screw] = field(default_factory=list)

    def add_screw(self, screw_id: int, position: Point) -> Screw:
        """Attach a new screw at a position."""
        screw = Screw(id=screw_id, plate_id=self.id, x=float(position[0]), y=float(position[1]))
        self.screws.append(screw)
        return screw

    @property
    def remaining_screws(self) -> List[Screw]:
        return [screw for screw in self.screws if not screw.removed]

    @property
    def is_cleared(self) -> bool:
        """True once every screw is removed."""
        return all(screw.removed for screw in self.screws)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'shape': self.shape.to_dict(),
            'z_order': self.z_order,
            'color': self.color,
            'screws': [screw.to_dict() for screw in self.screws],
            'cleared': self.is_cleared
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Plate':
        return cls(
            id=data['id'],
            shape=shape_from_dict(data['shape']),
            z_order=data['z_order'],
            color=data['color'],
            screws=[Screw.from_dict(s) for s in data.get('screws', [])]
        )

    def __setattr__(self, name, value):
        if name in FIXED_PLATE_FIELDS and name in self.__dict__:
            raise AttributeError(f"Plate {self.id} {name} is fixed after creation")
        super().__setattr__(name, value)


@dataclass
class Stage:
    """A generated puzzle layout."""
    stage_number: int
    plates: List[Plate]
    wood_color: str
    params: Optional[DifficultyParams] = None
    width: float = 0.0
    height: float = 0.0
    attempts: int = 1
    maybe_unsolvable: bool = False

    def iter_screws(self) -> Iterator[Tuple[Screw, Plate]]:
        """Yield (screw, plate) pairs in plate then screw order."""
        for plate in self.plates:
            for screw in plate.screws:
                yield screw, plate

    def find_plate(self, plate_id: int) -> Optional[Plate]:
        for plate in self.plates:
            if plate.id == plate_id:
                return plate
        return None

    def find_screw(self, screw_id: int) -> Optional[Tuple[Screw, Plate]]:
        for screw, plate in self.iter_screws():
            if screw.id == screw_id:
                return screw, plate
        return None

    def plate_of(self, screw: Screw) -> Plate:
        """Resolve a screw's owning plate or fail."""
        plate = self.find_plate(screw.plate_id)
        if plate is None:
            raise StageIntegrityError(
                f"Screw {screw.id} references missing plate {screw.plate_id}"
            )
        return plate

    def remaining_screw_count(self) -> int:
        return sum(1 for screw, _ in self.iter_screws() if not screw.removed)

    def total_screw_count(self) -> int:
        return sum(len(plate.screws) for plate in self.plates)

    @property
    def is_cleared(self) -> bool:
        return all(plate.is_cleared for plate in self.plates)

    def validate(self):
        """
        Check structural invariants.

        Raises:
            StageIntegrityError: on duplicate ids, shared z-orders, or a screw
                whose plate id does not match its owner
        """
        plate_ids = set()
        z_orders = set()
        screw_ids = set()

        for plate in self.plates:
            if plate.id in plate_ids:
                raise StageIntegrityError(f"Duplicate plate id {plate.id}")
            plate_ids.add(plate.id)

            if plate.z_order in z_orders:
                raise StageIntegrityError(
                    f"Plate {plate.id} shares z-order {plate.z_order}"
                )
            z_orders.add(plate.z_order)

            for screw in plate.screws:
                if screw.id in screw_ids:
                    raise StageIntegrityError(f"Duplicate screw id {screw.id}")
                screw_ids.add(screw.id)
                if screw.plate_id != plate.id:
                    raise StageIntegrityError(
                        f"Screw {screw.id} owned by plate {plate.id} "
                        f"but references plate {screw.plate_id}"
                    )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            'stage_number': self.stage_number,
            'wood_color': self.wood_color,
            'width': self.width,
            'height': self.height,
            'attempts': self.attempts,
            'maybe_unsolvable': self.maybe_unsolvable,
            'params': self.params.to_dict() if self.params else None,
            'plates': [plate.to_dict() for plate in self.plates],
            'remaining_screws': self.remaining_screw_count(),
            'total_screws': self.total_screw_count(),
            'cleared': self.is_cleared
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Stage':
        """Create from dictionary."""
        params = data.get('params')
        stage = cls(
            stage_number=data['stage_number'],
            plates=[Plate.from_dict(p) for p in data['plates']],
            wood_color=data['wood_color'],
            params=DifficultyParams.from_dict(params) if params else None,
            width=data.get('width', 0.0),
            height=data.get('height', 0.0),
            attempts=data.get('attempts', 1),
            maybe_unsolvable=data.get('maybe_unsolvable', False)
        )
        stage.validate()
        return stage


def remove_screw(screw: Screw):
    """Mark a screw removed. Legality is the caller's decision."""
    screw.mark_removed()

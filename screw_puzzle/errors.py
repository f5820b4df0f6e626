"""Exception types."""


class ScrewPuzzleError(Exception):
    """Base class for puzzle errors."""


class StageIntegrityError(ScrewPuzzleError):
    """A stage breaks one of its structural invariants."""


class ItemUnavailableError(ScrewPuzzleError):
    """An item was used with none left in the inventory."""

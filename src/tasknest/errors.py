"""Exception hierarchy for board operations.

Stale references (an id deleted since the caller last read the board) are
never raised: operations report them through their return value instead.
"""

from __future__ import annotations

from typing import Optional


class BoardError(Exception):
    """Base class for every error raised by the board engine."""


class BoardValidationError(BoardError, ValueError):
    """User-supplied input was rejected before reaching the store."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "invalid input")


class StoreWriteError(BoardError):
    """Committing a transaction to the backing file failed."""


class BatchWriteError(BoardError):
    """A multi-record batch could not be committed.

    Nothing from the batch was persisted; callers should re-read the board
    before issuing further moves.
    """

    def __init__(self, operation: str, entity_id: str, cause: Optional[BaseException] = None) -> None:
        self.operation = operation
        self.entity_id = entity_id
        detail = f": {cause}" if cause else ""
        super().__init__(f"{operation} of {entity_id} was not committed{detail}")


class CascadeDeleteError(BoardError):
    """Deleting a folder together with its tasks failed; the folder still exists."""

    def __init__(self, folder_id: str, cause: Optional[BaseException] = None) -> None:
        self.folder_id = folder_id
        detail = f": {cause}" if cause else ""
        super().__init__(f"Folder {folder_id} and its tasks were not deleted{detail}")

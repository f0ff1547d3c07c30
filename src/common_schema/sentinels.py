"""Sentinel values shared by the traversal and transform engines."""

from enum import Enum
from typing import Any


class Absent(Enum):
    """Marks a field with no value.

    Passed to handlers for declared properties missing from a document, and
    returned from transform handlers to delete a field. None is a real value
    and is never treated as a deletion.
    """

    ABSENT = "absent"

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT = Absent.ABSENT


def is_absent(value: Any) -> bool:
    return value is ABSENT


def is_present(value: Any) -> bool:
    """A value is present when it is neither ABSENT nor None."""
    return value is not ABSENT and value is not None

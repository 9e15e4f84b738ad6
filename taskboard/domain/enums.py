"""Domain enumerations for the board.

Enums represent fixed sets of domain values (task status, task priority).
"""

from enum import Enum


class TaskStatus(str, Enum):
    """Board column a task sits in.

    Any status may move to any other; there is no terminal state.
    """

    TODO = "todo"
    INPROGRESS = "inprogress"
    DONE = "done"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid status values as strings.

        Returns:
            List of enum value strings (e.g. for validation or serialization).
        """
        return [status.value for status in cls]

    @property
    def label(self) -> str:
        """Column heading shown on the board."""
        return {
            TaskStatus.TODO: "To Do",
            TaskStatus.INPROGRESS: "In Progress",
            TaskStatus.DONE: "Done",
        }[self]


class TaskPriority(str, Enum):
    """Task priority."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def values(cls) -> list[str]:
        return [priority.value for priority in cls]

# ==============================================
# PriorityValue
# ==============================================
#
# PURPOSE:
#   A single-slot holder for a value that several independent proposers
#   (conventions) may want to set. The proposal with the highest priority
#   wins; among equal priorities the most recent proposal wins.
#
# CLASS: PriorityValue[T]
# -----------------------
#   Methods:
#   --------
#   - set(priority: int, value: T) -> None
#       Replace the held value iff nothing is held yet or
#       priority >= the stored priority.
#
#   - get() -> T | None
#       The current winner, or None if nothing was ever proposed.
#
#   Example:
#   --------
#     name = PriorityValue()
#     name.set(0, "person")      # class-name convention
#     name.set(10, "people")     # explicit __collection__ attribute
#     name.set(0, "persons")     # rejected, lower priority
#     name.get()  -> "people"
#
# ==============================================

from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class PriorityValue(Generic[T]):
    """Holds the highest-priority proposal seen so far."""

    def __init__(self):
        self._value: Optional[T] = None
        self._priority: Optional[int] = None

    def set(self, priority: int, value: T) -> None:
        """
        Propose a value.

        Args:
            priority: Weight of this proposal relative to others
            value: The proposed value
        """
        if self._priority is None or priority >= self._priority:
            self._priority = priority
            self._value = value

    def get(self) -> Optional[T]:
        return self._value

    @property
    def priority(self) -> Optional[int]:
        """Priority of the current winner, None until the first proposal."""
        return self._priority

    def __repr__(self) -> str:
        return f"PriorityValue(value={self._value!r}, priority={self._priority!r})"

"""Global time-slot table shared by every tier of a document.

WHY: EAF annotations do not carry times directly; they point at TIME_SLOT
entries. Tiers built from different subtitle files often share instants
(e.g. a translation track synced to the original), and those should collapse
onto a single slot so ELAN treats them as the same point on the timeline.

HOW: A dict maps millisecond values to slot ids. register() folds one file's
cues into the table, allocating ``ts<N>`` ids from a counter that only moves
forward. Rendering order is decided later by sorted_slots().

RULES:
- Every distinct start/end value of every registered cue has exactly one id
- Ids are allocation-order ("ts1", "ts2", ...), never reused or renumbered
- Values new to a register() call are allocated in ascending time order
- sorted_slots() is always ascending by time value
- slot_id() on an unknown value raises TimeSlotLookupError
"""

from __future__ import annotations

from typing import Iterable, Iterator

from srt_elan_converter.core.errors import TimeSlotLookupError
from srt_elan_converter.core.ir import Cue

SLOT_ID_PREFIX = "ts"


class TimeSlotTable:
    """Deduplicated mapping from millisecond offsets to time-slot ids."""

    def __init__(self) -> None:
        self._slots: dict[int, str] = {}
        self._next_id = 1

    def __len__(self) -> int:
        return len(self._slots)

    def __contains__(self, ms: object) -> bool:
        return ms in self._slots

    def reset(self) -> None:
        self._slots.clear()
        self._next_id = 1

    def register(self, cues: Iterable[Cue]) -> list[str]:
        """Add the start and end times of cues to the table.

        Args:
            cues: Cues of one file, in any order.

        Returns:
            The ids allocated by this call (empty if every value was known).
        """
        points: set[int] = set()
        for cue in cues:
            points.add(cue.start_ms)
            points.add(cue.end_ms)

        allocated: list[str] = []
        for ms in sorted(points):
            if ms not in self._slots:
                slot_id = f"{SLOT_ID_PREFIX}{self._next_id}"
                self._next_id += 1
                self._slots[ms] = slot_id
                allocated.append(slot_id)
        return allocated

    def slot_id(self, ms: int) -> str:
        try:
            return self._slots[ms]
        except KeyError:
            raise TimeSlotLookupError(f"No time slot registered for {ms} ms") from None

    def sorted_slots(self) -> Iterator[tuple[int, str]]:
        """Yield ``(ms, slot_id)`` pairs in ascending time order."""
        for ms in sorted(self._slots):
            yield ms, self._slots[ms]

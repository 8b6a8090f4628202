"""Per-run conversion state and tier naming.

WHY: A conversion accumulates state across files: the shared time-slot
table, the tiers built so far and the document-wide annotation counter.
Keeping that state in one explicit object, owned by a single converter run
and reset at its start, means repeated programmatic conversions never leak
ids or slots into each other.

HOW: ConversionContext bundles the table, the tier list and the annotation
counter. add_tier() is the only way to grow the tier list; it picks a unique
sanitized name for the file and registers the file's time points.

RULES:
- reset() restores a fresh state (empty table, no tiers, counter at 0)
- Tier names: characters outside [A-Za-z0-9_-] become "_"
- Name collisions get "_1", "_2", ... appended until unique
- Annotation ids are "a1", "a2", ..., one counter per run
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path

from srt_elan_converter.core.ir import Cue, Tier
from srt_elan_converter.core.timeslots import TimeSlotTable

_UNSAFE_TIER_CHARS_RE = re.compile(r"[^A-Za-z0-9_-]")

ANNOTATION_ID_PREFIX = "a"
FALLBACK_TIER_NAME = "tier"


def display_name_for(path: str | Path) -> str:
    """File basename with a trailing .srt extension (any case) removed."""
    name = Path(path).name
    if name.lower().endswith(".srt"):
        name = name[: -len(".srt")]
    return name


def sanitize_tier_name(name: str) -> str:
    sanitized = _UNSAFE_TIER_CHARS_RE.sub("_", name)
    return sanitized or FALLBACK_TIER_NAME


def unique_tier_name(base: str, taken: set[str] | list[str]) -> str:
    """Append ``_1``, ``_2``, ... to base until it is not in taken."""
    candidate = base
    counter = 1
    while candidate in taken:
        candidate = f"{base}_{counter}"
        counter += 1
    return candidate


@dataclass
class ConversionContext:
    """Mutable state of one conversion run."""

    time_slots: TimeSlotTable = field(default_factory=TimeSlotTable)
    tiers: list[Tier] = field(default_factory=list)
    annotation_counter: int = 0

    def reset(self) -> None:
        self.time_slots.reset()
        self.tiers.clear()
        self.annotation_counter = 0

    def next_annotation_id(self) -> str:
        self.annotation_counter += 1
        return f"{ANNOTATION_ID_PREFIX}{self.annotation_counter}"

    @property
    def last_annotation_id(self) -> int:
        return self.annotation_counter

    @property
    def total_annotations(self) -> int:
        return sum(len(t.cues) for t in self.tiers)

    def add_tier(self, source_file: str | Path, cues: list[Cue]) -> Tier:
        """Register a file's cues and append a uniquely named tier.

        Args:
            source_file: Path of the SRT file the cues came from.
            cues: Parsed cues, already sorted by start time.

        Returns:
            The new Tier.
        """
        display_name = display_name_for(source_file)
        name = unique_tier_name(
            sanitize_tier_name(display_name),
            {t.name for t in self.tiers},
        )
        self.time_slots.register(cues)
        tier = Tier(
            name=name,
            display_name=display_name,
            cues=list(cues),
            source_file=Path(source_file),
        )
        self.tiers.append(tier)
        return tier

"""Intermediate representation dataclasses for parsed subtitles.

WHY: The parser, the time-slot table and the EAF formatter all talk about
the same things: subtitle cues, per-file tiers and the outcome of parsing a
block. A small set of well-typed containers keeps those stages decoupled.

HOW: Five dataclasses:
  Cue           one accepted subtitle block (times in integer milliseconds)
  BlockOutcome  result of parsing one block: a cue or an error message
  ParseResult   all cues of one file plus its per-block error messages
  Tier          one input file's cues plus naming metadata
  TierSummary   the reporting view of a tier after a run

RULES:
- All times are integer milliseconds since 00:00:00,000
- A Cue always satisfies start_ms < end_ms
- Cue is frozen; tiers own their cue lists
- Tier.cues is sorted by start_ms
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class Cue:
    """A single subtitle cue.

    RULES:
    - index: source ordinal from the SRT block (not required unique)
    - start_ms / end_ms: integer milliseconds, start_ms < end_ms
    - text: possibly empty, formatting already stripped unless preserved
    """

    index: int
    start_ms: int
    end_ms: int
    text: str = ""

    @property
    def duration_ms(self) -> int:
        return self.end_ms - self.start_ms


@dataclass(frozen=True)
class BlockOutcome:
    """Result of parsing one SRT block: exactly one of cue or error is set."""

    cue: Cue | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.cue is not None


@dataclass
class ParseResult:
    """Cues and per-block error messages produced from one file's content."""

    cues: list[Cue] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


@dataclass
class Tier:
    """One annotation tier, built from one successfully parsed SRT file.

    RULES:
    - name: sanitized identifier, unique within a conversion run
    - display_name: file basename without the .srt extension
    - cues: non-empty, sorted by start_ms
    """

    name: str
    display_name: str
    cues: list[Cue]
    source_file: Path

    @property
    def total_duration_ms(self) -> int:
        if not self.cues:
            return 0
        return max(c.end_ms for c in self.cues) - min(c.start_ms for c in self.cues)


@dataclass
class TierSummary:
    """Reporting view of a tier, returned in the conversion result."""

    name: str
    cues: int
    duration_ms: int

    @classmethod
    def from_tier(cls, tier: Tier) -> TierSummary:
        return cls(name=tier.name, cues=len(tier.cues), duration_ms=tier.total_duration_ms)

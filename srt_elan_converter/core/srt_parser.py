"""SRT block parsing into Cue records.

WHY: Real-world SRT files are messy. Numbering restarts, timing lines get
mangled, a stray block has its end before its start. One bad block must not
cost the rest of the file, so parsing is done block by block and every
rejection is reported instead of raised.

HOW: The content is normalized (line endings, BOM), split on blank lines and
each block is turned into a BlockOutcome: either a Cue or a human-readable
error message. parse_srt() collects the outcomes into a ParseResult and sorts
the accepted cues by start time.

RULES:
- Block line 1: integer index; line 2: "<start> --> <end>"
- Lines 3+ are the text body, joined with "\\n"
- Unless preserve_formatting, <...> and {...} spans are removed
- Empty text is kept as "" (the cue is never dropped for it)
- start_ms >= end_ms rejects the block
- Errors are collected as "Block N: ..." strings, never raised
- Cues are sorted by start_ms; ties keep file order
"""

from __future__ import annotations

import re

from srt_elan_converter.core.errors import TimestampError
from srt_elan_converter.core.ir import BlockOutcome, Cue, ParseResult
from srt_elan_converter.core.timestamps import parse_timestamp

TIME_RANGE_SEPARATOR = " --> "

_BLOCK_SPLIT_RE = re.compile(r"\n\s*\n")
_TAG_RE = re.compile(r"<[^>]*>")
_BRACE_RE = re.compile(r"\{[^}]*\}")


def strip_formatting(text: str) -> str:
    """Remove HTML-style tags and ASS/SSA override blocks from cue text."""
    text = _TAG_RE.sub("", text)
    return _BRACE_RE.sub("", text)


def split_blocks(content: str) -> list[str]:
    """Split raw SRT content into trimmed, non-empty candidate blocks."""
    content = content.replace("\r\n", "\n").replace("\r", "\n")
    if content.startswith("\ufeff"):
        content = content[1:]
    content = content.strip()
    if not content:
        return []
    return [block.strip() for block in _BLOCK_SPLIT_RE.split(content)]


def parse_block(block: str, number: int, preserve_formatting: bool = False) -> BlockOutcome:
    """Parse one SRT block.

    Args:
        block: The trimmed block text.
        number: 1-based position of the block in the file, for messages.
        preserve_formatting: Keep <...> and {...} spans in the text.

    Returns:
        A BlockOutcome carrying either the Cue or the rejection reason.
    """
    lines = block.split("\n")
    if len(lines) < 2:
        return BlockOutcome(error=f"Block {number}: insufficient lines ({len(lines)})")

    try:
        index = int(lines[0].strip())
    except ValueError:
        return BlockOutcome(error=f'Block {number}: invalid subtitle index: "{lines[0]}"')

    time_range = lines[1]
    if TIME_RANGE_SEPARATOR not in time_range:
        return BlockOutcome(error=f'Block {number}: invalid time range format: "{time_range}"')

    start_str, end_str = time_range.split(TIME_RANGE_SEPARATOR)[:2]
    try:
        start_ms = parse_timestamp(start_str.strip())
        end_ms = parse_timestamp(end_str.strip())
    except TimestampError as e:
        return BlockOutcome(error=f"Block {number}: timestamp error: {e}")

    if start_ms >= end_ms:
        return BlockOutcome(
            error=f"Block {number}: invalid time range: start >= end "
                  f"({start_str.strip()} --> {end_str.strip()})"
        )

    text = "\n".join(lines[2:])
    if not preserve_formatting:
        text = strip_formatting(text)

    return BlockOutcome(cue=Cue(index=index, start_ms=start_ms, end_ms=end_ms, text=text.strip()))


def parse_srt(content: object, label: str = "unknown", preserve_formatting: bool = False) -> ParseResult:
    """Parse SRT content into sorted cues plus per-block error messages.

    WHY: The caller decides what to do with block errors (log them, reject
    the file in strict mode), so they come back as data.

    Args:
        content: Full decoded file content.
        label: Name used in the "empty content" message (usually the file name).
        preserve_formatting: Keep <...> and {...} spans in cue text.

    Returns:
        ParseResult with cues sorted by start time and the error list.
    """
    result = ParseResult()
    if not isinstance(content, str) or not content.strip():
        result.errors.append(f"Empty or invalid content in file: {label}")
        return result

    for number, block in enumerate(split_blocks(content), start=1):
        outcome = parse_block(block, number, preserve_formatting)
        if outcome.cue is not None:
            result.cues.append(outcome.cue)
        else:
            result.errors.append(outcome.error or f"Block {number}: parsing error")

    result.cues.sort(key=lambda cue: cue.start_ms)
    return result

"""ELAN Annotation Format (EAF 3.0) formatter.

WHY: ELAN is the standard tool for time-aligned multi-tier annotation.
Loading several subtitle tracks as separate tiers over one media file lets
users compare and correct them side by side. This formatter writes the EAF
XML that ELAN opens directly.

HOW: The document is assembled as text, element by element, from the run's
ConversionContext. Tier blocks are rendered first so the annotation counter
is final before the header (which records the last used annotation id) is
written. All free-form strings go through escape_xml().

RULES:
- TIME_ORDER lists slots ascending by time value, whatever their id
- One TIER per context tier, in processing order
- Every tier references the single "default-lt" linguistic type
- Annotation ids restart at a1 for each rendered document and increase by
  one per cue, tier order then cue order
- Empty cue text renders as an empty ANNOTATION_VALUE element
- MEDIA_DESCRIPTOR only when a media reference is given
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from pathlib import Path
from xml.sax.saxutils import escape

from srt_elan_converter.config import (
    DEFAULT_AUTHOR,
    EAF_FORMAT_VERSION,
    EAF_SUFFIX,
    LINGUISTIC_TYPE_ID,
    PROVENANCE_URN,
    TIME_UNITS,
    media_type_for,
)
from srt_elan_converter.core.context import ConversionContext
from srt_elan_converter.core.ir import Tier
from srt_elan_converter.formatters.base import BaseFormatter, FormatterOutput

EAF_MEDIA_TYPE = "application/xml"

_XML_ENTITIES = {'"': "&quot;", "'": "&apos;"}

# Control characters that are not allowed in XML 1.0 (tab, LF and CR are kept).
_CONTROL_CHARS_RE = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")

_INDENT = "    "


def escape_xml(value: object) -> str:
    """Escape a value for use in XML text or a double-quoted attribute.

    Non-strings are converted with str(). Ampersands, angle brackets and
    both quote characters become entities; disallowed control characters are
    removed.
    """
    text = value if isinstance(value, str) else str(value)
    return _CONTROL_CHARS_RE.sub("", escape(text, _XML_ENTITIES))


def format_eaf_date(moment: datetime) -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2024-05-01T12:00:00.000Z."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    utc = moment.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class EAFFormatter(BaseFormatter):
    """Formatter that produces a multi-tier ELAN .eaf document.

    Args:
        media_file: Optional media reference for the header.
        author: AUTHOR attribute of the document.
        generated_at: DATE of the document; defaults to now (UTC).
    """

    def __init__(
        self,
        media_file: str | Path | None = None,
        author: str = DEFAULT_AUTHOR,
        generated_at: datetime | None = None,
    ) -> None:
        self.media_file = str(media_file) if media_file else None
        self.author = author
        self.generated_at = generated_at

    @property
    def name(self) -> str:
        return "ELAN EAF"

    def format(self, context: ConversionContext) -> list[FormatterOutput]:
        """Render the context's tiers and time slots as one EAF document.

        Raises:
            TimeSlotLookupError: If a cue time is missing from the slot table.
        """
        return [
            FormatterOutput(
                suffix=EAF_SUFFIX,
                content=self.render(context),
                media_type=EAF_MEDIA_TYPE,
            )
        ]

    def render(self, context: ConversionContext) -> str:
        context.annotation_counter = 0
        tier_lines: list[str] = []
        for tier in context.tiers:
            tier_lines.extend(self._tier_lines(tier, context))

        generated_at = self.generated_at or datetime.now(timezone.utc)
        lines = ['<?xml version="1.0" encoding="UTF-8"?>']
        lines.append(
            f'<ANNOTATION_DOCUMENT AUTHOR="{escape_xml(self.author)}" '
            f'DATE="{format_eaf_date(generated_at)}" '
            f'FORMAT="{EAF_FORMAT_VERSION}" VERSION="{EAF_FORMAT_VERSION}">'
        )
        lines.extend(self._header_lines(context.last_annotation_id))
        lines.extend(self._time_order_lines(context))
        lines.extend(tier_lines)
        lines.append(
            f'{_INDENT}<LINGUISTIC_TYPE GRAPHIC_REFERENCES="false" '
            f'LINGUISTIC_TYPE_ID="{LINGUISTIC_TYPE_ID}" TIME_ALIGNABLE="true"/>'
        )
        lines.append("</ANNOTATION_DOCUMENT>")
        return "\n".join(lines) + "\n"

    def _header_lines(self, last_annotation_id: int) -> list[str]:
        lines = [f'{_INDENT}<HEADER MEDIA_FILE="" TIME_UNITS="{TIME_UNITS}">']
        if self.media_file:
            lines.append(
                f'{_INDENT * 2}<MEDIA_DESCRIPTOR MEDIA_URL="{escape_xml(self.media_file)}" '
                f'MIME_TYPE="{media_type_for(self.media_file)}" '
                f'RELATIVE_MEDIA_URL="{escape_xml(Path(self.media_file).name)}"/>'
            )
        lines.append(f'{_INDENT * 2}<PROPERTY NAME="URN">{PROVENANCE_URN}</PROPERTY>')
        lines.append(
            f'{_INDENT * 2}<PROPERTY NAME="lastUsedAnnotationId">{last_annotation_id}</PROPERTY>'
        )
        lines.append(f"{_INDENT}</HEADER>")
        return lines

    @staticmethod
    def _time_order_lines(context: ConversionContext) -> list[str]:
        lines = [f"{_INDENT}<TIME_ORDER>"]
        for ms, slot_id in context.time_slots.sorted_slots():
            lines.append(f'{_INDENT * 2}<TIME_SLOT TIME_SLOT_ID="{slot_id}" TIME_VALUE="{ms}"/>')
        lines.append(f"{_INDENT}</TIME_ORDER>")
        return lines

    @staticmethod
    def _tier_lines(tier: Tier, context: ConversionContext) -> list[str]:
        lines = [
            f'{_INDENT}<TIER LINGUISTIC_TYPE_REF="{LINGUISTIC_TYPE_ID}" '
            f'TIER_ID="{escape_xml(tier.name)}" PARTICIPANT="{escape_xml(tier.display_name)}">'
        ]
        for cue in tier.cues:
            start_slot = context.time_slots.slot_id(cue.start_ms)
            end_slot = context.time_slots.slot_id(cue.end_ms)
            annotation_id = context.next_annotation_id()
            lines.append(f"{_INDENT * 2}<ANNOTATION>")
            lines.append(
                f'{_INDENT * 3}<ALIGNABLE_ANNOTATION ANNOTATION_ID="{annotation_id}" '
                f'TIME_SLOT_REF1="{start_slot}" TIME_SLOT_REF2="{end_slot}">'
            )
            lines.append(
                f"{_INDENT * 4}<ANNOTATION_VALUE>{escape_xml(cue.text)}</ANNOTATION_VALUE>"
            )
            lines.append(f"{_INDENT * 3}</ALIGNABLE_ANNOTATION>")
            lines.append(f"{_INDENT * 2}</ANNOTATION>")
        lines.append(f"{_INDENT}</TIER>")
        return lines

"""Output formatter registry.

WHY: The converter and the CLI look formatters up by key, so a new document
format is one new module plus one line here.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
Callers instantiate as needed: ``formatter = FORMATTERS["eaf"](author=...)``.

RULES:
- Keys are snake_case identifiers
- Values are BaseFormatter subclasses (not instances)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from srt_elan_converter.formatters.eaf import EAFFormatter

if TYPE_CHECKING:
    from srt_elan_converter.formatters.base import BaseFormatter

FORMATTERS: dict[str, type[BaseFormatter]] = {
    "eaf": EAFFormatter,
}

DEFAULT_FORMAT = "eaf"

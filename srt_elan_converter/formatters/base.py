"""Abstract base formatter and output container.

WHY: A formatter turns the accumulated state of a conversion run into file
content. Keeping that behind a small interface lets the converter and the
CLI write output without knowing the document format.

HOW: BaseFormatter is an ABC with a ``name`` property and a ``format()``
method that consumes a ConversionContext. FormatterOutput bundles the file
suffix with its content and MIME type.

RULES:
- Subclasses MUST implement ``name`` and ``format()``
- ``format()`` returns a list of outputs, usually a list of one
- ``suffix`` includes the leading dot, e.g. ``".eaf"``
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from srt_elan_converter.core.context import ConversionContext


@dataclass
class FormatterOutput:
    """One output file produced by a formatter.

    Attributes:
        suffix: File suffix of the produced document, e.g. ``".eaf"``.
        content: The document text.
        media_type: MIME type for the content.
    """

    suffix: str
    content: str
    media_type: str


class BaseFormatter(ABC):
    """Abstract base for document formatters."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'ELAN EAF'."""

    @abstractmethod
    def format(self, context: ConversionContext) -> list[FormatterOutput]:
        """Render the tiers and time slots of a conversion run.

        Args:
            context: The run's accumulated tiers and time-slot table.

        Returns:
            List of FormatterOutput objects.
        """

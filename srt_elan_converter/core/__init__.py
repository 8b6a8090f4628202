"""Core parsing and time-alignment modules.

WHY: The core package holds the parts of the converter that know nothing
about files on disk or command lines: the IR dataclasses, timestamp and SRT
parsing, the shared time-slot table and the per-run context.

HOW: ir.py defines the data structures, timestamps.py and srt_parser.py
build them from text, timeslots.py and context.py accumulate them across
files, discovery.py finds SRT files in a directory tree.

RULES:
- IR dataclasses are the contract between parsing and formatting
- Per-block problems are returned as data, never raised from parse_srt()
"""

from srt_elan_converter.core.context import ConversionContext
from srt_elan_converter.core.ir import Cue, ParseResult, Tier
from srt_elan_converter.core.srt_parser import parse_srt
from srt_elan_converter.core.timestamps import format_timestamp, parse_timestamp
from srt_elan_converter.core.timeslots import TimeSlotTable

__all__ = [
    "ConversionContext",
    "Cue",
    "ParseResult",
    "Tier",
    "TimeSlotTable",
    "format_timestamp",
    "parse_srt",
    "parse_timestamp",
]

"""Exception hierarchy for the converter.

WHY: Failures happen at three very different granularities. A malformed
timestamp only costs one subtitle block, an unreadable file only costs one
tier, but an empty input set means there is nothing to write at all.
Distinct exception types let each layer catch exactly what it can recover.

HOW: Everything derives from ConverterError. Timestamp errors are raised by
the timestamp parser and absorbed by the block parser. FileProcessingError is
raised while processing a single file and absorbed by the run loop.
ConversionError escapes to the caller.

RULES:
- TimestampFormatError: value empty, not a string, or wrong grammar
- TimestampRangeError: a component is out of its clock range
- FileProcessingError: one input file could not produce a tier
- ConversionError: the whole run failed, no output is written
- TimeSlotLookupError: a cue time is missing from the slot table (bug)
"""

from __future__ import annotations


class ConverterError(Exception):
    """Base class for every error raised by this package."""


class TimestampError(ConverterError, ValueError):
    """A subtitle timestamp could not be converted to milliseconds."""


class TimestampFormatError(TimestampError):
    """The timestamp does not match ``HH:MM:SS,mmm`` or ``HH:MM:SS,mm``."""


class TimestampRangeError(TimestampError):
    """The timestamp matches the grammar but a component is out of range."""


class FileProcessingError(ConverterError):
    """A single input file could not be turned into a tier."""

    def __init__(self, path: object, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Error processing {path}: {reason}")


class ConversionError(ConverterError):
    """The conversion run as a whole failed."""


class TimeSlotLookupError(ConverterError, KeyError):
    """A cue references a time value that was never registered."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""

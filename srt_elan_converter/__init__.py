"""SRT to ELAN converter: merge subtitle tracks into one EAF document.

WHY: Subtitle tracks for the same media (original, translations, speaker
splits) live in separate SRT files, but comparing them is easiest in ELAN,
where each track becomes a tier over one shared timeline.

HOW: Three-stage pipeline: parse (SRT blocks into cues), unify (every cue
time into one deduplicated time-slot table), format (EAF XML with one tier
per input file). Each stage is independently testable.

RULES:
- One tier per successfully parsed input file
- Identical instants across files share one time slot
- Malformed blocks and files are skipped and reported, not fatal
"""

from srt_elan_converter.converter import ConversionResult, SRTToEAFConverter
from srt_elan_converter.models import ConversionOptions

__version__ = "2.0.0"

__all__ = ["ConversionOptions", "ConversionResult", "SRTToEAFConverter", "__version__"]

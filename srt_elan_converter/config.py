"""Configuration constants, media type table, and .env loading.

WHY: Centralizes every default and fixed table so they are easy to find
and override. Default locations and the author name change per project,
so they can come from the environment or a .env file; the EAF constants and
the media type table are fixed data, not buried in formatter logic.

HOW: python-dotenv loads the .env file on import. Defaults are module-level
constants read with os.getenv(). media_type_for() maps a media file name to
the MIME type written into the EAF media descriptor.

RULES:
- Environment overrides: SRT2EAF_INPUT_DIR, SRT2EAF_OUTPUT_DIR,
  SRT2EAF_AUTHOR, SRT2EAF_ENCODING
- MEDIA_TYPES keys are lowercase extensions with the leading dot
- Unknown media extensions map to DEFAULT_MEDIA_TYPE ("video/*")
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Conversion defaults
# ---------------------------------------------------------------------------

DEFAULT_INPUT_DIR = Path(os.getenv("SRT2EAF_INPUT_DIR", "./input"))
DEFAULT_OUTPUT_DIR = Path(os.getenv("SRT2EAF_OUTPUT_DIR", "./output"))
DEFAULT_AUTHOR = os.getenv("SRT2EAF_AUTHOR", "Multi-SRT-to-ELAN-Converter")
DEFAULT_ENCODING = os.getenv("SRT2EAF_ENCODING", "utf-8")

OUTPUT_FILENAME_PREFIX = "multi-srt-"
EAF_SUFFIX = ".eaf"

# ---------------------------------------------------------------------------
# EAF document constants
# ---------------------------------------------------------------------------

EAF_FORMAT_VERSION = "3.0"
TIME_UNITS = "milliseconds"
PROVENANCE_URN = "urn:nl-mpi-tools-elan-eaf:srt-converter"
LINGUISTIC_TYPE_ID = "default-lt"

# ---------------------------------------------------------------------------
# Media descriptor MIME types
# ---------------------------------------------------------------------------

MEDIA_TYPES: dict[str, str] = {
    ".mp4": "video/mp4",
    ".avi": "video/x-msvideo",
    ".mov": "video/quicktime",
    ".mkv": "video/x-matroska",
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".m4a": "audio/mp4",
}

DEFAULT_MEDIA_TYPE = "video/*"
"""MIME type used when the media extension is not in MEDIA_TYPES."""


def media_type_for(media_file: str | Path) -> str:
    """Map a media file name to its MIME type by extension (case-insensitive)."""
    return MEDIA_TYPES.get(Path(media_file).suffix.lower(), DEFAULT_MEDIA_TYPE)

"""Pydantic model for conversion options.

WHY: The converter, the CLI and programmatic callers all need the same set
of options with the same defaults. An explicit model enumerates every
recognized option, fills in defaults from config.py and rejects bad values
once, at the entry point, instead of letting them surface halfway through a
run.

HOW: ConversionOptions is a pydantic BaseModel. Field validators coerce
blank strings to defaults and check that the encoding names a real codec.
Unknown keys are rejected.

RULES:
- source_dir defaults to DEFAULT_INPUT_DIR; single_file overrides it
- output_path None means "synthesize a name" (see converter)
- author blank or missing falls back to DEFAULT_AUTHOR
- encoding must name a text codec (codecs.lookup() and str.encode())
- preserve_formatting keeps <...>/{...} spans in cue text
- strict_validation rejects any file that has a malformed block
"""

from __future__ import annotations

import codecs
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from srt_elan_converter.config import DEFAULT_AUTHOR, DEFAULT_ENCODING, DEFAULT_INPUT_DIR


class ConversionOptions(BaseModel):
    """Every option recognized by a conversion run."""

    model_config = ConfigDict(extra="forbid")

    source_dir: Path = Field(
        default=DEFAULT_INPUT_DIR,
        description="Directory searched recursively for .srt files.",
    )
    single_file: Optional[Path] = Field(
        default=None,
        description="Convert this one SRT file instead of scanning source_dir.",
    )
    output_path: Optional[Path] = Field(
        default=None,
        description="Target .eaf path. Synthesized when not given.",
    )
    media_file: Optional[str] = Field(
        default=None,
        description="Media reference written into the EAF header.",
    )
    author: str = Field(
        default=DEFAULT_AUTHOR,
        description="AUTHOR attribute of the EAF document.",
    )
    encoding: str = Field(
        default=DEFAULT_ENCODING,
        description="Text encoding used to read the SRT files.",
    )
    preserve_formatting: bool = Field(
        default=False,
        description="Keep HTML tags and {...} formatting blocks in cue text.",
    )
    strict_validation: bool = Field(
        default=False,
        description="Reject a whole file if any of its blocks is malformed.",
    )

    @field_validator("author", mode="before")
    @classmethod
    def default_author(cls, value: object) -> object:
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_AUTHOR
        return value

    @field_validator("media_file", mode="before")
    @classmethod
    def blank_media_is_none(cls, value: object) -> object:
        if isinstance(value, Path):
            return str(value)
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("encoding", mode="before")
    @classmethod
    def known_encoding(cls, value: object) -> object:
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_ENCODING
        if isinstance(value, str):
            try:
                codecs.lookup(value)
                "".encode(value)
            except LookupError:
                raise ValueError(f"Unknown text encoding: {value}") from None
        return value

"""SRT file discovery.

WHY: Users point the converter at a folder of subtitle tracks, often
organised into subfolders and with inconsistent extension casing
(``.srt``, ``.SRT``). Output must be reproducible, so discovery order must
not depend on the filesystem.

HOW: Walk the directory recursively and keep regular files whose suffix is
``.srt`` in any case, sorted by their path string.

RULES:
- Recursive search, case-insensitive extension match
- Result sorted lexicographically by path string
- Missing path or non-directory raises ConversionError
- An existing directory with no SRT files returns an empty list
"""

from __future__ import annotations

from pathlib import Path

from srt_elan_converter.core.errors import ConversionError

SRT_SUFFIX = ".srt"


def find_srt_files(directory: str | Path) -> list[Path]:
    root = Path(directory)
    if not root.exists():
        raise ConversionError(f"Directory not found: {root}")
    if not root.is_dir():
        raise ConversionError(f"Path is not a directory: {root}")

    files = [
        p for p in root.rglob("*")
        if p.suffix.lower() == SRT_SUFFIX and p.is_file()
    ]
    return sorted(files, key=str)

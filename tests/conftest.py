"""Shared test fixtures for the srt_elan_converter test suite.

WHY: Parser, formatter and converter tests all need realistic SRT content
and a way to drop SRT files into a temporary input directory.

HOW: Module-level sample strings plus fixtures that return them, and a
factory fixture that writes named SRT files under tmp_path.

RULES:
- All file I/O goes through tmp_path for isolation
- SAMPLE_SRT contains no malformed blocks; MIXED_SRT contains both kinds
"""

from pathlib import Path
from typing import Callable

import pytest

SAMPLE_SRT = """1
00:00:01,000 --> 00:00:02,500
Hello there.

2
00:00:03,000 --> 00:00:04,000
<i>General Kenobi!</i>

3
00:00:04,000 --> 00:00:06,250
You are a bold one.
"""

TRANSLATION_SRT = """1
00:00:01,000 --> 00:00:02,500
Hola.

2
00:00:03,200 --> 00:00:04,000
¡General Kenobi!
"""

MIXED_SRT = """1
00:00:01,000 --> 00:00:02,000
First good block

x
00:00:02,000 --> 00:00:03,000
Bad index

3
00:00:05,000 -> 00:00:06,000
Bad separator

4
00:00:07,000 --> 00:00:06,000
End before start

5
00:00:08,000 --> 00:00:09,000
Last good block
"""


@pytest.fixture
def sample_srt() -> str:
    return SAMPLE_SRT


@pytest.fixture
def translation_srt() -> str:
    return TRANSLATION_SRT


@pytest.fixture
def mixed_srt() -> str:
    return MIXED_SRT


@pytest.fixture
def input_dir(tmp_path) -> Path:
    directory = tmp_path / "input"
    directory.mkdir()
    return directory


@pytest.fixture
def write_srt(input_dir) -> Callable[..., Path]:
    """Factory: write_srt("name.srt", content) -> Path under input_dir."""

    def _write(name: str, content: str, encoding: str = "utf-8") -> Path:
        path = input_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding=encoding)
        return path

    return _write

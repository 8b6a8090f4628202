"""Conversion runs: SRT files in, one multi-tier EAF document out.

WHY: Parsing, time-slot unification and EAF rendering are independent
pieces. Something has to drive them file by file, decide which failures are
recoverable, and write the result. That is the converter's only job.

HOW: SRTToEAFConverter owns a ConversionContext. Every run resets it, then
processes input files strictly one after another: read, parse, fold the
cues into the shared time-slot table as a new tier. A file that cannot
produce a tier is logged and counted as failed. When every file has been
seen, the registered formatter renders the document and it is written to
disk.

RULES:
- Files are processed in the given order (discovery sorts them)
- Per-block errors are logged as warnings and never stop a file
- In strict mode a file with any malformed block is rejected
- A file with zero valid cues is rejected
- No input files, or no successful file, raises ConversionError and
  writes nothing
- Output parent directories are created; content is written as UTF-8
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Iterable

from srt_elan_converter.config import DEFAULT_OUTPUT_DIR, EAF_SUFFIX, OUTPUT_FILENAME_PREFIX
from srt_elan_converter.core.context import ConversionContext, display_name_for
from srt_elan_converter.core.discovery import find_srt_files
from srt_elan_converter.core.errors import ConversionError, FileProcessingError
from srt_elan_converter.core.ir import Tier, TierSummary
from srt_elan_converter.core.srt_parser import parse_srt
from srt_elan_converter.core.timestamps import format_timestamp
from srt_elan_converter.formatters import DEFAULT_FORMAT, FORMATTERS
from srt_elan_converter.formatters.base import FormatterOutput
from srt_elan_converter.models import ConversionOptions

logger = logging.getLogger(__name__)


@dataclass
class ConversionResult:
    """Summary of a finished conversion run."""

    output_path: Path
    tiers_created: int
    total_annotations: int
    failed_files: list[Path] = field(default_factory=list)
    tiers: list[TierSummary] = field(default_factory=list)

    @property
    def failed_count(self) -> int:
        return len(self.failed_files)


def default_output_path(
    now: datetime | None = None,
    output_dir: Path | None = None,
    suffix: str = EAF_SUFFIX,
) -> Path:
    """Timestamped output path for directory conversions.

    e.g. ``output/multi-srt-2024-05-01T12-30-00.eaf``
    """
    moment = now or datetime.now(timezone.utc)
    stamp = moment.strftime("%Y-%m-%dT%H-%M-%S")
    return (output_dir or DEFAULT_OUTPUT_DIR) / f"{OUTPUT_FILENAME_PREFIX}{stamp}{suffix}"


def single_output_path(srt_path: str | Path, suffix: str = EAF_SUFFIX) -> Path:
    """``<dir>/<name><suffix>`` next to the input file."""
    path = Path(srt_path)
    return path.parent / f"{display_name_for(path)}{suffix}"


def write_document(path: str | Path, content: str) -> Path:
    """Write content as UTF-8, creating parent directories as needed."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content, encoding="utf-8")
    return target


class SRTToEAFConverter:
    """Merge SRT subtitle files into one multi-tier ELAN document.

    Args:
        options: Validated conversion options; defaults when omitted.
        output_format: Key into the FORMATTERS registry.
    """

    def __init__(
        self,
        options: ConversionOptions | None = None,
        output_format: str = DEFAULT_FORMAT,
    ) -> None:
        if output_format not in FORMATTERS:
            available = ", ".join(sorted(FORMATTERS))
            raise ValueError(f"Unknown format '{output_format}'. Available formats: {available}")
        self.options = options or ConversionOptions()
        self.output_format = output_format
        self.context = ConversionContext()

    @property
    def tiers(self) -> list[Tier]:
        return self.context.tiers

    def read_file(self, path: Path) -> str:
        if not path.exists():
            raise FileProcessingError(path, "file not found")
        if not path.is_file():
            raise FileProcessingError(path, "path is not a file")
        try:
            return path.read_text(encoding=self.options.encoding)
        except UnicodeDecodeError as e:
            raise FileProcessingError(
                path, f"cannot decode as {self.options.encoding}: {e.reason}"
            ) from e
        except LookupError as e:
            raise FileProcessingError(
                path, f"unknown text encoding: {self.options.encoding}"
            ) from e
        except OSError as e:
            raise FileProcessingError(path, f"cannot read file: {e.strerror or e}") from e

    def process_file(self, path: str | Path) -> Tier:
        """Parse one SRT file and add it to the run as a new tier.

        Args:
            path: Path of the SRT file.

        Returns:
            The tier added to the context.

        Raises:
            FileProcessingError: If the file is missing, unreadable, yields no
                valid cues, or has malformed blocks in strict mode.
        """
        path = Path(path)
        content = self.read_file(path)
        result = parse_srt(content, path.name, self.options.preserve_formatting)

        if result.errors:
            logger.warning("Errors in %s:", path.name)
            for error in result.errors:
                logger.warning("  %s", error)

        if result.errors and self.options.strict_validation:
            raise FileProcessingError(
                path, f"{len(result.errors)} malformed block(s) rejected in strict mode"
            )
        if not result.cues:
            raise FileProcessingError(path, "no valid subtitles found")

        tier = self.context.add_tier(path, result.cues)
        logger.info(
            "Tier %s: %d cue(s) from %s, %s",
            tier.name,
            len(tier.cues),
            path.name,
            format_timestamp(tier.total_duration_ms),
        )
        return tier

    def render(self) -> FormatterOutput:
        """Render the current context with the configured formatter.

        Returns:
            The formatter's primary output (suffix, content, media type).
        """
        formatter = FORMATTERS[self.output_format](
            media_file=self.options.media_file,
            author=self.options.author,
        )
        outputs = formatter.format(self.context)
        logger.debug(
            "Rendered %s output (%s, %d chars)",
            formatter.name,
            outputs[0].media_type,
            len(outputs[0].content),
        )
        return outputs[0]

    def convert_files(
        self,
        paths: Iterable[str | Path],
        output_path: str | Path | None = None,
        default_target: Callable[[str], Path] | None = None,
    ) -> ConversionResult:
        """Convert the given SRT files into one document.

        Args:
            paths: SRT files in processing order.
            output_path: Target path; falls back to options.output_path, then
                to default_target.
            default_target: Builds the target path from the formatter's
                suffix. Defaults to a timestamped name under the default
                output directory.

        Returns:
            ConversionResult describing the written document.

        Raises:
            ConversionError: If there are no input files or none could be
                processed. Nothing is written in that case.
        """
        self.context.reset()
        files = [Path(p) for p in paths]
        if not files:
            raise ConversionError("No SRT files found in the specified directory")

        failed: list[Path] = []
        for path in files:
            try:
                self.process_file(path)
            except FileProcessingError as e:
                logger.error("%s", e)
                failed.append(path)

        if not self.context.tiers:
            raise ConversionError("No valid SRT files could be processed")

        if failed:
            logger.warning("%d file(s) could not be processed:", len(failed))
            for path in failed:
                logger.warning("  %s", path.name)

        output = self.render()
        target = output_path or self.options.output_path
        if target is None:
            build = default_target or (lambda suffix: default_output_path(suffix=suffix))
            target = build(output.suffix)
        target = write_document(target, output.content)

        total = self.context.total_annotations
        logger.info(
            "Successfully converted %d SRT file(s) to %s with %d annotations",
            len(self.context.tiers),
            target.name,
            total,
        )
        return ConversionResult(
            output_path=target,
            tiers_created=len(self.context.tiers),
            total_annotations=total,
            failed_files=failed,
            tiers=[TierSummary.from_tier(t) for t in self.context.tiers],
        )

    def convert_multiple(
        self,
        directory: str | Path | None = None,
        output_path: str | Path | None = None,
    ) -> ConversionResult:
        """Convert every SRT file found (recursively) under directory."""
        self.context.reset()
        files = find_srt_files(directory or self.options.source_dir)
        return self.convert_files(files, output_path)

    def convert_single(
        self,
        srt_path: str | Path,
        output_path: str | Path | None = None,
    ) -> ConversionResult:
        """Convert one SRT file; output defaults to ``<name><suffix>`` beside it."""
        return self.convert_files(
            [srt_path],
            output_path,
            default_target=lambda suffix: single_output_path(srt_path, suffix),
        )

    def run(self) -> ConversionResult:
        """Convert according to the options: single file if set, else source_dir."""
        if self.options.single_file is not None:
            return self.convert_single(self.options.single_file)
        return self.convert_multiple()

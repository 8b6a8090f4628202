"""Command-line interface for the SRT to ELAN converter.

WHY: The typical use is a folder of subtitle tracks that should end up as
one .eaf file, run from the terminal or a script. The CLI wires option
parsing, validation, the conversion run and a readable summary behind one
command.

HOW: Uses argparse for the flags, builds a ConversionOptions model (which
validates everything once), and runs SRTToEAFConverter. Diagnostics from the
library arrive through the logging module; status and summary lines are
printed to stderr.

RULES:
- --single converts one file and overrides --dir
- --dir defaults to SRT2EAF_INPUT_DIR (./input)
- Missing --single file or --dir directory exits with code 1 before any work
- Invalid options (e.g. unknown encoding) exit with code 1
- Run-level failures (no files, all files failed) exit with code 1
- An output path that cannot be written exits with code 1
- Status output goes to stderr (not stdout)
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from srt_elan_converter import __version__
from srt_elan_converter.config import DEFAULT_AUTHOR, DEFAULT_ENCODING, DEFAULT_INPUT_DIR
from srt_elan_converter.converter import ConversionResult, SRTToEAFConverter
from srt_elan_converter.core.errors import ConversionError
from srt_elan_converter.core.timestamps import format_timestamp
from srt_elan_converter.models import ConversionOptions


def _status(msg: str) -> None:
    """Print a status message to stderr."""
    print(msg, file=sys.stderr, flush=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def _options_from_args(args: argparse.Namespace) -> ConversionOptions:
    values = {
        "author": args.author,
        "encoding": args.encoding,
        "media_file": args.media,
        "output_path": args.output,
        "preserve_formatting": args.preserve_format,
        "strict_validation": args.strict,
        "single_file": args.single,
    }
    if args.dir is not None:
        values["source_dir"] = args.dir
    return ConversionOptions(**values)


def _print_summary(result: ConversionResult) -> None:
    _status("")
    _status("Done! Wrote {}".format(result.output_path))
    _status("  Tiers: {}".format(result.tiers_created))
    for tier in result.tiers:
        _status("    {} ({} annotations, {})".format(
            tier.name, tier.cues, format_timestamp(tier.duration_ms)
        ))
    _status("  Annotations: {}".format(result.total_annotations))
    _status("  Failed files: {}".format(result.failed_count))


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    RULES:
    - Optional: --dir, --single, --output, --media, --author, --encoding
    - Toggles: --preserve-format, --strict, -v/--verbose
    """
    parser = argparse.ArgumentParser(
        prog="srt2eaf",
        description="Convert SRT subtitle files into one multi-tier ELAN (.eaf) document. "
                    "Each SRT file becomes one tier on a shared timeline.",
        epilog="Examples:\n"
               "  srt2eaf\n"
               "  srt2eaf --dir ./subtitles --output project.eaf\n"
               "  srt2eaf --single movie.srt --media movie.mp4\n"
               "  srt2eaf --author \"Jane Doe\" --strict",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--dir",
        default=None,
        help="Directory to search (recursively) for SRT files "
             "(default: {}).".format(DEFAULT_INPUT_DIR),
    )
    parser.add_argument(
        "--single",
        default=None,
        help="Convert a single SRT file instead of a directory.",
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Output .eaf path (default: auto-named file in the output directory, "
             "or <name>.eaf next to a --single input).",
    )
    parser.add_argument(
        "--media",
        default=None,
        help="Media file reference written into the ELAN document.",
    )
    parser.add_argument(
        "--author",
        default=None,
        help="Author name for the ELAN document (default: {}).".format(DEFAULT_AUTHOR),
    )
    parser.add_argument(
        "--encoding",
        default=None,
        help="Text encoding of the SRT files (default: {}).".format(DEFAULT_ENCODING),
    )
    parser.add_argument(
        "--preserve-format",
        action="store_true",
        help="Keep HTML tags and {...} formatting blocks in subtitle text.",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Reject any file that contains a malformed subtitle block.",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s {}".format(__version__),
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    if args.single and not Path(args.single).is_file():
        print("Error: File not found: {}".format(args.single), file=sys.stderr)
        sys.exit(1)

    if not args.single:
        source = Path(args.dir) if args.dir is not None else DEFAULT_INPUT_DIR
        if not source.is_dir():
            print("Error: Directory not found: {}".format(source), file=sys.stderr)
            sys.exit(1)

    try:
        options = _options_from_args(args)
    except ValidationError as e:
        for err in e.errors():
            print("Error: {}".format(err["msg"]), file=sys.stderr)
        sys.exit(1)

    if options.single_file is not None:
        _status("Converting {}...".format(options.single_file))
    else:
        _status("Converting SRT files in {}...".format(options.source_dir))

    try:
        result = SRTToEAFConverter(options).run()
    except ConversionError as e:
        print("Error: Conversion failed: {}".format(e), file=sys.stderr)
        sys.exit(1)
    except OSError as e:
        print("Error: Cannot write output: {}".format(e), file=sys.stderr)
        sys.exit(1)

    _print_summary(result)


if __name__ == "__main__":
    main()

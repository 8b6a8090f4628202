"""Integration tests for conversion runs.

WHY: The converter is where the failure policy lives: bad blocks are
skipped, bad files are skipped, but a run with nothing to convert must fail
without writing anything. It also owns the per-run state that must not
leak between runs.

HOW: Real SRT files are written into tmp_path, converted, and the written
EAF is parsed back with xml.etree.ElementTree.
"""

import logging
import xml.etree.ElementTree as ET
from datetime import datetime, timezone

import pytest

from srt_elan_converter import ConversionOptions, SRTToEAFConverter
from srt_elan_converter.core.discovery import find_srt_files
from srt_elan_converter.core.errors import ConversionError, FileProcessingError
from srt_elan_converter.converter import default_output_path, single_output_path, write_document
from srt_elan_converter.formatters import FORMATTERS
from srt_elan_converter.formatters.base import BaseFormatter, FormatterOutput


def _parse(path):
    return ET.fromstring(path.read_bytes())


class TestDiscovery:

    def test_recursive_case_insensitive_sorted(self, input_dir, write_srt, sample_srt):
        write_srt("b.srt", sample_srt)
        write_srt("A.SRT", sample_srt)
        write_srt("sub/c.srt", sample_srt)
        write_srt("notes.txt", "not subtitles")
        found = find_srt_files(input_dir)
        assert [p.relative_to(input_dir).as_posix() for p in found] == ["A.SRT", "b.srt", "sub/c.srt"]

    def test_empty_directory(self, input_dir):
        assert find_srt_files(input_dir) == []

    def test_missing_directory(self, tmp_path):
        with pytest.raises(ConversionError, match="Directory not found"):
            find_srt_files(tmp_path / "nope")

    def test_file_is_not_directory(self, write_srt, sample_srt):
        path = write_srt("x.srt", sample_srt)
        with pytest.raises(ConversionError, match="not a directory"):
            find_srt_files(path)


class TestProcessFile:

    def test_returns_tier(self, write_srt, sample_srt):
        path = write_srt("movie.en.srt", sample_srt)
        tier = SRTToEAFConverter().process_file(path)
        assert tier.name == "movie_en"
        assert tier.display_name == "movie.en"
        assert len(tier.cues) == 3
        assert tier.total_duration_ms == 5250

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileProcessingError, match="file not found"):
            SRTToEAFConverter().process_file(tmp_path / "missing.srt")

    def test_directory_is_not_a_file(self, input_dir):
        with pytest.raises(FileProcessingError, match="not a file"):
            SRTToEAFConverter().process_file(input_dir)

    def test_zero_cues(self, write_srt):
        path = write_srt("junk.srt", "this is not\nan srt file\n")
        with pytest.raises(FileProcessingError, match="no valid subtitles"):
            SRTToEAFConverter().process_file(path)

    def test_wrong_encoding(self, write_srt):
        path = write_srt("latin.srt", "1\n00:00:01,000 --> 00:00:02,000\nCañón\n", encoding="latin-1")
        with pytest.raises(FileProcessingError, match="cannot decode"):
            SRTToEAFConverter().process_file(path)

    def test_non_text_codec_is_file_error(self, write_srt, sample_srt):
        path = write_srt("a.srt", sample_srt)
        options = ConversionOptions.model_construct(encoding="rot13")
        with pytest.raises(FileProcessingError, match="unknown text encoding: rot13"):
            SRTToEAFConverter(options).process_file(path)

    def test_configured_encoding(self, write_srt):
        path = write_srt("latin.srt", "1\n00:00:01,000 --> 00:00:02,000\nCañón\n", encoding="latin-1")
        tier = SRTToEAFConverter(ConversionOptions(encoding="latin-1")).process_file(path)
        assert tier.cues[0].text == "Cañón"

    def test_block_errors_logged(self, write_srt, mixed_srt, caplog):
        path = write_srt("mixed.srt", mixed_srt)
        with caplog.at_level(logging.WARNING):
            tier = SRTToEAFConverter().process_file(path)
        assert len(tier.cues) == 2
        assert "Errors in mixed.srt" in caplog.text
        assert "Block 2: invalid subtitle index" in caplog.text

    def test_strict_mode_rejects_file_with_bad_blocks(self, write_srt, mixed_srt):
        path = write_srt("mixed.srt", mixed_srt)
        converter = SRTToEAFConverter(ConversionOptions(strict_validation=True))
        with pytest.raises(FileProcessingError, match="strict mode"):
            converter.process_file(path)

    def test_strict_mode_accepts_clean_file(self, write_srt, sample_srt):
        path = write_srt("ok.srt", sample_srt)
        converter = SRTToEAFConverter(ConversionOptions(strict_validation=True))
        assert len(converter.process_file(path).cues) == 3

    def test_preserve_formatting(self, write_srt, sample_srt):
        path = write_srt("fmt.srt", sample_srt)
        tier = SRTToEAFConverter(ConversionOptions(preserve_formatting=True)).process_file(path)
        assert tier.cues[1].text == "<i>General Kenobi!</i>"


class TestConvertMultiple:

    def test_two_files_share_slots(self, tmp_path, input_dir, write_srt, sample_srt, translation_srt):
        write_srt("en.srt", sample_srt)
        write_srt("es.srt", translation_srt)
        out = tmp_path / "out" / "merged.eaf"
        result = SRTToEAFConverter().convert_multiple(input_dir, out)

        assert result.output_path == out
        assert result.tiers_created == 2
        assert result.total_annotations == 5
        assert result.failed_files == []
        assert [(t.name, t.cues) for t in result.tiers] == [("en", 3), ("es", 2)]

        root = _parse(out)
        values = [s.get("TIME_VALUE") for s in root.iter("TIME_SLOT")]
        assert len(values) == len(set(values))
        assert values.count("1000") == 1
        ids = [a.get("ANNOTATION_ID") for a in root.iter("ALIGNABLE_ANNOTATION")]
        assert ids == ["a1", "a2", "a3", "a4", "a5"]

    def test_shared_start_referenced_by_both_tiers(self, tmp_path, input_dir, write_srt):
        write_srt("one.srt", "1\n00:00:01,000 --> 00:00:02,000\nA\n")
        write_srt("two.srt", "1\n00:00:01,000 --> 00:00:03,000\nB\n")
        out = tmp_path / "o.eaf"
        SRTToEAFConverter().convert_multiple(input_dir, out)
        root = _parse(out)
        slot = [s.get("TIME_SLOT_ID") for s in root.iter("TIME_SLOT") if s.get("TIME_VALUE") == "1000"]
        assert len(slot) == 1
        refs = [a.get("TIME_SLOT_REF1") for a in root.iter("ALIGNABLE_ANNOTATION")]
        assert refs == [slot[0], slot[0]]

    def test_colliding_tier_names(self, tmp_path, input_dir, write_srt, sample_srt):
        write_srt("a!b.srt", sample_srt)
        write_srt("a@b.srt", sample_srt)
        out = tmp_path / "o.eaf"
        SRTToEAFConverter().convert_multiple(input_dir, out)
        tier_ids = [t.get("TIER_ID") for t in _parse(out).findall("TIER")]
        assert tier_ids == ["a_b", "a_b_1"]

    def test_partial_failure(self, tmp_path, input_dir, write_srt, sample_srt):
        write_srt("good.srt", sample_srt)
        bad = write_srt("bad.srt", "garbage\n")
        out = tmp_path / "o.eaf"
        result = SRTToEAFConverter().convert_multiple(input_dir, out)
        assert result.tiers_created == 1
        assert result.failed_files == [bad]
        assert result.failed_count == 1
        assert out.is_file()

    def test_empty_directory_fails_without_output(self, tmp_path, input_dir):
        out = tmp_path / "o.eaf"
        with pytest.raises(ConversionError, match="No SRT files found"):
            SRTToEAFConverter().convert_multiple(input_dir, out)
        assert not out.exists()

    def test_only_unparseable_files_fails_without_output(self, tmp_path, input_dir, write_srt):
        write_srt("a.srt", "nothing useful")
        write_srt("b.srt", "")
        out = tmp_path / "o.eaf"
        with pytest.raises(ConversionError, match="No valid SRT files"):
            SRTToEAFConverter().convert_multiple(input_dir, out)
        assert not out.exists()

    def test_missing_directory(self, tmp_path):
        with pytest.raises(ConversionError):
            SRTToEAFConverter().convert_multiple(tmp_path / "missing", tmp_path / "o.eaf")

    def test_options_source_dir_and_output(self, tmp_path, input_dir, write_srt, sample_srt):
        write_srt("x.srt", sample_srt)
        out = tmp_path / "nested" / "deeper" / "x.eaf"
        options = ConversionOptions(source_dir=input_dir, output_path=out, author="Tester",
                                    media_file="clip.wav")
        result = SRTToEAFConverter(options).run()
        assert result.output_path == out
        root = _parse(out)
        assert root.get("AUTHOR") == "Tester"
        assert root.find("HEADER/MEDIA_DESCRIPTOR").get("MIME_TYPE") == "audio/wav"

    def test_default_output_path(self, tmp_path, input_dir, write_srt, sample_srt, monkeypatch):
        monkeypatch.setattr("srt_elan_converter.converter.DEFAULT_OUTPUT_DIR", tmp_path / "auto")
        write_srt("x.srt", sample_srt)
        result = SRTToEAFConverter().convert_multiple(input_dir)
        assert result.output_path.parent == tmp_path / "auto"
        assert result.output_path.name.startswith("multi-srt-")
        assert result.output_path.suffix == ".eaf"
        assert result.output_path.is_file()


class TestRepeatedRuns:
    """State is reset between runs on the same converter instance."""

    def test_second_run_not_contaminated(self, tmp_path, input_dir, write_srt, sample_srt):
        converter = SRTToEAFConverter()
        write_srt("en.srt", sample_srt)
        first = converter.convert_multiple(input_dir, tmp_path / "1.eaf")

        other = tmp_path / "other"
        other.mkdir()
        (other / "solo.srt").write_text("1\n00:00:09,000 --> 00:00:10,000\nSolo\n", encoding="utf-8")
        second = converter.convert_multiple(other, tmp_path / "2.eaf")

        assert first.tiers_created == 1
        assert second.tiers_created == 1
        root = _parse(tmp_path / "2.eaf")
        assert [t.get("TIER_ID") for t in root.findall("TIER")] == ["solo"]
        assert [s.get("TIME_SLOT_ID") for s in root.iter("TIME_SLOT")] == ["ts1", "ts2"]
        assert [a.get("ANNOTATION_ID") for a in root.iter("ALIGNABLE_ANNOTATION")] == ["a1"]

    def test_same_input_same_tier_names(self, tmp_path, input_dir, write_srt, sample_srt):
        converter = SRTToEAFConverter()
        write_srt("en.srt", sample_srt)
        converter.convert_multiple(input_dir, tmp_path / "1.eaf")
        converter.convert_multiple(input_dir, tmp_path / "2.eaf")
        assert [t.name for t in converter.tiers] == ["en"]


class TestConvertSingle:

    def test_default_output_next_to_input(self, write_srt, sample_srt):
        path = write_srt("movie.srt", sample_srt)
        result = SRTToEAFConverter().convert_single(path)
        assert result.output_path == path.parent / "movie.eaf"
        assert result.tiers_created == 1
        assert result.total_annotations == 3
        assert result.output_path.is_file()

    def test_run_uses_single_file(self, tmp_path, write_srt, sample_srt):
        path = write_srt("movie.srt", sample_srt)
        options = ConversionOptions(single_file=path, output_path=tmp_path / "single.eaf")
        result = SRTToEAFConverter(options).run()
        assert result.output_path == tmp_path / "single.eaf"

    def test_unparseable_single_file(self, write_srt):
        path = write_srt("bad.srt", "nope")
        with pytest.raises(ConversionError):
            SRTToEAFConverter().convert_single(path)
        assert not (path.parent / "bad.eaf").exists()


class TestHelpers:

    def test_default_output_path_format(self, tmp_path):
        moment = datetime(2024, 5, 1, 12, 30, 45, tzinfo=timezone.utc)
        assert default_output_path(moment, tmp_path) == tmp_path / "multi-srt-2024-05-01T12-30-45.eaf"

    def test_single_output_path(self, tmp_path):
        assert single_output_path(tmp_path / "Show.SRT") == tmp_path / "Show.eaf"

    def test_write_document_creates_parents(self, tmp_path):
        target = write_document(tmp_path / "a" / "b" / "c.eaf", "<x/>\n")
        assert target.read_text(encoding="utf-8") == "<x/>\n"

    def test_unknown_output_format(self):
        with pytest.raises(ValueError, match="Unknown format"):
            SRTToEAFConverter(output_format="docx")

    def test_suffix_helpers(self, tmp_path):
        moment = datetime(2024, 5, 1, 12, 30, 45, tzinfo=timezone.utc)
        assert default_output_path(moment, tmp_path, ".xml").name == "multi-srt-2024-05-01T12-30-45.xml"
        assert single_output_path(tmp_path / "Show.srt", ".xml") == tmp_path / "Show.xml"


class PlainTextFormatter(BaseFormatter):
    """One line per tier; stands in for a second registered format."""

    def __init__(self, media_file=None, author=None):
        self.media_file = media_file
        self.author = author

    @property
    def name(self):
        return "Plain text"

    def format(self, context):
        lines = ["{} {}".format(t.name, len(t.cues)) for t in context.tiers]
        return [FormatterOutput(suffix=".txt", content="\n".join(lines) + "\n", media_type="text/plain")]


class TestOutputFormat:
    """The registered formatter decides the written content and default suffix."""

    @pytest.fixture
    def plain_format(self, monkeypatch):
        monkeypatch.setitem(FORMATTERS, "plain", PlainTextFormatter)
        return "plain"

    def test_unknown_format_rejected(self):
        with pytest.raises(ValueError, match="Unknown format 'nope'"):
            SRTToEAFConverter(output_format="nope")

    def test_default_name_uses_formatter_suffix(self, tmp_path, input_dir, write_srt, sample_srt,
                                                 plain_format, monkeypatch):
        monkeypatch.setattr("srt_elan_converter.converter.DEFAULT_OUTPUT_DIR", tmp_path / "auto")
        write_srt("en.srt", sample_srt)
        result = SRTToEAFConverter(output_format=plain_format).convert_multiple(input_dir)
        assert result.output_path.parent == tmp_path / "auto"
        assert result.output_path.suffix == ".txt"
        assert result.output_path.read_text(encoding="utf-8") == "en 3\n"

    def test_single_name_uses_formatter_suffix(self, write_srt, sample_srt, plain_format):
        path = write_srt("movie.srt", sample_srt)
        result = SRTToEAFConverter(output_format=plain_format).convert_single(path)
        assert result.output_path == path.parent / "movie.txt"

    def test_explicit_output_path_kept(self, tmp_path, write_srt, sample_srt, plain_format):
        path = write_srt("movie.srt", sample_srt)
        result = SRTToEAFConverter(output_format=plain_format).convert_single(path, tmp_path / "out.eaf")
        assert result.output_path == tmp_path / "out.eaf"

import pytest

from caption_fixer.diagnostics import Diagnostics, LogLevel
from caption_fixer.models import Cue
from caption_fixer.passes import (
    FIX_PASSES,
    PassContext,
    adjust_timing,
    check_min_gap,
    final_validation,
    format_output,
    merge_short_captions,
    normalize_spaces,
    replace_entities,
    run_passes,
    split_long_durations,
    split_long_line_counts,
    wrap_line,
    wrap_lines,
)
from caption_fixer.profiles import FixSettings


def redistributing_ctx():
    return PassContext(settings=FixSettings(redistribute_text=True), diagnostics=Diagnostics())


def test_replace_entities_rewrites_escaped_markers(ctx):
    document = ["NOTE &gt;&gt;", Cue(0, 1000, ["&gt;&gt; Hi", "plain"])]
    result = replace_entities(document, ctx)
    assert result == ["NOTE -", Cue(0, 1000, ["- Hi", "plain"])]
    assert document[1].lines == ["&gt;&gt; Hi", "plain"]


@pytest.mark.parametrize(
    "line, expected",
    [
        ("-Hi there", "- Hi there"),
        ("-- Hi there", "- Hi there"),
        ("– Hi there", "- Hi there"),
        (">> Hi there", "- Hi there"),
        ("Hi there", "Hi there"),
    ],
)
def test_wrap_line_normalizes_speaker_marker(line, expected):
    assert wrap_line(line, 32) == [expected]


def test_wrap_line_wraps_greedily():
    assert wrap_line("The quick brown fox jumps over the lazy dog", 32) == [
        "The quick brown fox jumps over",
        "the lazy dog",
    ]


def test_wrap_line_drops_blank_lines():
    assert wrap_line("   ", 32) == []


def test_wrap_line_keeps_overlong_word_alone():
    word = "x" * 40
    assert wrap_line(f"a {word} b", 32) == ["a", word, "b"]


def test_wrap_lines_bounds_length_and_count(ctx):
    text = " ".join(["caption"] * 30)
    result = wrap_lines([Cue(0, 2000, [text])], ctx)

    lines = result[0].lines
    assert len(lines) == 3
    assert all(len(line) <= 32 for line in lines)
    assert any(m.startswith("Caption split into 8 lines") for m in ctx.diagnostics.messages(LogLevel.INFO))
    assert not ctx.diagnostics.by_level(LogLevel.WARNING)


def test_wrap_lines_without_truncation_logs_no_warning(ctx):
    result = wrap_lines([Cue(0, 2000, ["Short", ""])], ctx)
    assert result == [Cue(0, 2000, ["Short"])]
    assert not ctx.diagnostics.by_level(LogLevel.WARNING)


def test_normalize_spaces_trims_and_collapses(ctx):
    result = normalize_spaces([Cue(0, 1000, ["  a   b  ", "c"])], ctx)
    assert result[0].lines == ["a b", "c"]


def test_split_long_durations_splits_at_midpoint(ctx):
    document = ["WEBVTT", Cue(0, 10001, ["Long caption"]), Cue(11000, 12000, ["Short"])]
    result = split_long_durations(document, ctx)

    assert result == [
        "WEBVTT",
        Cue(0, 5000, []),
        Cue(5000, 10001, ["Long caption"]),
        Cue(11000, 12000, ["Short"]),
    ]
    assert len(ctx.diagnostics.by_level(LogLevel.WARNING)) == 1


def test_split_long_durations_leaves_exact_limit(ctx):
    document = [Cue(0, 7000, ["Edge"])]
    assert split_long_durations(document, ctx) == document


def test_split_long_durations_redistributes_text_when_enabled():
    ctx = redistributing_ctx()
    result = split_long_durations([Cue(0, 8000, ["one two three", "four"])], ctx)
    assert result == [Cue(0, 4000, ["one two three"]), Cue(4000, 8000, ["four"])]

    result = split_long_durations([Cue(0, 8000, ["one two three"])], ctx)
    assert result == [Cue(0, 4000, ["one two"]), Cue(4000, 8000, ["three"])]


def test_split_long_line_counts_repeats_original_timing(ctx):
    cue = Cue(1000, 3000, ["a", "b", "c", "d", "e"])
    result = split_long_line_counts([cue], ctx)

    assert result == [Cue(1000, 3000, ["a", "b"]), Cue(1000, 3000, ["c", "d", "e"])]
    assert ctx.diagnostics.by_level(LogLevel.WARNING)


def test_split_long_line_counts_recomputes_time_when_enabled():
    result = split_long_line_counts([Cue(1000, 3000, ["a", "b", "c", "d", "e"])], redistributing_ctx())
    assert result == [Cue(1000, 1800, ["a", "b"]), Cue(1800, 3000, ["c", "d", "e"])]


def test_split_long_line_counts_ignores_three_lines(ctx):
    document = [Cue(0, 1000, ["a", "b", "c"])]
    assert split_long_line_counts(document, ctx) == document


def test_merge_short_captions_merges_pair(ctx):
    document = ["WEBVTT", "", Cue(1000, 1800, ["Hi"]), Cue(1850, 2500, ["there"])]
    result = merge_short_captions(document, ctx)

    assert result == ["WEBVTT", "", Cue(1000, 2500, ["Hi", "there"])]
    assert len(ctx.diagnostics.by_level(LogLevel.MERGE)) == 1


def test_merge_short_captions_failed_merge_keeps_next_eligible(ctx):
    document = [
        Cue(0, 500, ["a", "b"]),
        Cue(600, 1100, ["c", "d"]),
        Cue(1200, 1700, ["e"]),
    ]
    result = merge_short_captions(document, ctx)

    assert result == [Cue(0, 500, ["a", "b"]), Cue(600, 1700, ["c", "d", "e"])]
    assert len(ctx.diagnostics.by_level(LogLevel.ERROR)) == 1
    assert len(ctx.diagnostics.by_level(LogLevel.MERGE)) == 1


def test_merge_short_captions_rejects_long_span(ctx):
    document = [Cue(0, 1000, ["a"]), Cue(9000, 9500, ["b"])]
    assert merge_short_captions(document, ctx) == document
    assert ctx.diagnostics.by_level(LogLevel.ERROR)


def test_merge_short_captions_respects_bounds(ctx):
    document = [Cue(i * 1000, i * 1000 + 900, ["x"] * (i % 3 + 1)) for i in range(8)]
    for cue in merge_short_captions(document, ctx):
        assert cue.duration <= 7000
        assert len(cue.lines) <= 3


def test_merge_short_captions_skips_long_cues(ctx):
    document = [Cue(0, 2000, ["a"]), Cue(2100, 2500, ["b"])]
    assert merge_short_captions(document, ctx) == document
    assert not ctx.diagnostics.by_level(LogLevel.MERGE)


def test_check_min_gap_warns_without_changes(ctx):
    document = ["WEBVTT", Cue(0, 1000, ["a"]), Cue(1020, 2000, ["b"]), Cue(3000, 4000, ["c"])]
    snapshot = [c for c in document]

    result = check_min_gap(document, ctx)

    assert result == snapshot
    warnings = ctx.diagnostics.messages(LogLevel.WARNING)
    assert warnings == ["Gap between captions is less than 40ms: 00:00:01.000 -> 00:00:01.020"]


def test_adjust_timing_extends_short_cue(ctx):
    result = adjust_timing([Cue(1000, 1500, ["Hello"])], ctx)
    assert result == [Cue(1000, 2000, ["Hello"])]
    assert "Adjusted timing for short caption: 00:00:01.000 --> 00:00:02.000" in ctx.diagnostics.messages(LogLevel.INFO)


def test_adjust_timing_clamps_before_next_cue(ctx):
    document = [Cue(1000, 1500, ["a"]), Cue(1800, 3000, ["b"])]
    result = adjust_timing(document, ctx)

    assert result == [Cue(1000, 1760, ["a"]), Cue(1800, 3000, ["b"])]
    assert any("Adjusted timing" in m for m in ctx.diagnostics.messages(LogLevel.INFO))


def test_adjust_timing_keeps_literals_in_place(ctx):
    document = ["WEBVTT", "", Cue(0, 1000, ["a"]), Cue(1500, 1600, ["b"])]
    result = adjust_timing(document, ctx)
    assert result == ["WEBVTT", "", Cue(0, 1000, ["a"]), Cue(1500, 2500, ["b"])]


def test_final_validation_logs_but_does_not_correct(ctx):
    document = [Cue(2000, 2000, ["a"]), Cue(3000, 2500, ["b"]), Cue(4000, 5000, ["c"])]
    result = final_validation(document, ctx)

    assert result == document
    assert len(ctx.diagnostics.by_level(LogLevel.ERROR)) == 2


def test_format_output_reports_caption_count(ctx):
    text = format_output([Cue(0, 1000, ["a"])], ctx)

    assert text == "00:00:00.000 --> 00:00:01.000\n\na"
    assert "Total number of captions: 1" in ctx.diagnostics.messages()
    assert not ctx.diagnostics.has_errors


def test_format_output_errors_without_captions(ctx):
    assert format_output(["WEBVTT"], ctx) == "WEBVTT"
    assert ctx.diagnostics.messages(LogLevel.ERROR) == ["No captions found in the processed content"]


def test_run_passes_folds_in_order(ctx):
    document = [Cue(0, 10000, ["&gt;&gt;  Welcome   back"])]
    result = run_passes(document, FIX_PASSES, ctx)

    assert result == [Cue(0, 5000, []), Cue(5000, 10000, ["- Welcome back"])]
    assert document == [Cue(0, 10000, ["&gt;&gt;  Welcome   back"])]

"""Tests for the escape-sequence scrubber.

Covers SGR styles, role sequences, cursor padding, overstrike decoding,
origin offsets and the failure path for invalid UTF-8.
"""

import logging

import pytest

from linescan import (
    AttrType,
    Role,
    ScrubConfig,
    ScrubError,
    TextAttrs,
    scrub,
    scrub_ansi_string,
    scrub_config_context,
    strip_ansi,
)
from linescan.ranges import LineRange


def _styles(attrs):
    return [(a.range, a.value) for a in attrs if a.type is AttrType.STYLE]


def _roles(attrs):
    return [(a.range, a.value) for a in attrs if a.type is AttrType.ROLE]


class TestPlainText:
    """Lines without control sequences are left alone."""

    def test_no_op(self) -> None:
        line = scrub("hello world")
        assert line.text == "hello world"
        assert line.attrs == []
        assert line.outcome.edits == 0

    def test_empty(self) -> None:
        buf = bytearray()
        attrs: list = []
        outcome = scrub_ansi_string(buf, attrs)
        assert buf == bytearray()
        assert attrs == []
        assert outcome.ok

    def test_nul_replaced_with_space(self) -> None:
        line = scrub(b"a\x00b\x00")
        assert line.data == b"a b "
        assert line.attrs == []

    def test_nul_replacement_configurable(self) -> None:
        with scrub_config_context(ScrubConfig(nul_replacement=ord("."))):
            assert scrub(b"a\x00b").data == b"a.b"


class TestSgrStyles:
    """SGR (ESC [ ... m) sequences become style ranges."""

    def test_bold_hello(self) -> None:
        line = scrub("\x1b[1mHELLO\x1b[0m")
        assert line.text == "HELLO"
        assert _styles(line.attrs) == [(LineRange(0, 5), TextAttrs(bold=True))]

    def test_colors(self) -> None:
        line = scrub("\x1b[31;42mX")
        assert line.text == "X"
        assert _styles(line.attrs) == [(LineRange(0, None), TextAttrs(fg=1, bg=2))]

    def test_black_foreground_counts_as_style(self) -> None:
        line = scrub("\x1b[30mX\x1b[m")
        assert _styles(line.attrs) == [(LineRange(0, 1), TextAttrs(fg=0))]

    def test_bright_colors_set_standout(self) -> None:
        line = scrub("\x1b[92mok")
        assert _styles(line.attrs) == [(LineRange(0, None), TextAttrs(standout=True, fg=2))]

    def test_all_flags(self) -> None:
        line = scrub("\x1b[1;2;4;7mX")
        assert _styles(line.attrs)[0][1] == TextAttrs(
            bold=True, dim=True, underline=True, reverse=True
        )

    def test_reset_closes_run_without_new_style(self) -> None:
        line = scrub("\x1b[4ma\x1b[mb")
        assert line.text == "ab"
        assert _styles(line.attrs) == [(LineRange(0, 1), TextAttrs(underline=True))]

    def test_new_style_closes_previous(self) -> None:
        line = scrub("\x1b[1mab\x1b[4mcd")
        assert line.text == "abcd"
        assert _styles(line.attrs) == [
            (LineRange(0, 2), TextAttrs(bold=True)),
            (LineRange(2, None), TextAttrs(underline=True)),
        ]

    def test_extended_color_arguments_are_skipped(self) -> None:
        line = scrub("\x1b[38;5;1mX\x1b[48;2;1;4;7mY")
        assert line.text == "XY"
        assert _styles(line.attrs) == []

    def test_malformed_parameters_ignored(self) -> None:
        line = scrub("\x1b[=1;?4mX")
        assert line.text == "X"
        assert _styles(line.attrs) == []

    def test_unknown_command_dropped(self) -> None:
        line = scrub("\x1b[2Jx\x1b[?25l")
        assert line.text == "x"
        assert _styles(line.attrs) == []
        assert _roles(line.attrs) == []


class TestRoles:
    """Role (ESC [ n O) sequences become role ranges."""

    def test_role_run(self) -> None:
        line = scrub("\x1b[4Oerr\x1b[m rest")
        assert line.text == "err rest"
        assert _roles(line.attrs) == [(LineRange(0, 3), Role.ERROR)]

    def test_role_zero_is_valid(self) -> None:
        line = scrub("\x1b[0Ox")
        assert _roles(line.attrs) == [(LineRange(0, None), Role.TEXT)]

    def test_out_of_range_role_ignored(self) -> None:
        line = scrub("\x1b[99Ox")
        assert line.text == "x"
        assert _roles(line.attrs) == []

    def test_non_numeric_role_ignored(self) -> None:
        line = scrub("\x1b[Ox")
        assert line.text == "x"
        assert _roles(line.attrs) == []


class TestCursorMoves:
    """Cursor movement becomes space padding."""

    def test_cursor_forward(self) -> None:
        assert scrub("ab\x1b[3Ccd").text == "ab   cd"

    def test_cursor_forward_without_count(self) -> None:
        assert scrub("ab\x1b[Ccd").text == "abcd"

    def test_cursor_position_pads_to_column(self) -> None:
        line = scrub("abc\x1b[1;10Hx")
        assert line.text == "abc      x"
        assert line.text.index("x") == 9

    def test_cursor_position_behind_current_column(self) -> None:
        assert scrub("abcdefghijkl\x1b[1;5Hx").text == "abcdefghijklx"

    def test_cursor_position_needs_row_and_column(self) -> None:
        assert scrub("ab\x1b[10Hx").text == "abx"

    def test_padding_disabled(self) -> None:
        with scrub_config_context(ScrubConfig(expand_cursor_moves=False)):
            assert scrub("ab\x1b[3Ccd\x1b[1;20Hx").text == "abcdx"


class TestOverstrike:
    """Backspace overstrike runs become bold/underline ranges."""

    def test_underline_hello(self) -> None:
        line = scrub("_\bH_\be_\bl_\bl_\bo")
        assert line.text == "Hello"
        assert _styles(line.attrs) == [(LineRange(0, 5), TextAttrs(underline=True))]

    def test_underline_placeholder_on_right(self) -> None:
        line = scrub("H\b_i\b_")
        assert line.text == "Hi"
        assert _styles(line.attrs) == [(LineRange(0, 2), TextAttrs(underline=True))]

    def test_bold(self) -> None:
        line = scrub("H\bHi\bi there")
        assert line.text == "Hi there"
        assert _styles(line.attrs) == [(LineRange(0, 2), TextAttrs(bold=True))]

    def test_style_change_flushes_run(self) -> None:
        line = scrub("B\bBO\bO_\bU")
        assert line.text == "BOU"
        assert _styles(line.attrs) == [
            (LineRange(0, 2), TextAttrs(bold=True)),
            (LineRange(2, 3), TextAttrs(underline=True)),
        ]

    def test_multibyte_ranges_are_bytes(self) -> None:
        line = scrub("é\bé!")
        assert line.text == "é!"
        assert _styles(line.attrs) == [(LineRange(0, 2), TextAttrs(bold=True))]

    def test_mixed_with_csi(self) -> None:
        line = scrub("\x1b[31mred\x1b[0m and _\bu_\bl")
        assert line.text == "red and ul"
        assert _styles(line.attrs) == [
            (LineRange(0, 3), TextAttrs(fg=1)),
            (LineRange(8, 10), TextAttrs(underline=True)),
        ]


class TestOriginOffsets:
    """Origin ranges map scrubbed offsets back to the raw line."""

    def test_offsets_after_sgr(self) -> None:
        raw = "\x1b[1mHELLO\x1b[0m world"
        line = scrub(raw)
        assert line.origin_offset(0) == raw.index("H")
        assert line.origin_offset(6) == raw.index("w")

    def test_offsets_after_cursor_forward(self) -> None:
        raw = "ab\x1b[3Ccd"
        line = scrub(raw)
        assert line.origin_offset(0) == 0
        assert line.origin_offset(line.text.index("c")) == raw.index("c")

    def test_offsets_after_overstrike(self) -> None:
        raw = "_\bH_\bi there"
        line = scrub(raw)
        assert line.origin_offset(line.text.index("t")) == raw.index("t")

    def test_unedited_line_maps_to_itself(self) -> None:
        line = scrub("plain")
        assert line.origin_offset(3) == 3

    def test_edit_at_start_still_covers_tail(self) -> None:
        line = scrub("\x1b[1mHELLO")
        origins = [a.range for a in line.attrs if a.type is AttrType.ORIGIN_OFFSET]
        assert any(r.start == 0 and r.end == 5 for r in origins)


class TestJoinedSequences:
    """Deleting one sequence can join its neighbours into another."""

    def test_csi_formed_by_deletion(self) -> None:
        line = scrub("\x1b\x1b[m[1mX")
        assert line.data == b"X"
        assert _styles(line.attrs) == [(LineRange(0, None), TextAttrs(bold=True))]

    def test_overstrike_formed_by_deletion(self) -> None:
        line = scrub("a\x1b[m\ba")
        assert line.text == "a"
        assert scrub(line.data).outcome.edits == 0


class TestBufferApi:
    """The low-level in-place API."""

    def test_mutates_in_place(self) -> None:
        buf = bytearray(b"\x1b[31mred")
        same = buf
        outcome = scrub_ansi_string(buf)
        assert same is buf
        assert buf == bytearray(b"red")
        assert outcome.ok
        assert outcome.edits == 1

    def test_without_attrs_still_scrubs(self) -> None:
        buf = bytearray(b"_\bx\x1b[4Oy")
        scrub_ansi_string(buf, None)
        assert buf == bytearray(b"xy")

    def test_scrub_copies_input(self) -> None:
        raw = bytearray(b"\x1b[1mx")
        scrub(raw)
        assert raw == bytearray(b"\x1b[1mx")

    def test_annotate_false(self) -> None:
        line = scrub("\x1b[1mx", annotate=False)
        assert line.text == "x"
        assert line.attrs == []

    def test_strip_ansi(self) -> None:
        assert strip_ansi("\x1b[31mred\x1b[0m") == "red"


class TestInvalidUtf8:
    """Invalid UTF-8 inside an overstrike run stops the scrub."""

    def test_reports_error(self) -> None:
        buf = bytearray(b"\xff\x08\xff")
        outcome = scrub_ansi_string(buf, [])
        assert not outcome.ok
        assert isinstance(outcome.error, ScrubError)
        assert outcome.error.offset == 0

    def test_offset_is_in_edited_buffer(self) -> None:
        buf = bytearray(b"\x1b[1mok \xc3\x08x tail")
        outcome = scrub_ansi_string(buf, [])
        assert outcome.error is not None
        assert outcome.error.offset == 3
        assert outcome.edits == 1
        assert buf.startswith(b"ok ")

    def test_logs_failure(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.ERROR, logger="linescan"):
            scrub(b"\xff\x08\xff")
        assert "invalid UTF-8 at 0" in caplog.text

    def test_raise_for_error(self) -> None:
        line = scrub(b"\xff\x08\xff")
        assert not line.ok
        with pytest.raises(ScrubError):
            line.outcome.raise_for_error()

    def test_strip_ansi_raises(self) -> None:
        with pytest.raises(ScrubError, match="offset 0"):
            strip_ansi(b"\xff\x08\xff")

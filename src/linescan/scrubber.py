"""Escape-sequence scrubber.

Removes ANSI control sequences and overstrike formatting from one line
of text, in place, while recording what they meant as annotations over
the cleaned text:

- SGR sequences (``ESC [ ... m``) become STYLE ranges
- role sequences (``ESC [ n O``) become ROLE ranges
- overstrike runs (``c BS c`` / ``_ BS c``) become bold/underline ranges
- every edit records an ORIGIN_OFFSET range so offsets in the cleaned
  text can be mapped back to the raw line

Cursor-forward (``C``) and cursor-position (``H``) sequences are turned
into space padding so columns still line up. Anything else is dropped.

Example:
    >>> line = scrub("\\x1b[1mHELLO\\x1b[0m")
    >>> line.text
    'HELLO'
    >>> [a for a in line.attrs if a.type is AttrType.STYLE]
    [StringAttr(STYLE, [0:5), TextAttrs(bold=True, ...))]

Thread Safety:
All state is local to one call. The compiled patterns are module-level
and read-only.

"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from linescan.attrs import (
    AttrType,
    Role,
    StringAttr,
    StringAttrs,
    TextAttrs,
    close_open_ranges,
    shift_string_attrs,
    to_origin_offset,
)
from linescan.config import ScrubConfig, get_scrub_config
from linescan.errors import ScrubError
from linescan.ranges import LineRange
from linescan.utils.logger import get_logger

logger = get_logger(__name__)

# One UTF-8 code point (lead byte plus continuation bytes), never a backspace.
# Malformed sequences still match here and fail when decoded.
_CODE_POINT = rb"(?:[\x00-\x07\x09-\x7f]|[\x80-\xff][\x80-\xbf]*)"

_ANSI_RE = re.compile(
    rb"\x1b\[(?P<params>[0-9=;?]*)(?P<cmd>[a-zA-Z])"
    rb"|(?P<overstrike>(?:" + _CODE_POINT + rb"\x08" + _CODE_POINT + rb")+)"
)
_OVERSTRIKE_RE = re.compile(rb"(" + _CODE_POINT + rb")\x08(" + _CODE_POINT + rb")")
_PARTIAL_CSI_RE = re.compile(rb"\x1b(?:\[[0-9=;?]*)?")

# Longest "X BS" prefix that can sit in front of an edit point
_MAX_OVERSTRIKE_PREFIX = 5

# Upper bound on spaces written for one cursor movement
_MAX_CURSOR_PADDING = 1024

# SGR extended color selectors and how many parameters each mode uses
_SGR_EXTENDED_COLOR = frozenset((38, 48))
_SGR_EXTENDED_ARGS = {5: 1, 2: 3}


@dataclass(frozen=True, slots=True)
class ScrubOutcome:
    """Result of scrubbing one line.

    Attributes:
        edits: Number of sequences/runs removed or rewritten
        error: Failure that stopped the scrub, if any. When set, the
            buffer is only partially scrubbed and should be discarded.

    """

    edits: int = 0
    error: ScrubError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> None:
        """Raise the recorded ScrubError, if there is one."""
        if self.error is not None:
            raise self.error


@dataclass(slots=True)
class _ScrubState:
    origin_offset: int = 0
    last_edit_end: int = 0
    edits: int = 0

    def record_edit(self, sa: StringAttrs | None, end: int, removed: int) -> None:
        """Record an origin range up to ``end`` and account for ``removed`` bytes."""
        if sa is not None:
            sa.append(
                StringAttr(
                    LineRange(min(self.last_edit_end, end), end),
                    AttrType.ORIGIN_OFFSET,
                    self.origin_offset,
                )
            )
        self.last_edit_end = end
        self.origin_offset += removed
        self.edits += 1


def _parse_int(raw: bytes) -> int | None:
    try:
        return int(raw)
    except ValueError:
        return None


def _parse_sgr(params: bytes) -> TextAttrs:
    """Fold SGR parameters into a style bundle. Unknown codes are ignored."""
    bold = dim = underline = reverse = standout = False
    fg: int | None = None
    bg: int | None = None

    codes = iter(params.split(b";"))
    for raw in codes:
        code = _parse_int(raw)
        if code is None:
            continue
        if code in _SGR_EXTENDED_COLOR:
            mode = _parse_int(next(codes, b""))
            for _ in range(_SGR_EXTENDED_ARGS.get(mode or 0, 0)):
                next(codes, None)
            continue
        if 90 <= code <= 97:
            code -= 60
            standout = True
        if 30 <= code <= 37:
            fg = code - 30
        elif 40 <= code <= 47:
            bg = code - 40
        elif code == 1:
            bold = True
        elif code == 2:
            dim = True
        elif code == 4:
            underline = True
        elif code == 7:
            reverse = True

    return TextAttrs(
        bold=bold,
        dim=dim,
        underline=underline,
        reverse=reverse,
        standout=standout,
        fg=fg,
        bg=bg,
    )


def _cursor_padding(cmd: bytes, params: bytes, seq_start: int) -> int:
    """Spaces standing in for a cursor movement sequence."""
    if cmd == b"C":
        count = _parse_int(params)
        if count is None or count <= 0:
            return 0
        return min(count, _MAX_CURSOR_PADDING)

    # H: row;col, only the column matters
    row, sep, col = params.partition(b";")
    row_num = _parse_int(row)
    col_num = _parse_int(col)
    if not sep or row_num is None or col_num is None or col_num <= 1:
        return 0
    return min(max(0, (col_num - 1) - seq_start), _MAX_CURSOR_PADDING)


def _scrub_overstrike(
    buf: bytearray,
    match: re.Match[bytes],
    sa: StringAttrs | None,
    state: _ScrubState,
) -> ScrubError | None:
    """Decode an overstrike run, rewrite it in place and record bold/underline."""
    run_start, run_end = match.span()
    out = bytearray()
    bold: LineRange | None = None
    underline: LineRange | None = None

    def flush(run: LineRange | None, attrs: TextAttrs) -> None:
        if sa is not None and run is not None:
            sa.append(StringAttr(run, AttrType.STYLE, attrs))

    for triple in _OVERSTRIKE_RE.finditer(bytes(buf[run_start:run_end])):
        try:
            lhs = triple.group(1).decode("utf-8")
            rhs = triple.group(2).decode("utf-8")
        except UnicodeDecodeError:
            return ScrubError(
                "invalid UTF-8 in overstrike run", offset=run_start + triple.start()
            )

        fill = run_start + len(out)
        if lhs == "_" or rhs == "_":
            encoded = (rhs if lhs == "_" else lhs).encode("utf-8")
            flush(bold, TextAttrs(bold=True))
            bold = None
            if underline is None:
                underline = LineRange(fill, fill + len(encoded))
            else:
                underline.end = fill + len(encoded)
        else:
            encoded = lhs.encode("utf-8")
            flush(underline, TextAttrs(underline=True))
            underline = None
            if bold is None:
                bold = LineRange(fill, fill + len(encoded))
            else:
                bold.end = fill + len(encoded)
        out += encoded

    out_end = run_start + len(out)
    removed = (run_end - run_start) - len(out)
    buf[run_start:run_end] = out
    if sa is not None:
        shift_string_attrs(sa, out_end, -removed)

    flush(underline, TextAttrs(underline=True))
    flush(bold, TextAttrs(bold=True))
    state.record_edit(sa, out_end, removed)
    return None


def _resume_point(buf: bytearray, edit_start: int) -> int:
    """Where to resume matching after an edit at ``edit_start``.

    Removing a sequence can join the bytes around it into a new one
    (a dangling ``ESC [1`` before it, or ``c BS`` before/after it), so
    matching restarts early enough to see such joins.
    """
    pos = max(0, edit_start - _MAX_OVERSTRIKE_PREFIX)
    esc = buf.rfind(b"\x1b", 0, edit_start)
    if esc != -1 and esc < pos and _PARTIAL_CSI_RE.fullmatch(buf, esc, edit_start):
        pos = esc
    return pos


def _scrub_csi(
    buf: bytearray,
    match: re.Match[bytes],
    sa: StringAttrs | None,
    state: _ScrubState,
    config: ScrubConfig,
) -> None:
    """Apply one CSI sequence and delete it from the buffer."""
    seq_start, seq_end = match.span()
    seq_len = seq_end - seq_start
    params = bytes(match.group("params"))
    cmd = bytes(match.group("cmd"))

    style: TextAttrs | None = None
    role: Role | None = None
    opens_run = False
    padding = 0

    if cmd == b"m":
        style = _parse_sgr(params)
        opens_run = True
    elif cmd in (b"C", b"H"):
        if config.expand_cursor_moves:
            padding = _cursor_padding(cmd, params, seq_start)
    elif cmd == b"O":
        code = _parse_int(params)
        role = Role.from_code(code) if code is not None else None
        opens_run = role is not None
    else:
        logger.debug("dropping unhandled CSI command %r at offset %d", cmd, seq_start)

    buf[seq_start:seq_end] = b" " * padding

    if sa is not None:
        shift_string_attrs(sa, seq_start, -seq_len)
        if opens_run:
            close_open_ranges(sa, seq_start)
            if style:
                sa.append(StringAttr(LineRange(seq_start), AttrType.STYLE, style))
            if role is not None:
                sa.append(StringAttr(LineRange(seq_start), AttrType.ROLE, role))

    state.record_edit(sa, seq_start, seq_len - padding)


def scrub_ansi_string(buf: bytearray, sa: StringAttrs | None = None) -> ScrubOutcome:
    """Strip escape sequences and overstrike runs from ``buf`` in place.

    NUL bytes are replaced first (see ScrubConfig.nul_replacement). When
    ``sa`` is given, style, role and origin-offset annotations consistent
    with the final buffer are appended to it. Runs opened by the last
    style/role sequence are left open (``end is None``), meaning they
    extend to the end of the line.

    Args:
        buf: Line buffer, modified in place
        sa: Optional attribute list to append annotations to

    Returns:
        ScrubOutcome. On failure ``outcome.error`` is set, the failure is
        logged, and the buffer is left partially scrubbed.

    Complexity: O(n) matches where n = len(buf)
    """
    config = get_scrub_config()
    if 0 in buf:
        buf[:] = buf.replace(b"\x00", bytes((config.nul_replacement,)))

    state = _ScrubState()
    pos = 0
    while (match := _ANSI_RE.search(buf, pos)) is not None:
        if match.group("overstrike") is not None:
            error = _scrub_overstrike(buf, match, sa, state)
            if error is not None:
                logger.error("invalid UTF-8 at %d", error.offset)
                return ScrubOutcome(edits=state.edits, error=error)
        else:
            _scrub_csi(buf, match, sa, state, config)
        pos = _resume_point(buf, match.start())

    if sa is not None and state.edits:
        sa.append(
            StringAttr(
                LineRange(state.last_edit_end, len(buf)),
                AttrType.ORIGIN_OFFSET,
                state.origin_offset,
            )
        )

    return ScrubOutcome(edits=state.edits)


@dataclass(frozen=True, slots=True)
class ScrubbedLine:
    """A scrubbed line with its annotations.

    Attributes:
        data: Scrubbed bytes
        attrs: Annotations over ``data`` (empty when not requested)
        outcome: How the scrub went

    """

    data: bytes
    attrs: StringAttrs = field(default_factory=list)
    outcome: ScrubOutcome = field(default_factory=ScrubOutcome)

    @property
    def ok(self) -> bool:
        return self.outcome.ok

    @property
    def text(self) -> str:
        """Scrubbed text decoded as UTF-8 (invalid bytes replaced)."""
        return self.data.decode("utf-8", errors="replace")

    def origin_offset(self, offset: int) -> int:
        """Map a byte offset in ``data`` to the raw line."""
        return to_origin_offset(self.attrs, offset)


def scrub(line: str | bytes | bytearray, *, annotate: bool = True) -> ScrubbedLine:
    """Scrub a copy of ``line`` and return the result.

    Args:
        line: Raw line; str is encoded as UTF-8. The argument is not modified.
        annotate: Record annotations

    Returns:
        ScrubbedLine with the cleaned bytes, annotations and outcome.

    Example:
        >>> scrub("_\\bH_\\bi").text
        'Hi'
    """
    buf = bytearray(line.encode("utf-8") if isinstance(line, str) else line)
    sa: StringAttrs = []
    outcome = scrub_ansi_string(buf, sa if annotate else None)
    return ScrubbedLine(bytes(buf), sa, outcome)


def strip_ansi(line: str | bytes | bytearray) -> str:
    """Return ``line`` with all escape sequences and overstrikes removed.

    Raises:
        ScrubError: If an overstrike run holds invalid UTF-8.

    Example:
        >>> strip_ansi("\\x1b[31mred\\x1b[0m")
        'red'
    """
    result = scrub(line, annotate=False)
    result.outcome.raise_for_error()
    return result.text


__all__ = [
    "ScrubOutcome",
    "ScrubbedLine",
    "scrub",
    "scrub_ansi_string",
    "strip_ansi",
]

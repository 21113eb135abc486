"""Token-based highlighting for scanned lines.

Turns scanner output into ROLE annotations through rules keyed by token
name ("num", "ipv4", "quot", ...), the same names token_name() reports.
Consumers usually load these rules from config and merge the resulting
attributes with the ones the scrubber produced.

Usage:
    from linescan.attrs import Role
    from linescan.highlighting import TokenHighlighter

    highlighter = TokenHighlighter({"num": Role.NUMBER, "quot": Role.STRING})
    attrs = highlighter.highlight('count=42 name="x"')

Protocol:
    Anything with a ``highlight(text, sa=None) -> StringAttrs`` method can
    stand in for TokenHighlighter (see the Highlighter protocol).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol

from linescan.attrs import AttrType, Role, StringAttr, StringAttrs
from linescan.errors import HighlightRuleError
from linescan.ranges import LineRange
from linescan.scanner import MATCHER_NAMES, scan
from linescan.tokens import TokenSpan


class Highlighter(Protocol):
    """Protocol for line highlighters.

    Thread Safety:
        Implementations must be safe to call concurrently on different
        lines; highlight() must not mutate shared state.
    """

    def highlight(self, text: str | bytes, sa: StringAttrs | None = None) -> StringAttrs:
        """Append role annotations for ``text`` to ``sa`` and return it.

        Contract:
            - MUST return the list it appended to (a new one if ``sa`` is None)
            - MUST only append closed ranges within the text
        """
        ...


class TokenHighlighter:
    """Assigns roles to scanned tokens by token name.

    Adjacent tokens that map to the same role are merged into one range.

    Thread Safety:
        Rules are copied at construction and never modified. Safe to share
        between threads.

    """

    __slots__ = ("_rules",)

    def __init__(self, rules: Mapping[str, Role]) -> None:
        """Initialize highlighter with name -> role rules.

        Args:
            rules: Mapping from terminal token name to display role

        Raises:
            HighlightRuleError: If a name is not a scanner token name or a
                role is a sentinel.
        """
        checked: dict[str, Role] = {}
        for name, role in rules.items():
            if name not in MATCHER_NAMES:
                raise HighlightRuleError(name, "not a scanner token name")
            try:
                code = int(role)
            except (TypeError, ValueError) as e:
                raise HighlightRuleError(name, f"invalid role {role!r}") from e
            checked_role = Role.from_code(code)
            if checked_role is None:
                raise HighlightRuleError(name, f"invalid role {role!r}")
            checked[name] = checked_role
        self._rules = checked

    @property
    def rules(self) -> Mapping[str, Role]:
        return dict(self._rules)

    def role_for(self, span: TokenSpan) -> Role | None:
        """Role assigned to a token, if any rule matches its name."""
        return self._rules.get(span.name)

    def highlight(self, text: str | bytes, sa: StringAttrs | None = None) -> StringAttrs:
        """Scan ``text`` and append a ROLE range for each highlighted run.

        Args:
            text: Line to highlight (usually already scrubbed)
            sa: Attribute list to append to; a new list when None

        Returns:
            The attribute list.
        """
        if sa is None:
            sa = []

        current: StringAttr | None = None
        for span in scan(text):
            role = self.role_for(span)
            if role is None:
                current = None
                continue
            if current is not None and current.value is role and current.range.end == span.start:
                current.range.end = span.end
                continue
            current = StringAttr(LineRange(span.start, span.end), AttrType.ROLE, role)
            sa.append(current)
        return sa


__all__ = ["Highlighter", "TokenHighlighter"]

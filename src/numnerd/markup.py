# -----------------------------------------------------------------------------
#  markup.py
#  The small markup language analyzers write facts in, and its renderers.
# -----------------------------------------------------------------------------
"""
Fact text is plain text with three kinds of escapes:

    \\x        the character x, never interpreted
    (^...)    superscript; may contain any other markup, nested to any depth
    (#123)    link to the page of the number 123

Every other parenthesis is literal but balanced: inside a directive, a ``)``
closes the directive only when all parentheses opened after it are closed.
``(#`` followed by anything but digits and ``)`` is not a link; it is
emitted as ordinary text (the ``(`` counting as an open parenthesis) and
parsing carries on at the first unexpected character.

The parser only talks to an Emitter. HtmlEmitter escapes every text
character and builds tags from fixed strings, so whatever an analyzer writes,
no markup of its own can reach the page.
"""

from __future__ import annotations

from typing import Protocol
from urllib.parse import quote

from colorama import Style

from numnerd.utility import strip_ansi

ESCAPE = "\\"
OPEN = "("
CLOSE = ")"
SUPERSCRIPT = "^"
LINK = "#"

_HTML_ESCAPES = str.maketrans({
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#39;",
})


def escape_html(s: str) -> str:
    return s.translate(_HTML_ESCAPES)


class Emitter(Protocol):
    def text(self, s: str) -> None: ...
    def begin_superscript(self) -> None: ...
    def end_superscript(self) -> None: ...
    def link(self, digits: str) -> None: ...
    def getvalue(self) -> str: ...


class HtmlEmitter:
    def __init__(self) -> None:
        self._out: list[str] = []

    def text(self, s: str) -> None:
        self._out.append(escape_html(s))

    def begin_superscript(self) -> None:
        self._out.append("<sup>")

    def end_superscript(self) -> None:
        self._out.append("</sup>")

    def link(self, digits: str) -> None:
        self._out.append('<a href="/')
        self._out.append(escape_html(quote(digits, safe="")))
        self._out.append('">')
        self._out.append(escape_html(digits))
        self._out.append("</a>")

    def getvalue(self) -> str:
        return "".join(self._out)


class TerminalEmitter:
    """
    Plain-text rendering for the CLI: 2(^10) → 2^10, 2(^31-1) → 2^(31-1),
    links highlighted (or left bare when color=False).
    """

    def __init__(self, color: bool = True) -> None:
        self.color = color
        self._stack: list[list[str]] = [[]]

    def text(self, s: str) -> None:
        self._stack[-1].append(s)

    def begin_superscript(self) -> None:
        self._stack.append([])

    def end_superscript(self) -> None:
        inner = "".join(self._stack.pop())
        self._stack[-1].append(f"^{inner}" if len(strip_ansi(inner)) == 1 else f"^({inner})")

    def link(self, digits: str) -> None:
        if self.color:
            self._stack[-1].append(f"{Style.BRIGHT}{digits}{Style.RESET_ALL}")
        else:
            self._stack[-1].append(digits)

    def getvalue(self) -> str:
        while len(self._stack) > 1:   # unterminated superscript: close it
            self.end_superscript()
        return "".join(self._stack[0])


class _Cursor:
    __slots__ = ("s", "i")

    def __init__(self, s: str) -> None:
        self.s = s
        self.i = 0

    def peek(self) -> str | None:
        return self.s[self.i] if self.i < len(self.s) else None

    def next(self) -> str | None:
        c = self.peek()
        if c is not None:
            self.i += 1
        return c


def _parse_link(cur: _Cursor, out: Emitter) -> bool:
    """
    Called with the cursor just past "(#". Emits a link and returns True if a
    digit run closed by ")" follows. Otherwise emits "(#<digits>" as text,
    leaves the cursor on the unexpected character and returns False.
    """
    start = cur.i
    while (c := cur.peek()) is not None and "0" <= c <= "9":
        cur.i += 1
    digits = cur.s[start:cur.i]

    if digits and cur.peek() == CLOSE:
        cur.i += 1
        out.link(digits)
        return True

    out.text(OPEN + LINK + digits)
    return False


def render_with(text: str, out: Emitter) -> str:
    """
    Drive `out` through the markup in text. `depths` counts the parentheses
    open in each scope: the top level first, then one entry per superscript
    still open.
    """
    cur = _Cursor(str(text))
    depths = [0]
    while (c := cur.next()) is not None:
        if c == ESCAPE:
            d = cur.next()
            if d is not None:       # a trailing lone backslash is dropped
                out.text(d)
        elif c == OPEN and cur.peek() == SUPERSCRIPT:
            cur.next()
            out.begin_superscript()
            depths.append(0)
        elif c == OPEN and cur.peek() == LINK:
            cur.next()
            if not _parse_link(cur, out):
                depths[-1] += 1
        elif c == OPEN:
            depths[-1] += 1
            out.text(c)
        elif c == CLOSE:
            if depths[-1]:
                depths[-1] -= 1
                out.text(c)
            elif len(depths) > 1:
                depths.pop()
                out.end_superscript()
            else:
                out.text(c)         # stray top-level ")" is just a character
        else:
            out.text(c)

    for _ in depths[1:]:            # unterminated superscripts end with the input
        out.end_superscript()
    return out.getvalue()


def render(text: str) -> str:
    """Render fact markup to safe HTML."""
    return render_with(text, HtmlEmitter())


def render_text(text: str, color: bool = True) -> str:
    """Render fact markup for a terminal."""
    return render_with(text, TerminalEmitter(color=color))


def escape_markup(s: str) -> str:
    """Quote arbitrary text so the renderer shows it verbatim."""
    return "".join(ESCAPE + c if c in (ESCAPE, OPEN, CLOSE) else c for c in s)

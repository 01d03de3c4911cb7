"""``.env`` source parser.

Turns the text of one ``.env`` file into a flat ``{name: value}`` mapping::

    # comment
    export HOST=localhost       # inline comment
    GREETING='literal $HOME'
    URL="http://${HOST}:8000\\n"
    MOTD="spans
    two lines"

Double-quoted values are interpolated against the *known* mapping (values
from earlier sources) overlaid with assignments made earlier in the same
text. Single-quoted values are taken literally.
"""

from __future__ import annotations

import logging
import re
from typing import Mapping

from ._types import ParseError

logger = logging.getLogger(__name__)

_KEY = r"[A-Za-z_][A-Za-z0-9_]*"

_ASSIGNMENT = re.compile(rf"^\s*(?:export\s+)?(?P<key>{_KEY})\s*=[ \t]*")
_KEY_ONLY = re.compile(_KEY)
_INLINE_COMMENT = re.compile(r"(?:^|\s)#.*$")
_REFERENCE = re.compile(rf"\$(?:\{{(?P<braced>{_KEY})\}}|(?P<bare>{_KEY}))")

_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    '"': '"',
    "\\": "\\",
    "$": "$",
}

# Reverse of ``_ESCAPES`` for ``dumps``.
_DUMP_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "$": "\\$",
    "\n": "\\n",
    "\t": "\\t",
    "\r": "\\r",
}


# ---------------------------------------------------------------------------
# Quoted values
# ---------------------------------------------------------------------------


def _find_closing(buffer: str, quote: str, start: int) -> int:
    """Return the index of the closing *quote* in *buffer*, or ``-1``.

    Inside double quotes a backslash escapes the following character.
    """
    pos = start
    while pos < len(buffer):
        char = buffer[pos]
        if char == "\\" and quote == '"':
            pos += 2
            continue
        if char == quote:
            return pos
        pos += 1
    return -1


def _read_quoted(
    first: str,
    quote: str,
    lines: list[str],
    index: int,
    *,
    opened_at: int,
    source: str | None,
) -> tuple[str, str, int]:
    """Consume a quoted value that may continue over following lines.

    *first* is the text of the current line after the opening quote and
    *index* the position of the next unread line. Returns the raw body, the
    text after the closing quote, and the updated line index.
    """
    buffer = first
    scanned = 0
    while True:
        closing = _find_closing(buffer, quote, scanned)
        if closing >= 0:
            return buffer[:closing], buffer[closing + 1 :], index
        if index >= len(lines):
            raise ParseError(f"unterminated {quote} quote", source=source, line=opened_at)
        # Resume scanning on the freshly appended line; a trailing backslash
        # on the previous line escapes the newline itself.
        scanned = len(buffer)
        if buffer.endswith("\\") and quote == '"' and _trailing_backslashes(buffer) % 2:
            scanned -= 1
        buffer = f"{buffer}\n{lines[index]}"
        index += 1


def _trailing_backslashes(text: str) -> int:
    return len(text) - len(text.rstrip("\\"))


def _expand(raw: str, scope: Mapping[str, str]) -> str:
    """Apply escape sequences and ``$NAME`` / ``${NAME}`` interpolation."""
    out: list[str] = []
    pos = 0
    while pos < len(raw):
        char = raw[pos]
        if char == "\\" and pos + 1 < len(raw):
            following = raw[pos + 1]
            out.append(_ESCAPES.get(following, char + following))
            pos += 2
            continue
        if char == "$":
            match = _REFERENCE.match(raw, pos)
            if match is not None:
                name = match.group("braced") or match.group("bare")
                out.append(scope.get(name, ""))
                pos = match.end()
                continue
        out.append(char)
        pos += 1
    return "".join(out)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse(
    text: str,
    known: Mapping[str, str] | None = None,
    *,
    strict: bool = False,
    source: str | None = None,
) -> dict[str, str]:
    """Parse ``.env`` *text* into a ``{name: value}`` dict.

    Parameters
    ----------
    text:
        File content.
    known:
        Variables resolved by earlier sources, visible to interpolation in
        double-quoted values. Never modified.
    strict:
        Raise ``ParseError`` on lines that are neither blank, a comment nor
        an assignment, instead of skipping them.
    source:
        Name used in error and log messages (usually the file path).
    """
    known = known or {}
    lines = text.replace("\r\n", "\n").split("\n")
    parsed: dict[str, str] = {}
    index = 0

    while index < len(lines):
        line = lines[index]
        lineno = index + 1
        index += 1

        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        match = _ASSIGNMENT.match(line)
        if match is None:
            _malformed("not an assignment", source, lineno, strict)
            continue

        key = match.group("key")
        rest = line[match.end() :]

        if rest[:1] in ("'", '"'):
            quote = rest[0]
            body, tail, index = _read_quoted(
                rest[1:], quote, lines, index, opened_at=lineno, source=source
            )
            tail = tail.strip()
            if tail and not tail.startswith("#"):
                _malformed(f"unexpected text after closing quote: {tail!r}", source, lineno, strict)
                continue
            if quote == '"':
                value = _expand(body, {**known, **parsed})
            else:
                value = body
        else:
            value = _INLINE_COMMENT.sub("", rest, count=1).strip()

        parsed[key] = value

    return parsed


def _malformed(reason: str, source: str | None, lineno: int, strict: bool) -> None:
    if strict:
        raise ParseError(reason, source=source, line=lineno)
    logger.debug("Skipping malformed line %s:%d (%s)", source or "<string>", lineno, reason)


def dumps(variables: Mapping[str, str]) -> str:
    """Serialize *variables* to ``.env`` syntax that ``parse`` reads back exactly.

    Every value is double-quoted with special characters escaped.
    """
    lines = []
    for key, value in variables.items():
        if not _KEY_ONLY.fullmatch(key):
            raise ValueError(f"{key!r} is not a valid environment variable name")
        escaped = "".join(_DUMP_ESCAPES.get(char, char) for char in value)
        lines.append(f'{key}="{escaped}"')
    return "".join(f"{line}\n" for line in lines)

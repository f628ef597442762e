"""
viewforge.postprocess - Markdown Post-Processor
===============================================

Markdown output may carry two micro-syntaxes the markdown converter leaves
untouched:

    include{{ path/to/file }}     replaced by the compiled file
    {{ this.dotted.path }}        replaced by a value from views.toml

Both are found by a single-pass lexer (:func:`tokenize`) that yields
non-overlapping tokens, which each rewrite pass then splices into the text
from left to right.

Ordering
--------
Includes are resolved before variables. Included content may itself carry
``{{ this.* }}`` markers meant for the outer document, so variable
substitution always runs over the already-inlined text.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from viewforge import console


SELF_PREFIX = "this."

_MARKER = re.compile(
    r"(?P<include>include\{\{\s*(?P<path>[/\w.\-]+)\s*\}\})"
    r"|(?P<variable>\{\{\s*(?P<name>[\w.\-]+)\s*\}\})"
)

_MISSING = object()


class TokenKind(str, Enum):
    INCLUDE = "include"
    VARIABLE = "variable"


@dataclass(frozen=True)
class Token:
    """A marker found in the text, with its span and payload."""

    kind: TokenKind
    start: int
    end: int
    payload: str


def tokenize(text: str) -> list[Token]:
    """
    Find every include and variable marker in ``text``.

    Parameters
    ----------
    text : str
        Converted markdown (HTML).

    Returns
    -------
    list[Token]
        Markers in order of appearance. ``include{{ x }}`` is a single
        include token, never an include plus a variable.

    Examples
    --------
    >>> [t.kind.value for t in tokenize("include{{ a }} {{ this.b }}")]
    ['include', 'variable']
    """
    tokens: list[Token] = []
    for match in _MARKER.finditer(text):
        if match.group("include"):
            kind, payload = TokenKind.INCLUDE, match.group("path")
        else:
            kind, payload = TokenKind.VARIABLE, match.group("name")
        tokens.append(Token(kind, match.start(), match.end(), payload))
    return tokens


def _splice(text: str, tokens: list[Token], replace: Callable[[Token], str | None]) -> str:
    """Rebuild ``text`` with each token swapped for ``replace(token)``.

    A ``None`` replacement keeps the original marker text.
    """
    out: list[str] = []
    cursor = 0
    for token in tokens:
        replacement = replace(token)
        if replacement is None:
            continue
        out.append(text[cursor:token.start])
        out.append(replacement)
        cursor = token.end
    out.append(text[cursor:])
    return "".join(out)


def lookup(data: Mapping[str, Any], dotted: str) -> Any:
    """Walk ``data`` one dotted segment at a time; ``_MISSING`` if absent."""
    value: Any = data
    for segment in dotted.split("."):
        if isinstance(value, Mapping) and segment in value:
            value = value[segment]
        elif isinstance(value, (list, tuple)) and segment.isdigit() and int(segment) < len(value):
            value = value[int(segment)]
        else:
            return _MISSING
    return value


def rewrite_includes(text: str, resolve: Callable[[str], str]) -> str:
    """
    Replace every ``include{{ path }}`` with ``resolve(path)``.

    Each occurrence is resolved separately, so a file included twice is
    compiled twice.
    """
    tokens = [t for t in tokenize(text) if t.kind is TokenKind.INCLUDE]
    if not tokens:
        return text
    return _splice(text, tokens, lambda token: resolve(token.payload))


def substitute_variables(text: str, data: Mapping[str, Any]) -> str:
    """
    Replace ``{{ this.dotted.path }}`` markers with values from ``data``.

    Markers without the ``this.`` prefix belong to someone else and are
    left alone. A path that does not resolve leaves its marker in place.
    """

    def replace(token: Token) -> str | None:
        if not token.payload.startswith(SELF_PREFIX):
            return None
        value = lookup(data, token.payload[len(SELF_PREFIX):])
        if value is _MISSING:
            console.notify(f"Markdown: no value for {{{{ {token.payload} }}}}, left as is.")
            return None
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)

    tokens = [t for t in tokenize(text) if t.kind is TokenKind.VARIABLE]
    if not tokens:
        return text
    return _splice(text, tokens, replace)


def render_markdown_markers(
    text: str,
    resolve: Callable[[str], str],
    data: Mapping[str, Any],
) -> str:
    """Resolve includes, then substitute variables over the result."""
    return substitute_variables(rewrite_includes(text, resolve), data)

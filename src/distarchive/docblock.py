"""
Docblock scanning for version discovery.

Source code is split into whitespace, documentation-comment and other tokens
by a small lexical scanner that knows enough PHP to skip strings, plain
comments and inline HTML. Each ``/** ... */`` block is then parsed into tags.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Callable, Dict, List, NamedTuple, Optional, Sequence, Tuple


class TokenKind(Enum):
    WHITESPACE = "whitespace"
    DOC_COMMENT = "doc_comment"
    OTHER = "other"


class Token(NamedTuple):
    kind: TokenKind
    text: str


# Lexer
_OPEN_TAG = re.compile(r"<\?php|<\?=|<\?")
_WHITESPACE = re.compile(r"\s+")
_PLAIN = re.compile(r"[^\s/#'\"`<?]+")
_STRINGS = {
    "'": re.compile(r"'(?:[^'\\]|\\.)*'?", re.DOTALL),
    '"': re.compile(r'"(?:[^"\\]|\\.)*"?', re.DOTALL),
    "`": re.compile(r"`(?:[^`\\]|\\.)*`?", re.DOTALL),
}
_HEREDOC_START = re.compile(r"<<<[ \t]*(['\"]?)([A-Za-z_][A-Za-z0-9_]*)\1\r?\n")


def _line_comment_end(code: str, pos: int) -> int:
    # A line comment stops at the newline or at a closing tag, whichever is first.
    newline = code.find("\n", pos)
    stop = len(code) if newline == -1 else newline
    close = code.find("?>", pos, stop)
    return stop if close == -1 else close


def _block_comment_end(code: str, pos: int) -> int:
    close = code.find("*/", pos + 2)
    return len(code) if close == -1 else close + 2


def _heredoc_end(code: str, start: "re.Match[str]") -> int:
    # The closing label sits on its own line, optionally indented.
    label = re.escape(start.group(2))
    close = re.compile(rf"^[ \t]*{label}\b", re.MULTILINE).search(code, start.end())
    return len(code) if close is None else close.end()


def tokenize(code: str) -> List[Token]:
    """Split *code* into :class:`Token` objects.

    Text outside ``<?php ... ?>`` is a single ``OTHER`` token. Quoted,
    backtick, heredoc and nowdoc strings are single ``OTHER`` tokens, so
    comment markers inside them are not scanned. A docblock left open at the
    end of *code* (e.g. by a truncated read) runs to the end of the text and is
    still reported as ``DOC_COMMENT``.
    """
    tokens: List[Token] = []
    pos = 0
    length = len(code)
    in_php = False

    while pos < length:
        if not in_php:
            m = _OPEN_TAG.search(code, pos)
            if m is None:
                tokens.append(Token(TokenKind.OTHER, code[pos:]))
                break
            if m.start() > pos:
                tokens.append(Token(TokenKind.OTHER, code[pos : m.start()]))
            tokens.append(Token(TokenKind.OTHER, m.group()))
            pos = m.end()
            in_php = True
            continue

        kind = TokenKind.OTHER
        ch = code[pos]
        if ch.isspace():
            end = _WHITESPACE.match(code, pos).end()  # type: ignore[union-attr]
            kind = TokenKind.WHITESPACE
        elif code.startswith("?>", pos):
            end = pos + 2
            in_php = False
        elif code.startswith("/**/", pos):
            end = pos + 4
        elif code.startswith("/*", pos):
            end = _block_comment_end(code, pos)
            # Only "/**" followed by whitespace opens a docblock; "/**x" and "/***" are plain comments.
            if code.startswith("/**", pos) and code[pos + 3 : pos + 4].isspace():
                kind = TokenKind.DOC_COMMENT
        elif code.startswith("//", pos) or (ch == "#" and not code.startswith("#[", pos)):
            end = _line_comment_end(code, pos)
        elif ch in _STRINGS:
            end = _STRINGS[ch].match(code, pos).end()  # type: ignore[union-attr]
        elif code.startswith("<<<", pos) and _HEREDOC_START.match(code, pos):
            end = _heredoc_end(code, _HEREDOC_START.match(code, pos))  # type: ignore[arg-type]
        else:
            m = _PLAIN.match(code, pos)
            end = m.end() if m else pos + 1

        tokens.append(Token(kind, code[pos:end]))
        pos = end

    return tokens


# Tag parsing
TagMatch = Optional[Tuple[str, str]]

_TAG_ANNOTATION = re.compile(r"@([a-zA-Z0-9\-_\\]+)\s*?(.*)")
_TAG_PROPERTY = re.compile(r"\s*\*?\s*(.*?):(.*)")
_DELIMITERS = re.compile(r"^\s*/\*+|\*+/\s*$")


def _match_annotation(line: str) -> TagMatch:
    m = _TAG_ANNOTATION.search(line)
    return (m.group(1), m.group(2)) if m else None


def _match_property(line: str) -> TagMatch:
    m = _TAG_PROPERTY.search(line)
    return (m.group(1), m.group(2)) if m else None


# Tried in order; the first strategy that matches a line wins.
TAG_MATCHERS: Sequence[Callable[[str], TagMatch]] = (_match_annotation, _match_property)


def parse_docblock(docblock: str) -> Dict[str, str]:
    """
    Parse one docblock into a ``{tag: value}`` mapping.

    Tags may be written as ``@version 1.2.3`` or ``Version: 1.2.3``, optionally
    preceded by the ``*`` decoration. Tag names are lower-cased and values
    stripped; when a tag repeats, the last line wins. Lines that look like
    neither form are prose and are ignored. The comment delimiters are removed
    first so one-line blocks such as ``/** @version 1.0 */`` parse cleanly.
    """
    tags: Dict[str, str] = {}
    for line in _DELIMITERS.sub("", docblock).splitlines():
        for matcher in TAG_MATCHERS:
            found = matcher(line)
            if found is not None:
                break
        else:
            continue
        name, value = found
        tags[name.lower()] = value.strip()
    return tags


def find_version_in_docblock(docblock: str) -> Optional[str]:
    return parse_docblock(docblock).get("version")


def find_version_in_code(code: str) -> Optional[str]:
    """Return the version tag of the first docblock in *code* that has one."""
    for token in tokenize(code):
        if token.kind is not TokenKind.DOC_COMMENT:
            continue
        version = find_version_in_docblock(token.text)
        if version is not None:
            return version
    return None

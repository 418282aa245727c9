"""Parse app config modules into structured AppConfig values.

An app config module is generated from a template and has exactly one shape:

    import { AppConfig } from "@mfe-frameworks/config";

    export default {
      basePath: "/billing",
      items: [
        { route: "/home", pageName: "Home", title: "Home" },
      ],
    } as AppConfig;

The module is never executed. Import statements, the ``export default``
prefix and the trailing ``as AppConfig`` cast are removed, and the remaining
object literal is read by a small recursive-descent parser that accepts:

* objects whose keys are one of ``basePath``, ``items``, ``route``,
  ``pageName`` or ``title``, bare or quoted;
* arrays;
* single- or double-quoted strings;
* trailing commas in objects and arrays.

Anything else, including keys outside that set, comments, numbers and
template literals, raises ConfigCoercionError. Error positions count lines
and columns from the start of the object literal.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from pydantic import ValidationError

from tenant_patcher.errors import ConfigCoercionError
from tenant_patcher.models import AppConfig

KNOWN_KEYS = frozenset({"basePath", "items", "route", "pageName", "title"})

_IMPORT_RE = re.compile(r"^[ \t]*import\s[^;\n]*;?[ \t]*$", re.MULTILINE)
_EXPORT_RE = re.compile(r"^export\s+default\s+")
_CAST_RE = re.compile(r"\s*(?:as|satisfies)\s+AppConfig\s*;?$")
_IDENT_RE = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")
_PUNCT = "{}[]:,"
_ESCAPES = {
    '"': '"',
    "'": "'",
    "\\": "\\",
    "/": "/",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "b": "\b",
    "f": "\f",
}


@dataclass(slots=True, frozen=True)
class Token:
    kind: str
    value: str
    line: int
    column: int


def strip_module_wrapper(text: str) -> str:
    body = _IMPORT_RE.sub("", text).strip()
    body = _EXPORT_RE.sub("", body)
    body = _CAST_RE.sub("", body)
    return body.rstrip().rstrip(";").rstrip()


def tokenize(text: str) -> list[Token]:
    tokens: list[Token] = []
    pos = 0
    line = 1
    line_start = 0
    length = len(text)
    while pos < length:
        ch = text[pos]
        column = pos - line_start + 1
        if ch == "\n":
            pos += 1
            line += 1
            line_start = pos
            continue
        if ch.isspace():
            pos += 1
            continue
        if ch in _PUNCT:
            tokens.append(Token("punct", ch, line, column))
            pos += 1
            continue
        if ch in "\"'":
            value, pos = _read_string(text, pos, line, column)
            tokens.append(Token("string", value, line, column))
            continue
        match = _IDENT_RE.match(text, pos)
        if match:
            tokens.append(Token("ident", match.group(0), line, column))
            pos = match.end()
            continue
        raise ConfigCoercionError(f"unexpected character {ch!r}", line=line, column=column)
    tokens.append(Token("eof", "", line, pos - line_start + 1))
    return tokens


def _read_string(text: str, start: int, line: int, column: int) -> tuple[str, int]:
    quote = text[start]
    chars: list[str] = []
    pos = start + 1
    while pos < len(text):
        ch = text[pos]
        if ch == quote:
            return "".join(chars), pos + 1
        if ch == "\n":
            break
        if ch == "\\":
            nxt = text[pos + 1 : pos + 2]
            if nxt == "u" and re.fullmatch(r"[0-9a-fA-F]{4}", text[pos + 2 : pos + 6]):
                chars.append(chr(int(text[pos + 2 : pos + 6], 16)))
                pos += 6
                continue
            if nxt not in _ESCAPES:
                raise ConfigCoercionError(
                    f"unsupported escape sequence \\{nxt}", line=line, column=column
                )
            chars.append(_ESCAPES[nxt])
            pos += 2
            continue
        chars.append(ch)
        pos += 1
    raise ConfigCoercionError("unterminated string", line=line, column=column)


class _Parser:
    def __init__(self, tokens: list[Token]) -> None:
        self.tokens = tokens
        self.index = 0

    def peek(self) -> Token:
        return self.tokens[self.index]

    def advance(self) -> Token:
        token = self.tokens[self.index]
        if token.kind != "eof":
            self.index += 1
        return token

    def fail(self, message: str, token: Token | None = None) -> ConfigCoercionError:
        token = token or self.peek()
        return ConfigCoercionError(message, line=token.line, column=token.column)

    def expect(self, value: str) -> Token:
        token = self.advance()
        if token.kind != "punct" or token.value != value:
            shown = token.value or "end of input"
            raise self.fail(f"expected {value!r} but found {shown!r}", token)
        return token

    def at(self, value: str) -> bool:
        token = self.peek()
        return token.kind == "punct" and token.value == value

    def parse_document(self) -> object:
        value = self.parse_value()
        token = self.peek()
        if token.kind != "eof":
            raise self.fail(f"unexpected trailing {token.value!r}", token)
        return value

    def parse_value(self) -> object:
        token = self.peek()
        if token.kind == "string":
            self.advance()
            return token.value
        if self.at("{"):
            return self.parse_object()
        if self.at("["):
            return self.parse_array()
        shown = token.value or "end of input"
        raise self.fail(f"unexpected {shown!r}", token)

    def parse_object(self) -> dict[str, object]:
        self.expect("{")
        result: dict[str, object] = {}
        while not self.at("}"):
            key_token = self.advance()
            if key_token.kind not in {"ident", "string"}:
                shown = key_token.value or "end of input"
                raise self.fail(f"expected a key but found {shown!r}", key_token)
            if key_token.value not in KNOWN_KEYS:
                raise self.fail(f"unknown key {key_token.value!r}", key_token)
            if key_token.value in result:
                raise self.fail(f"duplicate key {key_token.value!r}", key_token)
            self.expect(":")
            result[key_token.value] = self.parse_value()
            if not self.at("}"):
                self.expect(",")
        self.expect("}")
        return result

    def parse_array(self) -> list[object]:
        self.expect("[")
        result: list[object] = []
        while not self.at("]"):
            result.append(self.parse_value())
            if not self.at("]"):
                self.expect(",")
        self.expect("]")
        return result


def parse_literal(text: str) -> object:
    """Parse the object literal left once the module wrapper is stripped."""
    return _Parser(tokenize(text)).parse_document()


def coerce(raw_module_text: str) -> AppConfig:
    data = parse_literal(strip_module_wrapper(raw_module_text))
    if not isinstance(data, dict):
        raise ConfigCoercionError("app config must be an object literal")
    try:
        return AppConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigCoercionError(f"invalid app config: {exc}") from exc

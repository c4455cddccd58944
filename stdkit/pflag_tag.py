"""Parsing of struct-field flag tags and small naming helpers for flag generation."""

from __future__ import annotations

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

TAG_NAME = "pflag"
JSON_TAG_NAME = "json"

_SIMPLE_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
    '"': '"',
}
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_OCT_DIGITS = frozenset("01234567")


class TagParseError(ValueError):
    """Raised when a tag string is not well formed."""


@dataclass(frozen=True)
class Tag:
    """A parsed field tag.

    ``name`` comes from the json key, ``default_value`` from the first element of
    the pflag key and ``usage`` is the remaining pflag elements, quoted.
    """

    name: str = ""
    default_value: str = ""
    usage: str = '""'


@dataclass(frozen=True)
class _KeyValue:
    key: str
    name: str
    options: tuple[str, ...]


def _unquote(quoted: str) -> str:
    """Interpret a double-quoted string literal with backslash escapes."""
    body = quoted[1:-1]
    out = bytearray()
    i = 0
    while i < len(body):
        char = body[i]
        if char in ('"', "\n"):
            raise TagParseError("bad syntax for struct tag value")
        if char != "\\":
            out += char.encode("utf-8")
            i += 1
            continue
        i += 1
        if i >= len(body):
            raise TagParseError("bad syntax for struct tag value")
        escape = body[i]
        if escape in _SIMPLE_ESCAPES:
            out += _SIMPLE_ESCAPES[escape].encode("utf-8")
            i += 1
        elif escape == "x":
            digits = body[i + 1 : i + 3]
            if len(digits) != 2 or not set(digits) <= _HEX_DIGITS:
                raise TagParseError("bad syntax for struct tag value")
            out.append(int(digits, 16))
            i += 3
        elif escape in _OCT_DIGITS:
            digits = body[i : i + 3]
            if len(digits) != 3 or not set(digits) <= _OCT_DIGITS or int(digits, 8) > 0xFF:
                raise TagParseError("bad syntax for struct tag value")
            out.append(int(digits, 8))
            i += 3
        elif escape in ("u", "U"):
            width = 4 if escape == "u" else 8
            digits = body[i + 1 : i + 1 + width]
            if len(digits) != width or not set(digits) <= _HEX_DIGITS:
                raise TagParseError("bad syntax for struct tag value")
            code = int(digits, 16)
            if code > 0x10FFFF or 0xD800 <= code <= 0xDFFF:
                raise TagParseError("bad syntax for struct tag value")
            out += chr(code).encode("utf-8")
            i += 1 + width
        else:
            raise TagParseError("bad syntax for struct tag value")
    return out.decode("utf-8", errors="replace")


def _split_tag(tag: str) -> list[_KeyValue]:
    """Split a raw tag into its ``key:"value"`` entries, in order."""
    entries: list[_KeyValue] = []
    rest = tag
    while rest:
        rest = rest.lstrip(" ")
        if not rest:
            break

        i = 0
        while i < len(rest) and rest[i] > " " and rest[i] not in ':"\x7f':
            i += 1
        if i == 0:
            raise TagParseError("bad syntax for struct tag key")
        if i + 1 >= len(rest) or rest[i] != ":":
            raise TagParseError("bad syntax for struct tag pair")
        if rest[i + 1] != '"':
            raise TagParseError("bad syntax for struct tag value")

        key = rest[:i]
        rest = rest[i + 1 :]

        i = 1
        while i < len(rest) and rest[i] != '"':
            if rest[i] == "\\":
                i += 1
            i += 1
        if i >= len(rest):
            raise TagParseError("bad syntax for struct tag value")

        value = _unquote(rest[: i + 1])
        rest = rest[i + 1 :]

        name, *options = value.split(",")
        entries.append(_KeyValue(key, name, tuple(options)))
    return entries


def _query_unescape(text: str) -> str:
    """Decode ``%XX`` escapes and ``+`` as in a URL query component."""
    raw = text.encode("utf-8")
    out = bytearray()
    i = 0
    while i < len(raw):
        byte = raw[i]
        if byte == ord("%"):
            digits = raw[i + 1 : i + 3].decode("ascii", errors="replace")
            if len(digits) != 2 or not set(digits) <= _HEX_DIGITS:
                raise ValueError(f"invalid URL escape {raw[i:i + 3].decode('utf-8', 'replace')!r}")
            out.append(int(digits, 16))
            i += 3
        elif byte == ord("+"):
            out.append(ord(" "))
            i += 1
        else:
            out.append(byte)
            i += 1
    return out.decode("utf-8", errors="replace")


def parse_tag(tag: str) -> Tag:
    """Parse a field tag such as ``json:"name" pflag:"2,this is a useful param"``.

    Raises TagParseError when the tag is malformed.
    """
    entries = _split_tag(tag)
    json_entry = next((e for e in entries if e.key == JSON_TAG_NAME), None)
    pflag_entry = next((e for e in entries if e.key == TAG_NAME), None)

    name = json_entry.name if json_entry is not None else ""
    if pflag_entry is None:
        return Tag(name=name, default_value="", usage='""')

    try:
        default_value = _query_unescape(pflag_entry.name)
    except ValueError as err:
        logger.warning(
            "Failed to unescape tag name [%s], will use value as is. Error: %s",
            pflag_entry.name,
            err,
        )
        default_value = pflag_entry.name

    usage = ", ".join(pflag_entry.options) or '""'
    if not usage.startswith('"'):
        usage = f'"{usage}"'

    return Tag(name=name, default_value=default_value, usage=usage)


def capitalize(s: str) -> str:
    """Upper-case the first character if it is an ASCII lower-case letter."""
    if s and "a" <= s[0] <= "z":
        return s[0].upper() + s[1:]
    return s


def camel_case(s: str) -> str:
    """Upper-case the first character if it is a lower-case letter."""
    if s and s[0].islower():
        return s[0].upper() + s[1:]
    return s


def append_accessors(*args: str) -> str:
    """Join field accessors with dots, skipping empty parts.

    ``append_accessors("var1", "field1", "subField")`` gives ``"var1.field1.subField"``.
    A single accessor is returned unchanged.
    """
    if not args:
        return ""
    if len(args) == 1:
        return args[0]
    return ".".join(part for part in args if part)
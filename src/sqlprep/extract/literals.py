"""Go literal decoding and exact-value rendering.

String constant values are kept as ``bytes`` because Go strings are byte
sequences: ``"\\xff"`` is a valid one-byte string that is not valid UTF-8.
Rendering follows ``strconv.Quote``, which is how the Go toolchain prints the
exact value of a string constant.
"""

from __future__ import annotations

_SIMPLE_ESCAPES = {
    "a": 0x07,
    "b": 0x08,
    "f": 0x0C,
    "n": 0x0A,
    "r": 0x0D,
    "t": 0x09,
    "v": 0x0B,
    "\\": 0x5C,
}

_QUOTE_ESCAPES = {
    0x07: "\\a",
    0x08: "\\b",
    0x0C: "\\f",
    0x0A: "\\n",
    0x0D: "\\r",
    0x09: "\\t",
    0x0B: "\\v",
}

_MAX_RUNE = 0x10FFFF
_SURROGATE_MIN = 0xD800
_SURROGATE_MAX = 0xDFFF
# Lone surrogates produced by errors="surrogateescape" for undecodable bytes
_ESCAPED_BYTE_MIN = 0xDC80
_ESCAPED_BYTE_MAX = 0xDCFF


class LiteralError(ValueError):
    """Malformed Go literal text."""


def _decode_escapes(body: str, quote: str) -> tuple[bytes, list[int]]:
    """Decode escape sequences of an interpreted literal body.

    Returns the byte value and, for rune literals, the list of decoded
    code points (``\\x`` and octal escapes contribute their byte value).
    """
    out = bytearray()
    runes: list[int] = []
    i = 0
    n = len(body)
    while i < n:
        ch = body[i]
        if ch != "\\":
            encoded = ch.encode("utf-8", errors="surrogateescape")
            out += encoded
            runes.append(ord(ch))
            i += 1
            continue

        if i + 1 >= n:
            raise LiteralError("trailing backslash")
        esc = body[i + 1]
        if esc in _SIMPLE_ESCAPES:
            out.append(_SIMPLE_ESCAPES[esc])
            runes.append(_SIMPLE_ESCAPES[esc])
            i += 2
        elif esc == quote:
            out += quote.encode()
            runes.append(ord(quote))
            i += 2
        elif esc == "x":
            value = _parse_digits(body, i + 2, 2, 16)
            out.append(value)
            runes.append(value)
            i += 4
        elif esc in "01234567":
            value = _parse_digits(body, i + 1, 3, 8)
            if value > 0xFF:
                raise LiteralError(f"octal escape value {value} > 255")
            out.append(value)
            runes.append(value)
            i += 4
        elif esc in "uU":
            width = 4 if esc == "u" else 8
            value = _parse_digits(body, i + 2, width, 16)
            if value > _MAX_RUNE or _SURROGATE_MIN <= value <= _SURROGATE_MAX:
                raise LiteralError(f"escape sequence is invalid Unicode code point {value:#x}")
            out += chr(value).encode("utf-8")
            runes.append(value)
            i += 2 + width
        else:
            raise LiteralError(f"unknown escape sequence \\{esc}")
    return bytes(out), runes


def _parse_digits(body: str, start: int, width: int, base: int) -> int:
    digits = body[start : start + width]
    if len(digits) != width:
        raise LiteralError("truncated escape sequence")
    try:
        return int(digits, base)
    except ValueError as err:
        raise LiteralError(f"invalid escape digits {digits!r}") from err


def unquote_string(text: str) -> bytes:
    """Decode an interpreted (``"..."``) or raw (`` `...` ``) string literal."""
    if len(text) >= 2 and text[0] == text[-1] == "`":
        # Carriage returns are discarded from raw string literals
        return text[1:-1].replace("\r", "").encode("utf-8", errors="surrogateescape")
    if len(text) >= 2 and text[0] == text[-1] == '"':
        value, _ = _decode_escapes(text[1:-1], '"')
        return value
    raise LiteralError(f"not a string literal: {text!r}")


def unquote_rune(text: str) -> int:
    """Decode a rune literal (``'a'``, ``'\\n'``, ``'\\u00e9'``) to its code point."""
    if len(text) < 3 or text[0] != "'" or text[-1] != "'":
        raise LiteralError(f"not a rune literal: {text!r}")
    _, runes = _decode_escapes(text[1:-1], "'")
    if len(runes) != 1:
        raise LiteralError(f"rune literal must hold exactly one character: {text!r}")
    return runes[0]


def parse_int(text: str) -> int:
    """Parse a Go integer literal (decimal, 0x, 0o, 0b, legacy octal, underscores)."""
    digits = text.replace("_", "")
    if len(digits) > 1 and digits[0] == "0" and digits[1].isdigit():
        return int(digits, 8)
    try:
        return int(digits, 0)
    except ValueError as err:
        raise LiteralError(f"invalid integer literal {text!r}") from err


def quote(value: bytes) -> str:
    """Render ``value`` as a Go double-quoted literal, like ``strconv.Quote``."""
    parts = ['"']
    for ch in value.decode("utf-8", errors="surrogateescape"):
        cp = ord(ch)
        if _ESCAPED_BYTE_MIN <= cp <= _ESCAPED_BYTE_MAX:
            parts.append(f"\\x{cp - 0xDC00:02x}")
        elif ch in ('"', "\\"):
            parts.append("\\" + ch)
        elif cp in _QUOTE_ESCAPES:
            parts.append(_QUOTE_ESCAPES[cp])
        elif ch == " " or ch.isprintable():
            parts.append(ch)
        elif cp < 0x20 or cp == 0x7F:
            parts.append(f"\\x{cp:02x}")
        elif cp < 0x10000:
            parts.append(f"\\u{cp:04x}")
        else:
            parts.append(f"\\U{cp:08x}")
    parts.append('"')
    return "".join(parts)


def rune_to_bytes(cp: int) -> bytes:
    """UTF-8 encoding of a code point; invalid code points become U+FFFD."""
    if cp < 0 or cp > _MAX_RUNE or _SURROGATE_MIN <= cp <= _SURROGATE_MAX:
        cp = 0xFFFD
    return chr(cp).encode("utf-8")

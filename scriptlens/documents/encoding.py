"""Byte-level encoding sniffing for plain-text screenplays."""

from dataclasses import dataclass

# Detected label -> Python codec used to decode it.
CODECS: dict[str, str] = {
    "utf8": "utf-8-sig",
    "utf16le": "utf-16-le",
    "utf16be": "utf-16-be",
    "ascii": "ascii",
    "windows1252": "cp1252",
    "binary": "latin-1",
}

_BINARY_CHARS = frozenset(chr(c) for c in (*range(0x00, 0x08), *range(0x0E, 0x20)))


@dataclass(frozen=True)
class EncodingGuess:
    encoding: str
    confidence: float


@dataclass(frozen=True)
class DecodedText:
    content: str
    encoding: str
    confidence: float


def detect_encoding(data: bytes) -> EncodingGuess:
    if data.startswith(b"\xef\xbb\xbf"):
        return EncodingGuess("utf8", 1.0)
    if data.startswith(b"\xff\xfe"):
        return EncodingGuess("utf16le", 1.0)
    if data.startswith(b"\xfe\xff"):
        return EncodingGuess("utf16be", 1.0)

    null_bytes = data.count(0)
    if null_bytes > len(data) * 0.1:
        if null_bytes % 2 == 0:
            return EncodingGuess("utf16le", 0.7)
        return EncodingGuess("binary", 0.3)

    if not any(byte > 127 for byte in data):
        return EncodingGuess("ascii", 0.9)

    as_utf8 = data.decode("utf-8", errors="replace")
    replacements = as_utf8.count("\ufffd")
    if replacements == 0:
        return EncodingGuess("utf8", 0.8)
    if replacements < len(as_utf8) * 0.01:
        return EncodingGuess("utf8", 0.6)

    if any(0x80 <= byte <= 0x9F or byte == 0xA0 for byte in data):
        return EncodingGuess("windows1252", 0.6)

    return EncodingGuess("utf8", 0.5)


def decode_text(data: bytes) -> DecodedText:
    """Decode bytes with the detected encoding, falling back to UTF-8."""
    guess = detect_encoding(data)
    codec = CODECS.get(guess.encoding)
    if codec is None:
        return DecodedText(data.decode("utf-8", errors="replace"), "utf8", 0.5)
    try:
        content = data.decode(codec, errors="strict" if guess.encoding == "ascii" else "replace")
    except (UnicodeDecodeError, LookupError):
        return DecodedText(data.decode("utf-8", errors="replace"), "utf8", 0.3)
    return DecodedText(content.removeprefix("\ufeff"), guess.encoding, guess.confidence)


def contains_binary_content(content: str) -> bool:
    """True when control characters exceed 1% of the text."""
    control_chars = sum(1 for char in content if char in _BINARY_CHARS)
    return control_chars > len(content) * 0.01

"""
Conversion between text and symbol bytes

Symbols are single bytes, so text maps onto them one character per byte.
Characters above U+00FF (including lone surrogates) are replaced with '?',
which is not a symbol of any alphabet and therefore fails decoding at the
right index.
"""


def chars_to_bytes(source: str, start: int, end: int) -> bytes:
    """Map source[start:end] to bytes, one byte per character"""
    return source[start:end].encode("latin-1", errors="replace")


def bytes_to_chars(source) -> str:
    """Map each byte to the character with the same code point"""
    return bytes(source).decode("latin-1")

"""
Base32 alphabets as defined by RFC 4648

Each alphabet carries the 32 symbols in canonical order and the inverse table
used for decoding. Both alphabets share the pad character '='.
"""

from typing import Tuple


# ASCII '='
PAD_SYMBOL = 61

# Decoding table markers
INVALID_SYMBOL = -1
PAD_VALUE = -2


class Alphabet:
    """An immutable 32-symbol encoding table together with its decoding table"""

    __slots__ = ("_name", "_encode_map", "_decode_map")

    def __init__(self, name: str, symbols: bytes):
        symbols = bytes(symbols)
        if len(symbols) != 32 or len(set(symbols)) != 32:
            raise ValueError("A Base32 alphabet must consist of 32 distinct symbols")
        if PAD_SYMBOL in symbols:
            raise ValueError("The pad character cannot be part of the alphabet")

        decode_map = [INVALID_SYMBOL] * 256
        decode_map[PAD_SYMBOL] = PAD_VALUE
        for value, symbol in enumerate(symbols):
            decode_map[symbol] = value

        self._name = name
        self._encode_map = symbols
        self._decode_map = tuple(decode_map)

    @property
    def name(self) -> str:
        return self._name

    @property
    def encode_map(self) -> bytes:
        """Symbol byte for each 5-bit value"""
        return self._encode_map

    @property
    def decode_map(self) -> Tuple[int, ...]:
        """5-bit value for each byte, INVALID_SYMBOL or PAD_VALUE"""
        return self._decode_map

    def __repr__(self) -> str:
        return f"Alphabet({self._name!r})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Alphabet):
            return False
        return self._encode_map == other._encode_map

    def __hash__(self) -> int:
        return hash(self._encode_map)


# RFC4648 section 6
STANDARD = Alphabet("base32", b"ABCDEFGHIJKLMNOPQRSTUVWXYZ234567")

# RFC4648 section 7, "extended hex"
EXTENDED_HEX = Alphabet("base32hex", b"0123456789ABCDEFGHIJKLMNOPQRSTUV")

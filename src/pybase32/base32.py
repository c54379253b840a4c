"""
Base32 encoding and decoding as defined by RFC 4648

A codec is an immutable pairing of an alphabet (standard or "extended hex")
and a padding option. Input is processed in groups of 5 bytes, each of which
becomes 8 symbols carrying 5 bits apiece, most significant bits first. A final
group of 1-4 bytes is left-aligned and zero-filled, producing 2, 4, 5 or 7
symbols, followed by 6, 4, 3 or 1 pad characters when padding is emitted.
"""

import sys
from typing import Optional, Union

from .alphabet import Alphabet, STANDARD, EXTENDED_HEX as EXTENDED_HEX_ALPHABET, PAD_SYMBOL, PAD_VALUE
from .charset import chars_to_bytes, bytes_to_chars
from .errors import OutOfRangeError, MalformedInputError, InvalidSymbolError
from .padding import PaddingOption


BITS_PER_BYTE = 8
BITS_PER_SYMBOL = 5
BYTES_PER_GROUP = 5
SYMBOLS_PER_GROUP = 8

# A single symbol does not carry enough bits for a byte
MIN_DECODE_SYMBOLS = 2

# Largest encoded length that can be represented
MAX_ENCODED_SIZE = sys.maxsize

# Number of data symbols in a final group that cannot come from a whole
# number of bytes
_INVALID_LAST_UNIT_SYMBOLS = (1, 3, 6)

Source = Union[bytes, bytearray, memoryview]


def check_source_bounds(size: int, start: int, end: int):
    """Check 0 <= start <= end <= size"""
    if start < 0 or end > size:
        raise OutOfRangeError(f"start: {start}, end: {end}, size: {size}")
    if start > end:
        raise OutOfRangeError(f"start: {start} > end: {end}")


def check_destination_bounds(size: int, offset: int, capacity_needed: int):
    """Check that capacity_needed bytes fit into the destination from offset onwards"""
    if offset < 0 or offset > size:
        raise OutOfRangeError(f"destination offset: {offset}, destination size: {size}")
    if offset + capacity_needed > size:
        raise OutOfRangeError(
            "The destination does not have enough capacity, "
            f"destination offset: {offset}, destination size: {size}, capacity needed: {capacity_needed}"
        )


class Base32:
    """
    Base32 codec for one alphabet and padding option

    Instances never change after construction. Use with_padding() to get a
    codec that handles padding differently.
    """

    __slots__ = ("_alphabet", "_padding_option")

    def __init__(self, alphabet: Alphabet, padding_option: PaddingOption = PaddingOption.PRESENT):
        self._alphabet = alphabet
        self._padding_option = padding_option

    @property
    def alphabet(self) -> Alphabet:
        return self._alphabet

    @property
    def padding_option(self) -> PaddingOption:
        return self._padding_option

    @property
    def is_extended_hex(self) -> bool:
        return self._alphabet == EXTENDED_HEX_ALPHABET

    def with_padding(self, option: PaddingOption) -> "Base32":
        """Return a codec with the same alphabet and the given padding option"""
        if option is self._padding_option:
            return self
        return Base32(self._alphabet, option)

    def __repr__(self) -> str:
        return f"Base32({self._alphabet.name}, {self._padding_option.name})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Base32):
            return False
        return self._alphabet == other._alphabet and self._padding_option is other._padding_option

    def __hash__(self) -> int:
        return hash((self._alphabet, self._padding_option))

    # Encoding

    def encode(self, source: Source, start: int = 0, end: Optional[int] = None) -> str:
        """
        Encode source[start:end] into a Base32 string

        Args:
            source: Bytes to encode
            start: Index of the first byte to encode
            end: Index after the last byte to encode, defaults to len(source)

        Returns:
            The encoded symbols
        """
        return bytes_to_chars(self.encode_to_bytes(source, start, end))

    def encode_to_bytes(self, source: Source, start: int = 0, end: Optional[int] = None) -> bytes:
        """Encode source[start:end] into Base32 symbol bytes"""
        if end is None:
            end = len(source)
        check_source_bounds(len(source), start, end)

        destination = bytearray(self.encode_size(end - start))
        self._encode_into(source, destination, 0, start, end)
        return bytes(destination)

    def encode_to_writer(self, source: Source, destination, start: int = 0, end: Optional[int] = None):
        """
        Encode source[start:end] and write the symbols to a text destination

        Args:
            source: Bytes to encode
            destination: Object with a write(str) method, such as io.StringIO
            start: Index of the first byte to encode
            end: Index after the last byte to encode, defaults to len(source)

        Returns:
            destination
        """
        destination.write(self.encode(source, start, end))
        return destination

    def encode_into(self, source: Source, destination: Union[bytearray, memoryview],
                    destination_offset: int = 0, start: int = 0, end: Optional[int] = None) -> int:
        """
        Encode source[start:end] into destination starting at destination_offset

        Returns:
            The number of symbols written

        Raises:
            OutOfRangeError: If the range is invalid or destination is too small
        """
        if end is None:
            end = len(source)
        check_source_bounds(len(source), start, end)
        check_destination_bounds(len(destination), destination_offset, self.encode_size(end - start))

        return self._encode_into(source, destination, destination_offset, start, end)

    def encode_size(self, source_size: int) -> int:
        """
        Number of symbols produced by encoding source_size bytes

        Raises:
            MalformedInputError: If source_size is negative or the result is too large
        """
        if source_size < 0:
            raise MalformedInputError(f"Input size must be non-negative, but was {source_size}")

        groups, trailing_bytes = divmod(source_size, BYTES_PER_GROUP)
        size = groups * SYMBOLS_PER_GROUP

        if trailing_bytes:
            if self._padding_option.pad_on_encode:
                size += SYMBOLS_PER_GROUP
            else:
                size += (trailing_bytes * BITS_PER_BYTE + BITS_PER_SYMBOL - 1) // BITS_PER_SYMBOL

        if size > MAX_ENCODED_SIZE:
            raise MalformedInputError("Input is too big")

        return size

    def _encode_into(self, source: Source, destination, destination_offset: int, start: int, end: int) -> int:
        alphabet = self._alphabet.encode_map
        offset = start
        dst_offset = destination_offset

        # Whole groups: 5 bytes into a 40-bit accumulator, 8 symbols out
        group_limit = start + (end - start) // BYTES_PER_GROUP * BYTES_PER_GROUP
        while offset < group_limit:
            bits = int.from_bytes(source[offset:offset + BYTES_PER_GROUP], "big")
            for shift in range(35, -1, -BITS_PER_SYMBOL):
                destination[dst_offset] = alphabet[(bits >> shift) & 0x1F]
                dst_offset += 1
            offset += BYTES_PER_GROUP

        # 1-4 leftover bytes, left-aligned in the same 40-bit layout
        trailing_bytes = end - offset
        if trailing_bytes:
            tail = bytes(source[offset:end]) + bytes(BYTES_PER_GROUP - trailing_bytes)
            bits = int.from_bytes(tail, "big")
            data_symbols = (trailing_bytes * BITS_PER_BYTE + BITS_PER_SYMBOL - 1) // BITS_PER_SYMBOL

            shift = 35
            for _ in range(data_symbols):
                destination[dst_offset] = alphabet[(bits >> shift) & 0x1F]
                dst_offset += 1
                shift -= BITS_PER_SYMBOL

            if self._padding_option.pad_on_encode:
                for _ in range(SYMBOLS_PER_GROUP - data_symbols):
                    destination[dst_offset] = PAD_SYMBOL
                    dst_offset += 1

        return dst_offset - destination_offset

    # Decoding

    def decode(self, source: Union[Source, str], start: int = 0, end: Optional[int] = None) -> bytes:
        """
        Decode the symbols in source[start:end]

        Args:
            source: Symbols as bytes or as a string
            start: Index of the first symbol to decode
            end: Index after the last symbol to decode, defaults to len(source)

        Returns:
            The decoded bytes

        Raises:
            OutOfRangeError: If the range is invalid
            InvalidSymbolError: If a symbol is not part of the alphabet
            MalformedInputError: If the input is not correctly padded or terminated
        """
        source, start, end = self._symbol_bytes(source, start, end)

        destination = bytearray()
        self._decode_impl(source, destination, start, end)
        return bytes(destination)

    def decode_into(self, source: Union[Source, str], destination: Union[bytearray, memoryview],
                    destination_offset: int = 0, start: int = 0, end: Optional[int] = None) -> int:
        """
        Decode the symbols in source[start:end] into destination starting at destination_offset

        Returns:
            The number of bytes written

        Raises:
            OutOfRangeError: If the range is invalid or destination is too small
        """
        source, start, end = self._symbol_bytes(source, start, end)
        check_destination_bounds(len(destination), destination_offset, self.decode_size(source, start, end))

        decoded = bytearray()
        self._decode_impl(source, decoded, start, end)
        destination[destination_offset:destination_offset + len(decoded)] = decoded
        return len(decoded)

    def decode_size(self, source: Union[Source, str], start: int = 0, end: Optional[int] = None) -> int:
        """
        Number of bytes produced by decoding source[start:end]

        Trailing pad characters (at most 7) are not counted as symbols. The
        result is exact for well-formed input; malformed input is reported by
        decode() and not here.
        """
        if end is None:
            end = len(source)
        check_source_bounds(len(source), start, end)

        symbols = end - start
        if symbols == 0:
            return 0

        pad = "=" if isinstance(source, str) else PAD_SYMBOL
        paddings = 0
        while paddings < min(symbols, SYMBOLS_PER_GROUP - 1) and source[end - 1 - paddings] == pad:
            paddings += 1

        return (symbols - paddings) * BITS_PER_SYMBOL // BITS_PER_BYTE

    def _symbol_bytes(self, source, start: int, end: Optional[int]):
        if end is None:
            end = len(source)
        check_source_bounds(len(source), start, end)
        if isinstance(source, str):
            return chars_to_bytes(source, start, end), 0, end - start
        return source, start, end

    def _decode_groups(self, source: Source, destination: bytearray, start: int, end: int) -> int:
        """Decode whole groups free of padding and invalid symbols, return the offset reached"""
        decode_map = self._alphabet.decode_map
        offset = start
        group_limit = start + (end - start) // SYMBOLS_PER_GROUP * SYMBOLS_PER_GROUP

        while offset < group_limit:
            bits = 0
            for symbol in source[offset:offset + SYMBOLS_PER_GROUP]:
                value = decode_map[symbol]
                if value < 0:
                    return offset
                bits = (bits << BITS_PER_SYMBOL) | value

            destination += bits.to_bytes(BYTES_PER_GROUP, "big")
            offset += SYMBOLS_PER_GROUP

        return offset

    def _decode_impl(self, source: Source, destination: bytearray, start: int, end: int):
        if 0 < end - start < MIN_DECODE_SYMBOLS:
            raise MalformedInputError(
                f"Input should have at least {MIN_DECODE_SYMBOLS} symbols for Base32 decoding, "
                f"startIndex: {start}, endIndex: {end}"
            )

        decode_map = self._alphabet.decode_map
        offset = self._decode_groups(source, destination, start, end)

        # At most one group is left: the one holding padding or an invalid
        # symbol, or an unpadded tail
        bits = 0
        count = 0
        has_padding = False

        while offset < end:
            symbol = source[offset]
            value = decode_map[symbol]
            if value == PAD_VALUE:
                self._check_padding(source, offset, end, count)
                has_padding = True
                break
            if value < 0:
                raise InvalidSymbolError(symbol, offset)

            bits = (bits << BITS_PER_SYMBOL) | value
            count += 1
            offset += 1

        if count:
            self._check_last_unit(count)

            byte_count = count * BITS_PER_SYMBOL // BITS_PER_BYTE
            pad_bits = count * BITS_PER_SYMBOL - byte_count * BITS_PER_BYTE
            if bits & ((1 << pad_bits) - 1):
                raise MalformedInputError("The pad bits must be zeros")

            destination += (bits >> pad_bits).to_bytes(byte_count, "big")

            if not has_padding and self._padding_option.required_on_decode:
                raise MalformedInputError(
                    "The padding option is set to PRESENT, but the input is not properly padded"
                )

    def _check_last_unit(self, count: int):
        if count in _INVALID_LAST_UNIT_SYMBOLS:
            raise MalformedInputError("The last unit of input does not have enough bits")

    def _check_padding(self, source: Source, pad_index: int, end: int, count: int):
        """Validate the pad run starting at pad_index after count data symbols of the group"""
        if count == 0:
            raise MalformedInputError(f"Redundant pad character at index {pad_index}")
        self._check_last_unit(count)

        if self._padding_option.prohibited_on_decode:
            raise MalformedInputError("The padding option is set to ABSENT, but the input is padded")

        pad_end = pad_index + SYMBOLS_PER_GROUP - count
        for index in range(pad_index + 1, pad_end):
            if index >= end or source[index] != PAD_SYMBOL:
                raise MalformedInputError(f"Missing pad characters at index {index}")

        if pad_end < end:
            symbol = source[pad_end]
            raise MalformedInputError(
                f"Symbol '{chr(symbol)}'({symbol:x}) at index {pad_end} is prohibited after the pad character"
            )


# RFC4648 section 6 alphabet, padding required
DEFAULT = Base32(STANDARD, PaddingOption.PRESENT)

# RFC4648 section 7 "extended hex" alphabet, padding required
EXTENDED_HEX = Base32(EXTENDED_HEX_ALPHABET, PaddingOption.PRESENT)


def encode(data: Source, codec: Base32 = DEFAULT) -> str:
    """Encode bytes into a Base32 string"""
    return codec.encode(data)


def decode(data: Union[Source, str], codec: Base32 = DEFAULT) -> bytes:
    """Decode a Base32 string or symbol bytes"""
    return codec.decode(data)

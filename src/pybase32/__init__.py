"""
Python Base32 Library

Base32 encoding and decoding as defined by RFC 4648, for both the standard
alphabet (section 6) and the "extended hex" alphabet (section 7), with
configurable padding and streaming wrappers around byte sources and sinks.

Example:

    >>> from pybase32 import DEFAULT, PaddingOption
    >>> DEFAULT.encode(b"foobar")
    'MZXW6YTBOI======'
    >>> DEFAULT.with_padding(PaddingOption.ABSENT).decode("MZXW6YTBOI")
    b'foobar'

Base32 is not an encryption scheme and offers no confidentiality.
"""

from .alphabet import (
    Alphabet,
    STANDARD,
    EXTENDED_HEX as EXTENDED_HEX_ALPHABET,
    PAD_SYMBOL
)

from .padding import PaddingOption

from .base32 import (
    Base32,
    DEFAULT,
    EXTENDED_HEX,
    BYTES_PER_GROUP,
    SYMBOLS_PER_GROUP,
    encode,
    decode
)

from .streams import (
    ByteBuffer,
    DecodingReader,
    EncodingWriter,
    decoding_with,
    encoding_with
)

from .errors import (
    Base32Error,
    OutOfRangeError,
    MalformedInputError,
    InvalidSymbolError,
    StreamClosedError
)

__version__ = "0.1.0"

__all__ = [
    # Alphabets
    "Alphabet",
    "STANDARD",
    "EXTENDED_HEX_ALPHABET",
    "PAD_SYMBOL",

    # Codec
    "PaddingOption",
    "Base32",
    "DEFAULT",
    "EXTENDED_HEX",
    "BYTES_PER_GROUP",
    "SYMBOLS_PER_GROUP",
    "encode",
    "decode",

    # Streams
    "ByteBuffer",
    "DecodingReader",
    "EncodingWriter",
    "decoding_with",
    "encoding_with",

    # Errors
    "Base32Error",
    "OutOfRangeError",
    "MalformedInputError",
    "InvalidSymbolError",
    "StreamClosedError",
]

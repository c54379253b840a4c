"""
Exceptions raised while encoding, decoding or streaming Base32 data
"""

from typing import Optional


class Base32Error(ValueError):
    """Base class for all errors raised by this package"""
    pass


class OutOfRangeError(Base32Error, IndexError):
    """An index, offset or destination capacity is outside of the valid bounds"""
    pass


class MalformedInputError(Base32Error):
    """The input cannot be decoded, or an argument is not acceptable"""
    pass


class InvalidSymbolError(MalformedInputError):
    """A byte that is neither part of the alphabet nor the pad character"""

    def __init__(self, symbol: int, index: int, message: Optional[str] = None):
        self.symbol = symbol
        self.index = index
        if message is None:
            message = f"Invalid symbol '{chr(symbol)}'({symbol:x}) at index {index}"
        super().__init__(message)


class StreamClosedError(Base32Error):
    """An I/O call on a stream adapter that was closed or has already failed"""
    pass

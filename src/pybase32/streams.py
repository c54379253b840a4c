"""
Streams that decode or encode Base32 on the fly

decoding_with() wraps a byte source so that reading yields the decoded bytes,
encoding_with() wraps a byte sink so that written bytes reach it as symbols.
Both hold a bounded amount of data at any time, whatever the size of the
individual read and write calls.
"""

import errno
import io
import logging
from typing import Optional

from .alphabet import PAD_SYMBOL
from .base32 import Base32, DEFAULT, BYTES_PER_GROUP, SYMBOLS_PER_GROUP
from .errors import MalformedInputError, StreamClosedError


logger = logging.getLogger(__name__)

# Symbols decoded or encoded per call into the codec, a multiple of SYMBOLS_PER_GROUP
SYMBOL_BUFFER_SIZE = 1024

DECODED_BUFFER_SIZE = 1024


class ByteBuffer:
    """
    Fixed-capacity linear buffer with read and write cursors

    Data is appended at the end cursor and consumed from the start cursor.
    compact() moves the unread bytes back to the front to make room.
    """

    def __init__(self, capacity: int):
        self._data = bytearray(capacity)
        self._start = 0
        self._end = 0

    def __len__(self) -> int:
        return self._end - self._start

    @property
    def capacity(self) -> int:
        return len(self._data)

    def free(self) -> int:
        """Bytes that can be appended without compacting"""
        return len(self._data) - self._end

    def append(self, data: bytes):
        if len(data) > self.free():
            self.compact()
        if len(data) > self.free():
            raise BufferError(f"{len(data)} bytes do not fit, {self.free()} bytes free")
        self._data[self._end:self._end + len(data)] = data
        self._end += len(data)

    def take_into(self, destination: memoryview, length: int) -> int:
        """Move up to length unread bytes into destination, return the number moved"""
        length = min(length, len(self))
        destination[:length] = self._data[self._start:self._start + length]
        self._start += length
        if self._start == self._end:
            self.clear()
        return length

    def compact(self):
        if self._start:
            unread = len(self)
            self._data[:unread] = self._data[self._start:self._end]
            self._start = 0
            self._end = unread

    def clear(self):
        self._start = 0
        self._end = 0


class DecodingReader(io.RawIOBase):
    """
    Reader returning the bytes decoded from the symbols of a wrapped source

    Symbols are pulled from the source one group at a time and only as many
    as needed for each read. A pad character marks the end of the data: the
    rest of its group is consumed, anything after it is left in the source.

    A malformed input error is raised to the reader once, after which every
    read raises StreamClosedError. Closing discards decoded bytes that were
    not read yet and closes the source; detach() hands the source back open
    instead.
    """

    def __init__(self, source, codec: Base32 = DEFAULT):
        super().__init__()
        self._source = source
        self._codec = codec
        self._buffer = ByteBuffer(DECODED_BUFFER_SIZE)
        self._eof = False
        self._failed = False

    @property
    def codec(self) -> Base32:
        return self._codec

    def readable(self) -> bool:
        return True

    def read(self, size: Optional[int] = -1) -> bytes:
        if size is None or size < 0:
            return self.readall()
        destination = bytearray(size)
        count = self.readinto(destination)
        return bytes(destination[:count])

    def readall(self) -> bytes:
        result = bytearray()
        while True:
            chunk = self.read(DECODED_BUFFER_SIZE)
            if not chunk:
                return bytes(result)
            result += chunk

    def readinto(self, b) -> int:
        self._check_open()

        destination = memoryview(b).cast("B")
        length = len(destination)
        if length == 0:
            return 0

        if len(self._buffer) >= length:
            return self._buffer.take_into(destination, length)

        try:
            return self._fill(destination, length)
        except MalformedInputError as e:
            self._failed = True
            logger.debug("Base32 decoding stream failed: %s", e)
            raise

    def close(self):
        if self.closed:
            return
        self._buffer.clear()
        try:
            super().close()
        finally:
            if self._source is not None:
                self._source.close()
            logger.debug("Base32 decoding stream closed")

    def detach(self):
        """
        Release the source without closing it and return it

        The source stays positioned right after the last group read, so
        content following the pad run can be read from it directly. The
        reader is closed afterwards.
        """
        if self._source is None:
            raise StreamClosedError("The source is already detached")
        if self.closed:
            raise StreamClosedError("The input stream is closed")

        source = self._source
        self._source = None
        self.close()
        logger.debug("Base32 decoding stream detached from its source")
        return source

    def _check_open(self):
        if self.closed:
            raise StreamClosedError("The input stream is closed")
        if self._failed:
            raise StreamClosedError("The input stream has failed on malformed input")

    def _fill(self, destination: memoryview, length: int) -> int:
        filled = self._buffer.take_into(destination, length)

        bytes_needed = length - filled
        groups_needed = (bytes_needed + BYTES_PER_GROUP - 1) // BYTES_PER_GROUP
        symbols_needed = groups_needed * SYMBOLS_PER_GROUP

        while not self._eof and symbols_needed > 0:
            symbols = self._read_symbols(min(SYMBOL_BUFFER_SIZE, symbols_needed))
            symbols_needed -= len(symbols)

            self._buffer.append(self._codec.decode(symbols))
            filled += self._buffer.take_into(destination[filled:], length - filled)

        return filled

    def _read_symbols(self, limit: int) -> bytes:
        """Read whole groups up to limit symbols, stopping after a padded or incomplete group"""
        symbols = bytearray()
        while not self._eof and len(symbols) < limit:
            group = self._read_group()
            symbols += group
            if len(group) < SYMBOLS_PER_GROUP or PAD_SYMBOL in group:
                self._eof = True
        return bytes(symbols)

    def _read_group(self) -> bytes:
        group = bytearray()
        while len(group) < SYMBOLS_PER_GROUP:
            chunk = self._source.read(SYMBOLS_PER_GROUP - len(group))
            if not chunk:
                break
            group += chunk
        return bytes(group)


class EncodingWriter(io.RawIOBase):
    """
    Writer encoding the bytes written to it and forwarding the symbols to a sink

    Whole groups are encoded as soon as they are complete; at most one
    incomplete group is held between calls. Closing encodes the remaining
    bytes, padded according to the codec, then closes the sink.
    """

    def __init__(self, sink, codec: Base32 = DEFAULT):
        super().__init__()
        self._sink = sink
        self._codec = codec
        self._pending = bytearray()
        self._symbols = bytearray(SYMBOL_BUFFER_SIZE)

    @property
    def codec(self) -> Base32:
        return self._codec

    def writable(self) -> bool:
        return True

    def write(self, b) -> int:
        self._check_open()

        source = memoryview(b).cast("B")
        length = len(source)
        if length == 0:
            return 0

        offset = 0
        if self._pending:
            offset = min(BYTES_PER_GROUP - len(self._pending), length)
            self._pending += source[:offset]
            if len(self._pending) < BYTES_PER_GROUP:
                return length
            self._encode_to_sink(self._pending, 0, BYTES_PER_GROUP)
            self._pending.clear()

        group_capacity = SYMBOL_BUFFER_SIZE // SYMBOLS_PER_GROUP
        while length - offset >= BYTES_PER_GROUP:
            groups = min(group_capacity, (length - offset) // BYTES_PER_GROUP)
            chunk_end = offset + groups * BYTES_PER_GROUP
            self._encode_to_sink(source, offset, chunk_end)
            offset = chunk_end

        self._pending += source[offset:]
        return length

    def flush(self):
        self._check_open()
        sink_flush = getattr(self._sink, "flush", None)
        if sink_flush is not None:
            sink_flush()

    def close(self):
        if self.closed:
            return
        try:
            if self._pending:
                self._encode_to_sink(self._pending, 0, len(self._pending))
                self._pending.clear()
        finally:
            try:
                super().close()
            finally:
                self._sink.close()
                logger.debug("Base32 encoding stream closed")

    def _check_open(self):
        if self.closed:
            raise StreamClosedError("The output stream is closed")

    def _encode_to_sink(self, source, start: int, end: int):
        count = self._codec.encode_into(source, self._symbols, 0, start, end)
        self._write_fully(bytes(self._symbols[:count]))

    def _write_fully(self, symbols: bytes):
        while symbols:
            written = self._sink.write(symbols)
            if written is None:
                raise BlockingIOError(errno.EAGAIN, "The sink is not ready to accept symbols")
            if written <= 0:
                raise OSError(f"The sink accepted no symbols, {len(symbols)} symbols left to write")
            symbols = symbols[written:]


def decoding_with(source, codec: Base32 = DEFAULT) -> DecodingReader:
    """Wrap a byte source so that reading returns the decoded bytes"""
    return DecodingReader(source, codec)


def encoding_with(sink, codec: Base32 = DEFAULT) -> EncodingWriter:
    """Wrap a byte sink so that written bytes are encoded before reaching it"""
    return EncodingWriter(sink, codec)

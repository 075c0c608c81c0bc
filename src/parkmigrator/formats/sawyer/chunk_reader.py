"""
Sawyer Chunk Reader - length-framed blocks with optional compression

Every section of a legacy park file is stored as one chunk:
  - Encoding (1 byte): 0=none, 1=RLE, 2=RLE + repeat, 3=rotate
  - Payload length (4 bytes, little endian)
  - Payload (length bytes)

The decoded size of a chunk must match the size the caller expects for the
section it is reading; the format allows no partial chunks.
"""

from dataclasses import dataclass
from enum import IntEnum
import logging

from ...errors import FormatError
from ...utils.binary import IoBuffer

logger = logging.getLogger(__name__)


MAX_UNCOMPRESSED_CHUNK_SIZE = 16 * 1024 * 1024
CHUNK_HEADER_SIZE = 5


class ChunkEncoding(IntEnum):
    """Payload encoding byte."""
    NONE = 0
    RLE = 1
    RLE_COMPRESSED = 2
    ROTATE = 3


@dataclass
class ChunkHeader:
    """Framing information for one chunk."""
    encoding: ChunkEncoding = ChunkEncoding.NONE
    length: int = 0


class ChunkDecoder:
    """
    Chunk payload decoders.

    RLE: a control byte with the high bit set repeats the following byte
    (257 - control) times; otherwise the next (control + 1) bytes are copied.

    Repeat: 0xFF copies the following byte; any other byte b copies
    (b & 7) + 1 bytes starting 32 - (b >> 3) bytes back in the output.

    Rotate: each byte is rotated right by 1, 3, 5, 7, 1, ... bits.
    """

    @staticmethod
    def decode(encoding: ChunkEncoding, data: bytes) -> bytes:
        if encoding == ChunkEncoding.NONE:
            return bytes(data)
        if encoding == ChunkEncoding.RLE:
            return ChunkDecoder.decode_rle(data)
        if encoding == ChunkEncoding.RLE_COMPRESSED:
            return ChunkDecoder.decode_repeat(ChunkDecoder.decode_rle(data))
        if encoding == ChunkEncoding.ROTATE:
            return ChunkDecoder.decode_rotate(data)
        raise FormatError(f"Invalid chunk encoding: {encoding}")

    @staticmethod
    def decode_rle(data: bytes) -> bytes:
        output = bytearray()
        size = len(data)
        i = 0
        while i < size:
            code = data[i]
            if code & 0x80:
                if i + 1 >= size:
                    raise FormatError(f"RLE run at offset {i} is missing its value byte")
                output += bytes((data[i + 1],)) * (257 - code)
                i += 2
            else:
                count = code + 1
                if i + 1 + count > size:
                    raise FormatError(f"RLE literal at offset {i} overruns payload ({count} bytes)")
                output += data[i + 1:i + 1 + count]
                i += 1 + count
            if len(output) > MAX_UNCOMPRESSED_CHUNK_SIZE:
                raise FormatError("Decoded chunk exceeds maximum chunk size")
        return bytes(output)

    @staticmethod
    def decode_repeat(data: bytes) -> bytes:
        output = bytearray()
        size = len(data)
        i = 0
        while i < size:
            code = data[i]
            if code == 0xFF:
                if i + 1 >= size:
                    raise FormatError(f"Repeat literal at offset {i} is missing its value byte")
                output.append(data[i + 1])
                i += 2
                continue

            count = (code & 7) + 1
            start = len(output) - 32 + (code >> 3)
            if start < 0:
                raise FormatError(f"Repeat reference at offset {i} points before start of output")
            for k in range(count):
                output.append(output[start + k])
            i += 1
            if len(output) > MAX_UNCOMPRESSED_CHUNK_SIZE:
                raise FormatError("Decoded chunk exceeds maximum chunk size")
        return bytes(output)

    @staticmethod
    def decode_rotate(data: bytes) -> bytes:
        output = bytearray(len(data))
        code = 1
        for i, value in enumerate(data):
            output[i] = ((value >> code) | (value << (8 - code))) & 0xFF
            code = (code + 2) % 8
        return bytes(output)


class ChunkReader:
    """Reads chunks sequentially from an IoBuffer."""

    def __init__(self, io: IoBuffer):
        self.io = io

    def read_header(self) -> ChunkHeader:
        encoding = self.io.read_uint8()
        length = self.io.read_uint32()
        try:
            encoding = ChunkEncoding(encoding)
        except ValueError:
            raise FormatError(f"Invalid chunk encoding {encoding} at offset {self.io.position - CHUNK_HEADER_SIZE}")
        if length == 0:
            raise FormatError(f"Encountered zero-sized chunk at offset {self.io.position - CHUNK_HEADER_SIZE}")
        return ChunkHeader(encoding=encoding, length=length)

    def read_chunk(self) -> bytes:
        """Read and decode the next chunk."""
        start = self.io.position
        header = self.read_header()
        payload = self.io.read_bytes(header.length)
        data = ChunkDecoder.decode(header.encoding, payload)
        if len(data) > MAX_UNCOMPRESSED_CHUNK_SIZE:
            raise FormatError("Decoded chunk exceeds maximum chunk size")
        logger.debug(f"Chunk @{start}: {header.encoding.name} {header.length} -> {len(data)} bytes")
        return data

    def read_chunk_into(self, buffer: bytearray, expected_size: int, offset: int = 0) -> int:
        """
        Read the next chunk into buffer[offset:offset + expected_size].

        Raises:
            TruncatedDataError: stream ends inside the chunk
            FormatError: decoded size differs from expected_size
        """
        data = self.read_chunk()
        if len(data) != expected_size:
            raise FormatError(f"Chunk decoded to {len(data)} bytes, expected {expected_size}")
        if offset + expected_size > len(buffer):
            raise FormatError(f"Chunk of {expected_size} bytes does not fit at offset {offset}")
        buffer[offset:offset + expected_size] = data
        return expected_size

    def read_chunk_exact(self, expected_size: int) -> bytes:
        """Read the next chunk and return it as bytes of exactly expected_size."""
        buffer = bytearray(expected_size)
        self.read_chunk_into(buffer, expected_size)
        return bytes(buffer)

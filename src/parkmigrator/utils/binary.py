"""
Checked little-endian reader for park streams.

Every read consumes exactly the bytes it asks for or raises
TruncatedDataError with the offset where the stream ran out; nothing is
padded or guessed.
"""

import struct
from io import BytesIO
from typing import BinaryIO, List

from ..errors import TruncatedDataError

U8 = struct.Struct('<B')
U16 = struct.Struct('<H')
I16 = struct.Struct('<h')
U32 = struct.Struct('<I')
I32 = struct.Struct('<i')


class IoBuffer:
    """Cursor over a seekable binary stream. Park files are always little-endian."""

    def __init__(self, stream: BinaryIO):
        self.stream = stream
        self._length = self._measure()

    @classmethod
    def from_bytes(cls, data: bytes) -> 'IoBuffer':
        return cls(BytesIO(data))

    @classmethod
    def from_file(cls, filepath: str) -> 'IoBuffer':
        """Read the whole file up front; park files are a few MB at most."""
        with open(filepath, 'rb') as f:
            return cls.from_bytes(f.read())

    def _measure(self) -> int:
        here = self.stream.tell()
        end = self.stream.seek(0, 2)
        self.stream.seek(here)
        return end

    @property
    def position(self) -> int:
        return self.stream.tell()

    @position.setter
    def position(self, value: int):
        self.stream.seek(value)

    @property
    def length(self) -> int:
        return self._length

    @property
    def remaining(self) -> int:
        return self._length - self.stream.tell()

    @property
    def has_more(self) -> bool:
        return self.remaining > 0

    def seek(self, offset: int, whence: int = 0):
        self.stream.seek(offset, whence)

    def skip(self, num_bytes: int):
        if num_bytes > self.remaining:
            raise TruncatedDataError(
                f"Cannot skip {num_bytes} bytes at offset {self.position}: stream ends at {self._length}"
            )
        self.stream.seek(num_bytes, 1)

    def read_bytes(self, count: int) -> bytes:
        """Read exactly count bytes."""
        start = self.stream.tell()
        data = self.stream.read(count)
        if len(data) != count:
            raise TruncatedDataError(
                f"Expected {count} bytes at offset {start}, only {len(data)} available"
            )
        return data

    def _read(self, fmt: struct.Struct) -> int:
        return fmt.unpack(self.read_bytes(fmt.size))[0]

    def read_uint8(self) -> int:
        return self._read(U8)

    def read_uint16(self) -> int:
        return self._read(U16)

    def read_int16(self) -> int:
        return self._read(I16)

    def read_uint32(self) -> int:
        return self._read(U32)

    def read_int32(self) -> int:
        return self._read(I32)

    def read_array(self, fmt: str, count: int) -> List[int]:
        """Read count values of one struct format character, e.g. read_array('H', 4)."""
        packed = struct.Struct(f"<{count}{fmt}")
        return list(packed.unpack(self.read_bytes(packed.size)))

    def read_cstring(self, length: int, trim_null: bool = True) -> str:
        """Fixed-length ASCII field; undecodable bytes become U+FFFD."""
        text = self.read_bytes(length).decode('ascii', errors='replace')
        if trim_null:
            text = text.split('\0', 1)[0]
        return text

    def read_raw_string(self, length: int) -> bytes:
        """Fixed-length byte field cut at the first NUL, left undecoded."""
        return self.read_bytes(length).split(b'\0', 1)[0]

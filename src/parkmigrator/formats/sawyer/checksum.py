"""Whole-stream checksum: trailing u32 equal to the byte sum of the payload."""

import logging

from ...errors import ChecksumError
from ...utils.binary import IoBuffer

logger = logging.getLogger(__name__)

CHECKSUM_SIZE = 4
MIN_CHECKSUMMED_LENGTH = 8


def calculate_checksum(data: bytes) -> int:
    """Wrapping 32-bit sum of all bytes."""
    return sum(data) & 0xFFFFFFFF


def validate_checksum(io: IoBuffer) -> bool:
    """Check the trailer against the payload. The stream position is restored."""
    position = io.position
    try:
        length = io.length
        if length < MIN_CHECKSUMMED_LENGTH:
            return False
        io.seek(0)
        payload = io.read_bytes(length - CHECKSUM_SIZE)
        stored = io.read_uint32()
    finally:
        io.seek(position)

    actual = calculate_checksum(payload)
    if actual != stored:
        logger.debug(f"Checksum mismatch: stored {stored:#010x}, calculated {actual:#010x}")
    return actual == stored


def verify_checksum(io: IoBuffer):
    """Raise ChecksumError when the trailer does not match."""
    if not validate_checksum(io):
        raise ChecksumError("Invalid checksum.")

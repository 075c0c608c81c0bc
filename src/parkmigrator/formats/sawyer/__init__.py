"""Sawyer container format - chunk framing, compression, checksum, text encoding."""
from .chunk_reader import ChunkReader, ChunkDecoder, ChunkEncoding, ChunkHeader, MAX_UNCOMPRESSED_CHUNK_SIZE
from .checksum import calculate_checksum, validate_checksum, verify_checksum
from .encoding import contains_colour_code, rct2_to_unicode, decode_legacy_string

__all__ = [
    'ChunkReader', 'ChunkDecoder', 'ChunkEncoding', 'ChunkHeader', 'MAX_UNCOMPRESSED_CHUNK_SIZE',
    'calculate_checksum', 'validate_checksum', 'verify_checksum',
    'contains_colour_code', 'rct2_to_unicode', 'decode_legacy_string',
]

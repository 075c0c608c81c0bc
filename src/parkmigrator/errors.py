"""
Import error taxonomy.

Every failure of the importer surfaces as a subclass of ParkImportError so
callers can catch the whole family in one place.
"""


class ParkImportError(Exception):
    """Base class for all park import failures."""


class FormatError(ParkImportError):
    """Bad type tag, bad chunk encoding or unexpected record shape."""


class ChecksumError(ParkImportError):
    """Stream checksum does not match its trailer."""


class UnsupportedFormatError(ParkImportError):
    """Recognised but unsupported legacy variant."""

    def __init__(self, message: str, classic_flag: int = 0):
        super().__init__(message)
        self.classic_flag = classic_flag


class TruncatedDataError(ParkImportError):
    """Stream ended before a declared size was satisfied."""


class AssetResolutionError(ParkImportError):
    """Raised by an object repository when a required object cannot be loaded."""

    def __init__(self, message: str, missing=None):
        super().__init__(message)
        self.missing = list(missing or [])

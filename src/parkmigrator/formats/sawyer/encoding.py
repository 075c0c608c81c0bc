"""
Legacy single-byte string encoding.

Legacy text is mostly Latin-1 compatible. A handful of byte values carry
Polish letters and UI glyphs, bytes 142-156 are colour format codes, and 0xFF
introduces a big-endian 16-bit code point.

Strings written by earlier versions of the migrator may already be UTF-8.
Those are recognised by colour codes encoded as UTF-8 sequences (C2 8E ..
C2 9C), which cannot appear in genuine legacy text.
"""

from typing import Dict

COLOUR_CODE_START = 142
COLOUR_CODE_END = 156
MULTIBYTE_PREFIX = 0xFF

RCT2_TO_UNICODE: Dict[int, int] = {
    159: 0x0104,   # A ogonek
    160: 0x25B2,   # up arrow
    162: 0x0106,   # C acute
    166: 0x0118,   # E ogonek
    167: 0x0141,   # L stroke
    168: 0x0105,   # a ogonek
    169: 0x0107,   # c acute
    170: 0x25BC,   # down arrow
    172: 0x2713,   # tick
    173: 0x274C,   # cross
    175: 0x25B6,   # right arrow
    176: 0x0119,   # e ogonek
    177: 0x1F683,  # railway
    178: 0x0142,   # l stroke
    180: 0x201C,   # opening quote
    181: 0x20AC,   # euro
    182: 0x1F6E3,  # road
    183: 0x2708,   # air
    184: 0x1F6E5,  # water
    185: 0x207B,   # superscript minus
    186: 0x2022,   # bullet
    187: 0x25B4,   # small up arrow
    188: 0x25BE,   # small down arrow
    189: 0x25C0,   # left arrow
    190: 0x0143,   # N acute
    193: 0x0144,   # n acute
    194: 0x015A,   # S acute
    197: 0x015B,   # s acute
    198: 0x0179,   # Z acute
    200: 0x017B,   # Z dot
    201: 0x017A,   # z acute
    202: 0x017C,   # z dot
}


def contains_colour_code(raw: bytes) -> bool:
    """True when raw holds a colour code already encoded as UTF-8."""
    for i in range(len(raw) - 1):
        if raw[i] == 0xC2 and COLOUR_CODE_START <= raw[i + 1] <= COLOUR_CODE_END:
            return True
    return False


def rct2_to_unicode(raw: bytes) -> str:
    """Transcode legacy bytes (already cut at NUL) to str."""
    chars = []
    i = 0
    while i < len(raw):
        value = raw[i]
        if value == MULTIBYTE_PREFIX and i + 2 < len(raw):
            chars.append(chr((raw[i + 1] << 8) | raw[i + 2]))
            i += 3
            continue
        chars.append(chr(RCT2_TO_UNICODE.get(value, value)))
        i += 1
    return ''.join(chars)


def decode_legacy_string(raw: bytes) -> str:
    """Decode a stored string, keeping already-transcoded UTF-8 verbatim."""
    null_idx = raw.find(b'\0')
    if null_idx != -1:
        raw = raw[:null_idx]
    if contains_colour_code(raw):
        return raw.decode('utf-8', errors='replace')
    return rct2_to_unicode(raw)

from __future__ import annotations

# ID3v2 text encoding byte for "UTF-16 with BOM".
ENCODING_UTF16_BOM = 0x01
BOM_LE = b"\xff\xfe"


def encode_text_frame(text: str) -> bytes:
    """Encode a title as an ID3v2 text frame payload (encoding byte, BOM, UTF-16LE units).

    Every character is written as its low byte followed by 0x00, which is only
    correct up to U+00FF; wider code points are truncated, not surrogate encoded.
    """
    payload = bytearray([ENCODING_UTF16_BOM])
    payload += BOM_LE
    for char in text:
        payload += bytes((ord(char) & 0xFF, 0x00))
    return bytes(payload)


def decode_text_frame(data: bytes) -> str:
    if not data or data[0] != ENCODING_UTF16_BOM or data[1:3] != BOM_LE:
        raise ValueError("text frame is not UTF-16 with a little-endian BOM")
    return data[3:].decode("utf-16-le")

"""Shared test utilities for pewhere tests."""
import struct
from pathlib import Path


def make_pe_image(magic: int = 0x20B, e_lfanew: int = 0x80, signature: bytes = b'PE\0\0',
                  padding: int = 0x100) -> bytes:
    """Build a minimal PE image prefix with the given optional header magic.

    The result has an MZ DOS header, e_lfanew at 0x3C, the signature at e_lfanew,
    a zeroed 20-byte COFF header, the magic, and ``padding`` trailing zero bytes.
    """
    header_end = e_lfanew + len(signature) + 20 + 2
    image = bytearray(max(0x40, header_end) + padding)
    image[0:2] = b'MZ'
    struct.pack_into('<i', image, 0x3C, e_lfanew)
    image[e_lfanew:e_lfanew + len(signature)] = signature
    struct.pack_into('<H', image, e_lfanew + len(signature) + 20, magic)
    return bytes(image)


def write_file(path: Path, data: bytes = b'') -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return path


class CollectingLogger:
    """Logger stand-in that records messages passed to it."""

    def __init__(self):
        self.messages: list[str] = []

    def info(self, message, *args, **kwargs):
        self.messages.append(message)

    debug = warning = error = info

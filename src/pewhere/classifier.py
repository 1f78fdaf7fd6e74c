"""PE32/PE64 detection from the fixed-offset fields of a Portable Executable header.

Only the fields needed to tell the optional header flavours apart are read:

    0x3C          e_lfanew, int32 LE, offset of the PE signature
    e_lfanew      b'PE\\0\\0'
    e_lfanew+4    COFF file header, 20 bytes (skipped)
    e_lfanew+24   optional header magic, uint16 LE (0x10B PE32, 0x20B PE32+)
"""
import io
import os
import stat
import struct
from typing import BinaryIO

from .models import Architecture

E_LFANEW_OFFSET = 0x3C
MIN_DOS_HEADER_SIZE = E_LFANEW_OFFSET + 4

PE_SIGNATURE = b'PE\0\0'
COFF_HEADER_SIZE = 20
# signature + COFF header + optional header magic
REQUIRED_AFTER_E_LFANEW = len(PE_SIGNATURE) + COFF_HEADER_SIZE + 2

IMAGE_NT_OPTIONAL_HDR32_MAGIC = 0x10B
IMAGE_NT_OPTIONAL_HDR64_MAGIC = 0x20B

_MAGIC_ARCHITECTURES = {
    IMAGE_NT_OPTIONAL_HDR32_MAGIC: Architecture.X32,
    IMAGE_NT_OPTIONAL_HDR64_MAGIC: Architecture.X64,
}

_INT32_LE = struct.Struct('<i')
_UINT16_LE = struct.Struct('<H')


def _read_exact(f: BinaryIO, size: int) -> bytes | None:
    data = f.read(size)
    return data if len(data) == size else None


def _classify_stream(f: BinaryIO, length: int) -> Architecture:
    if length < MIN_DOS_HEADER_SIZE:
        return Architecture.NONE

    f.seek(E_LFANEW_OFFSET)
    data = _read_exact(f, _INT32_LE.size)
    if data is None:
        return Architecture.NONE
    e_lfanew, = _INT32_LE.unpack(data)

    if e_lfanew < 0 or e_lfanew > length - REQUIRED_AFTER_E_LFANEW:
        return Architecture.NONE

    f.seek(e_lfanew)
    if _read_exact(f, len(PE_SIGNATURE)) != PE_SIGNATURE:
        return Architecture.NONE

    f.seek(COFF_HEADER_SIZE, os.SEEK_CUR)
    data = _read_exact(f, _UINT16_LE.size)
    if data is None:
        return Architecture.NONE
    magic, = _UINT16_LE.unpack(data)

    return _MAGIC_ARCHITECTURES.get(magic, Architecture.NONE)


def classify(file_path: str | os.PathLike) -> Architecture:
    """Classify a file as a 32-bit PE, a 64-bit PE, or neither.

    Never raises for unreadable or malformed input: missing files, permission errors,
    truncated reads and non-PE content all yield Architecture.NONE.
    """
    try:
        st = os.stat(file_path)
        if not stat.S_ISREG(st.st_mode):
            return Architecture.NONE

        with open(file_path, 'rb') as f:
            return _classify_stream(f, os.fstat(f.fileno()).st_size)
    except OSError:
        return Architecture.NONE


def classify_bytes(data: bytes) -> Architecture:
    """Apply the same classification rules to an in-memory image prefix."""
    return _classify_stream(io.BytesIO(data), len(data))

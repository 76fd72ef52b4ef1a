"""Reading and writing text comments in PNG files."""

from __future__ import annotations

import os
import struct
import zlib
from collections.abc import Iterable, Mapping
from typing import BinaryIO

from PIL import Image, PngImagePlugin

from fehview.hashes import CaseInsensitiveDict

__all__ = ["PNG_SIGNATURE", "is_png", "read_comments", "write_png"]

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
COMPRESSION_LEVEL = 3
MAX_COMMENTS = 4


class _MalformedPng(Exception):
    pass


def is_png(stream: BinaryIO) -> bool:
    """Read eight bytes from ``stream`` and report whether they are a PNG signature."""
    return stream.read(8) == PNG_SIGNATURE


def _split_keyword(data: bytes) -> tuple[str, bytes]:
    sep = data.find(b"\0")
    if sep < 0:
        raise _MalformedPng("text chunk without keyword terminator")
    return data[:sep].decode("latin-1"), data[sep + 1 :]


def _decode_text_chunk(kind: bytes, data: bytes) -> tuple[str, str]:
    key, rest = _split_keyword(data)
    try:
        if kind == b"tEXt":
            return key, rest.decode("latin-1")
        if kind == b"zTXt":
            if not rest or rest[0] != 0:
                raise _MalformedPng("unknown zTXt compression method")
            return key, zlib.decompress(rest[1:]).decode("latin-1")
        # iTXt
        if len(rest) < 2:
            raise _MalformedPng("short iTXt chunk")
        compressed, method = rest[0], rest[1]
        rest = rest[2:]
        _, rest = _split_keyword(rest)  # language tag
        _, rest = _split_keyword(rest)  # translated keyword
        if compressed:
            if method != 0:
                raise _MalformedPng("unknown iTXt compression method")
            rest = zlib.decompress(rest)
        return key, rest.decode("utf-8")
    except (zlib.error, UnicodeDecodeError) as exc:
        raise _MalformedPng(str(exc)) from exc


def _read_text_chunks(stream: BinaryIO) -> list[tuple[str, str]]:
    texts: list[tuple[str, str]] = []
    while True:
        header = stream.read(8)
        if len(header) < 8:
            raise _MalformedPng("truncated chunk header")
        length, kind = struct.unpack(">I4s", header)
        if length > 0x7FFFFFFF:
            raise _MalformedPng("chunk too long")
        if kind == b"IDAT":
            return texts
        data = stream.read(length)
        crc = stream.read(4)
        if len(data) < length or len(crc) < 4:
            raise _MalformedPng("truncated chunk")
        if struct.unpack(">I", crc)[0] != zlib.crc32(kind + data):
            if kind[0] & 0x20:
                continue  # damaged ancillary chunk: skip it
            raise _MalformedPng("CRC error in critical chunk")
        if kind in (b"tEXt", b"zTXt", b"iTXt"):
            texts.append(_decode_text_chunk(kind, data))
        elif kind == b"IEND":
            raise _MalformedPng("no image data")


def read_comments(path: str | os.PathLike) -> CaseInsensitiveDict | None:
    """Return the text comments stored before the image data of a PNG file.

    Returns ``None`` when the file cannot be opened, is not a valid PNG, or
    holds no comments. Keys compare case-insensitively; a repeated key keeps
    the last value.
    """
    try:
        with open(path, "rb") as stream:
            if not is_png(stream):
                return None
            texts = _read_text_chunks(stream)
    except (OSError, _MalformedPng):
        return None
    if not texts:
        return None
    comments = CaseInsensitiveDict()
    for key, text in texts:
        comments[key] = text
    return comments


def _comment_pairs(
    comments: Mapping[str, str] | Iterable[tuple[str | None, str | None]] | None,
) -> list[tuple[str, str]]:
    if comments is None:
        return []
    pairs = comments.items() if isinstance(comments, Mapping) else comments
    selected: list[tuple[str, str]] = []
    for key, text in pairs:
        if len(selected) == MAX_COMMENTS or not key or text is None:
            break
        selected.append((key, text))
    return selected


def write_png(
    image: Image.Image,
    stream: BinaryIO,
    comments: Mapping[str, str] | Iterable[tuple[str | None, str | None]] | None = None,
) -> None:
    """Write ``image`` as an 8-bit RGBA PNG with up to four text comments.

    Comments are taken in order and stop at the first pair with an empty key
    or a missing text.
    """
    info = PngImagePlugin.PngInfo()
    for key, text in _comment_pairs(comments):
        info.add_text(key, text, zip=False)
    rgba = image if image.mode == "RGBA" else image.convert("RGBA")
    rgba.save(stream, format="PNG", pnginfo=info, compress_level=COMPRESSION_LEVEL)
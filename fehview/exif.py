"""Readable summaries of the Exif metadata stored in image files."""

from __future__ import annotations

import enum
import math
import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from PIL import ExifTags, Image, UnidentifiedImageError

from fehview.nikon import nikon_tag_text

__all__ = [
    "EXIF_MAX_DATA",
    "EXIF_STD_BUF_LEN",
    "Ifd",
    "MakerNoteEntry",
    "ExifData",
    "trim_spaces",
    "make_model_lens",
    "exposure",
    "flash",
    "mode",
    "datetime_original",
    "description",
    "gps_coords",
    "canon_tag_text",
    "exif_info",
]

EXIF_MAX_DATA = 1024
EXIF_STD_BUF_LEN = 128

TAG_IMAGE_DESCRIPTION = 0x010E
TAG_MAKE = 0x010F
TAG_MODEL = 0x0110
TAG_EXPOSURE_TIME = 0x829A
TAG_FNUMBER = 0x829D
TAG_EXPOSURE_PROGRAM = 0x8822
TAG_ISO_SPEED_RATINGS = 0x8827
TAG_DATE_TIME_ORIGINAL = 0x9003
TAG_FLASH = 0x9209
TAG_FOCAL_LENGTH = 0x920A
TAG_EXPOSURE_MODE = 0xA402
TAG_FOCAL_LENGTH_IN_35MM_FILM = 0xA405
TAG_LENS_MODEL = 0xA434

TAG_GPS_LATITUDE_REF = 0x0001
TAG_GPS_LATITUDE = 0x0002
TAG_GPS_LONGITUDE_REF = 0x0003
TAG_GPS_LONGITUDE = 0x0004
TAG_GPS_MAP_DATUM = 0x0012

_EXIF_POINTER = 0x8769
_GPS_POINTER = 0x8825
_INTEROP_POINTER = 0xA005

_NIKON_MAKES = frozenset({"NIKON CORPORATION", "Nikon", "NIKON"})
_CANON_MAKE = "Canon"


class Ifd(enum.IntEnum):
    """Image file directories an Exif tag can live in."""

    IFD_0 = 0
    IFD_1 = 1
    EXIF = 2
    GPS = 3
    INTEROPERABILITY = 4


@dataclass(frozen=True)
class MakerNoteEntry:
    """One vendor maker-note entry; ``value`` is None when it has no readable form."""

    id: int
    title: str | None = None
    name: str | None = None
    value: str | None = None


def trim_spaces(text: str) -> str:
    """Remove all spaces from the right end of ``text``."""
    return text.rstrip(" ")


def _std(text: str) -> str:
    return text[: EXIF_STD_BUF_LEN - 1]


_FLASH_VALUES = {
    0x00: "Flash did not fire",
    0x01: "Flash fired",
    0x05: "Strobe return light not detected",
    0x07: "Strobe return light detected",
    0x08: "Flash did not fire",
    0x09: "Flash fired, compulsory flash mode",
    0x0D: "Flash fired, compulsory flash mode, return light not detected",
    0x0F: "Flash fired, compulsory flash mode, return light detected",
    0x10: "Flash did not fire, compulsory flash mode",
    0x18: "Flash did not fire, auto mode",
    0x19: "Flash fired, auto mode",
    0x1D: "Flash fired, auto mode, return light not detected",
    0x1F: "Flash fired, auto mode, return light detected",
    0x20: "No flash function",
    0x41: "Flash fired, red-eye reduction mode",
    0x45: "Flash fired, red-eye reduction mode, return light not detected",
    0x47: "Flash fired, red-eye reduction mode, return light detected",
    0x49: "Flash fired, compulsory flash mode, red-eye reduction mode",
    0x59: "Flash fired, auto mode, red-eye reduction mode",
}

_EXPOSURE_MODES = {0: "Auto exposure", 1: "Manual exposure", 2: "Auto bracket"}

_EXPOSURE_PROGRAMS = {
    0: "Not defined",
    1: "Manual",
    2: "Normal program",
    3: "Aperture priority",
    4: "Shutter priority",
    5: "Creative program (biased toward depth of field)",
    6: "Creative program (biased toward fast shutter speed)",
    7: "Portrait mode (for closeup photos with the background out of focus)",
    8: "Landscape mode (for landscape photos with the background in focus)",
}


def _is_rational(value: Any) -> bool:
    return (
        hasattr(value, "numerator")
        and hasattr(value, "denominator")
        and not isinstance(value, (int, bool))
    )


def _as_float(value: Any) -> float:
    if _is_rational(value):
        den = value.denominator
        return math.nan if den == 0 else value.numerator / den
    return float(value)


def _format_generic(value: Any) -> str:
    if isinstance(value, str):
        return value.replace("\0", "")
    if isinstance(value, bytes):
        stripped = value.rstrip(b"\0")
        if all(32 <= c < 127 for c in stripped):
            return stripped.decode("ascii")
        return f"{len(value)} bytes undefined data"
    if isinstance(value, (tuple, list)):
        return ", ".join(_format_generic(v) for v in value)
    if _is_rational(value):
        if value.denominator == 1:
            return str(value.numerator)
        number = _as_float(value)
        return "nan" if math.isnan(number) else f"{number:.2f}"
    return str(value)


def _format_value(ifd: Ifd, tag: int, value: Any) -> str:
    if ifd in (Ifd.IFD_0, Ifd.EXIF):
        try:
            if tag == TAG_FNUMBER:
                return f"f/{_as_float(value):.1f}"
            if tag == TAG_EXPOSURE_TIME:
                seconds = _as_float(value)
                if 0 < seconds < 1:
                    return f"1/{round(1 / seconds)} sec."
                return f"{seconds:.0f} sec."
            if tag == TAG_FOCAL_LENGTH:
                return f"{_as_float(value):.1f} mm"
        except (TypeError, ValueError, ZeroDivisionError, OverflowError):
            return _format_generic(value)
        if isinstance(value, int):
            if tag == TAG_FLASH:
                return _FLASH_VALUES.get(value, str(value))
            if tag == TAG_EXPOSURE_MODE:
                return _EXPOSURE_MODES.get(value, str(value))
            if tag == TAG_EXPOSURE_PROGRAM:
                return _EXPOSURE_PROGRAMS.get(value, str(value))
    return _format_generic(value)


def _tag_name(ifd: Ifd, tag: int) -> str:
    table = ExifTags.GPSTAGS if ifd is Ifd.GPS else ExifTags.TAGS
    return table.get(tag, f"0x{tag:04x}")


@dataclass
class ExifData:
    """Exif values in readable form, keyed by directory and tag number."""

    entries: dict[Ifd, dict[int, str]] = field(default_factory=dict)
    makernote: list[MakerNoteEntry] | None = None

    @classmethod
    def from_file(cls, path: str | os.PathLike) -> ExifData | None:
        """Read the Exif data of an image file; None if unreadable or absent."""
        try:
            with Image.open(path) as image:
                exif = image.getexif()
                raw: dict[Ifd, Mapping[int, Any]] = {
                    Ifd.IFD_0: {
                        tag: value
                        for tag, value in exif.items()
                        if tag not in (_EXIF_POINTER, _GPS_POINTER, _INTEROP_POINTER)
                    },
                    Ifd.EXIF: exif.get_ifd(_EXIF_POINTER),
                    Ifd.GPS: exif.get_ifd(_GPS_POINTER),
                    Ifd.INTEROPERABILITY: exif.get_ifd(_INTEROP_POINTER),
                }
        except (OSError, UnidentifiedImageError, ValueError, SyntaxError):
            return None
        entries = {
            ifd: {tag: _format_value(ifd, tag, value) for tag, value in tags.items()}
            for ifd, tags in raw.items()
            if tags
        }
        if not entries:
            return None
        return cls(entries)

    def _value(self, ifd: Ifd, tag: int) -> str:
        value = self.entries.get(Ifd(ifd), {}).get(tag)
        if value is None:
            return ""
        return trim_spaces(value[: EXIF_MAX_DATA - 1])

    def tag_line(self, ifd: Ifd, tag: int) -> str:
        """Return "Name: value\\n" for a tag, or "" if it is absent or blank."""
        value = self._value(ifd, tag)
        if not value:
            return ""
        return f"{_tag_name(Ifd(ifd), tag)}: {value}\n"

    def tag_content(self, ifd: Ifd, tag: int) -> str:
        """Return the value of a tag with trailing spaces removed, or ""."""
        return self._value(ifd, tag)

    def mnote_tag(self, tag: int) -> str:
        """Return "Title: value\\n" for a maker-note tag, or "".

        When several entries share the id, the last non-blank one wins.
        """
        result = ""
        for entry in self.makernote or ():
            if entry.id != tag or entry.value is None:
                continue
            value = trim_spaces(entry.value[: EXIF_MAX_DATA - 1])
            if value:
                title = entry.title if entry.title is not None else "(null)"
                result = f"{title}: {value}\n"
        return result


def make_model_lens(ed: ExifData) -> str:
    """Camera make, model and lens on one line; the make is dropped if the model repeats it."""
    make = _std(ed.tag_content(Ifd.IFD_0, TAG_MAKE))
    model = _std(ed.tag_content(Ifd.IFD_0, TAG_MODEL))
    lens = _std(ed.tag_content(Ifd.EXIF, TAG_LENS_MODEL))
    parts = []
    if make and not model.startswith(make):
        parts.append(f"{make} ")
    if model:
        parts.append(model)
    if lens:
        parts.append(f" + {lens}")
    parts.append("\n")
    return "".join(parts)


def exposure(ed: ExifData) -> str:
    """Aperture, exposure time, ISO and focal length."""
    fnumber = _std(ed.tag_content(Ifd.EXIF, TAG_FNUMBER))
    exposure_time = _std(ed.tag_content(Ifd.EXIF, TAG_EXPOSURE_TIME))
    iso = _std(ed.tag_content(Ifd.EXIF, TAG_ISO_SPEED_RATINGS))
    focus = _std(ed.tag_content(Ifd.EXIF, TAG_FOCAL_LENGTH))
    focus35 = _std(ed.tag_content(Ifd.EXIF, TAG_FOCAL_LENGTH_IN_35MM_FILM))
    parts = []
    if fnumber or exposure_time:
        parts.append(f"{fnumber}  {exposure_time}  ")
    if iso:
        parts.append(f"ISO{iso}  ")
    if focus and focus35:
        parts.append(f"{focus} ({focus35} mm)\n")
    elif focus:
        parts.append(f"{focus}\n")
    return "".join(parts)


def flash(ed: ExifData) -> str:
    """The flash setting, or ""."""
    value = _std(ed.tag_content(Ifd.EXIF, TAG_FLASH))
    return f"{value}\n" if value else ""


def mode(ed: ExifData) -> str:
    """Exposure mode followed by the exposure program in parentheses, or ""."""
    exposure_mode = _std(ed.tag_content(Ifd.EXIF, TAG_EXPOSURE_MODE))
    program = _std(ed.tag_content(Ifd.EXIF, TAG_EXPOSURE_PROGRAM))
    if exposure_mode or program:
        return f"{exposure_mode} ({program})\n"
    return ""


def datetime_original(ed: ExifData) -> str:
    """The time the picture was taken, or ""."""
    value = _std(ed.tag_content(Ifd.EXIF, TAG_DATE_TIME_ORIGINAL))
    return f"{value}\n" if value else ""


def description(ed: ExifData) -> str:
    """The image description in double quotes, or ""."""
    value = _std(ed.tag_content(Ifd.IFD_0, TAG_IMAGE_DESCRIPTION))
    return f'"{value}"\n' if value else ""


def gps_coords(ed: ExifData) -> str:
    """GPS position; output stops at the first missing component."""
    steps = (
        (TAG_GPS_LATITUDE_REF, "GPS: {} "),
        (TAG_GPS_LATITUDE, "{} "),
        (TAG_GPS_LONGITUDE_REF, ", {} "),
        (TAG_GPS_LONGITUDE, "{} "),
        (TAG_GPS_MAP_DATUM, "({})\n"),
    )
    parts = []
    for tag, template in steps:
        value = _std(ed.tag_content(Ifd.GPS, tag))
        if not value:
            break
        parts.append(template.format(value))
    return "".join(parts)


def canon_tag_text(ed: ExifData, tag: int) -> str:
    """Display text for one Canon maker-note tag."""
    return ed.mnote_tag(tag)


def exif_info(
    ed: ExifData | None,
    nikon_tags: Iterable[int] = (),
    canon_tags: Iterable[int] = (),
) -> str:
    """All interesting Exif data as readable lines.

    Vendor maker-note tags are shown for Nikon and Canon cameras, from the
    given tag lists.
    """
    if ed is None:
        return "No Exif data in file.\n"
    parts = [
        description(ed),
        make_model_lens(ed),
        exposure(ed),
        mode(ed),
        flash(ed),
        datetime_original(ed),
    ]
    make = _std(ed.tag_content(Ifd.IFD_0, TAG_MAKE))
    if make in _NIKON_MAKES:
        flash_line = _std(ed.tag_line(Ifd.EXIF, TAG_FLASH))
        parts.extend(nikon_tag_text(tag, ed.mnote_tag, flash_line) for tag in nikon_tags)
    elif make == _CANON_MAKE:
        parts.extend(canon_tag_text(ed, tag) for tag in canon_tags)
    parts.append(gps_coords(ed))
    return "".join(parts)
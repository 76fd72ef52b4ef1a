"""Readable text for the Nikon maker-note tags worth showing."""

from __future__ import annotations

import math
import re
import struct
from collections.abc import Callable

__all__ = [
    "FLASH_CONTROL_MODES",
    "CONTRAST_DETECT_AF",
    "AF_AREA_MODES_PHASE",
    "AF_AREA_MODES_CONTRAST",
    "PHASE_DETECT_AF",
    "AF_POINTS_51",
    "AF_POINTS_11",
    "AF_POINTS_39",
    "PICTURE_CONTROL_ADJUST",
    "primary_af_point",
    "flash_output",
    "format_flash_exposure_compensation",
    "format_active_d_lighting",
    "format_picture_control",
    "format_flash_control_mode",
    "format_af_info2",
    "nikon_tag_text",
]

FLASH_CONTROL_MODES = (
    "Off",
    "iTTL-BL",
    "iTTL",
    "Auto Aperture",
    "Automatic",
    "GN (distance priority)",
    "Manual",
    "Repeating Flash",
    "N/A",  # not a Nikon setting; used when the mode is unknown
)
_FLASH_CONTROL_MODE_MASK = 0x7F

CONTRAST_DETECT_AF = ("Off", "On")

AF_AREA_MODES_PHASE = (
    "Single Area",
    "Dynamic Area",
    "Dynamic Area (closest subject)",
    "Group Dynamic ",
    "Dynamic Area (9 points) ",
    "Dynamic Area (21 points)",
    "Dynamic Area (51 points) ",
    "Dynamic Area (51 points, 3D-tracking)",
    "Auto-area",
    "Dynamic Area (3D-tracking)",
    "Single Area (wide)",
    "Dynamic Area (wide)",
    "Dynamic Area (wide, 3D-tracking)",
)

AF_AREA_MODES_CONTRAST = (
    "Contrast-detect",
    "Contrast-detect (normal area)",
    "Contrast-detect (wide area)",
    "Contrast-detect (face priority)",
    "Contrast-detect (subject tracking)",
)

PHASE_DETECT_AF = ("Off", "On (51-point)", "On (11-point)", "On (39-point)")

AF_POINTS_51 = (
    "(none)", "C6 (Center)", "B6", "A5", "D6", "E5", "C7", "B7", "A6", "D7",
    "E6", "C5", "B5", "A4", "D5", "E4", "C8", "B8", "A7", "D8", "E7", "C9",
    "B9", "A8", "D9", "E8", "C10", "B10", "A9", "D10", "E9", "C11", "B11",
    "D11", "C4", "B4", "A3", "D4", "E3", "C3", "B3", "A2", "D3", "E2", "C2",
    "B2", "A1", "D2", "E1", "C1", "B1", "D1",
)

AF_POINTS_11 = (
    "(none)", "Center", "Top", "Bottom", "Mid-left", "Upper-left",
    "Lower-left", "Far Left", "Mid-right", "Upper-right", "Lower-right",
    "Far Right",
)

AF_POINTS_39 = (
    "(none)", "C6 (Center)", "B6", "A2", "D6", "E2", "C7", "B7", "A3", "D7",
    "E3", "C5", "B5", "A1", "D5", "E1", "C8", "B8", "D8", "C9", "B9", "D9",
    "C10", "B10", "D10", "C11", "B11", "D11", "C4", "B4", "D4", "C3", "B3",
    "D3", "C2", "B2", "D2", "C1", "B1", "D1",
)

PICTURE_CONTROL_ADJUST = ("Default Settings", "Quick Adjust", "Full Control")

_ACTIVE_D_LIGHTING = {
    0: "Off",
    1: "Low",
    3: "Normal",
    5: "High",
    7: "Extra High",
    65535: "Auto",
}

_FLASH_INFO_VERSIONS = frozenset(
    {
        (22, ord("3")),  # FlashInfo0103
        (22, ord("4")),  # FlashInfo0104
        (21, ord("2")),  # FlashInfo0102
        (19, ord("0")),  # FlashInfo0100
    }
)

# Maker-note values are held in a field of this many bytes, terminator included,
# so longer values are cut short before they are parsed.
_FIELD_LEN = 128

_FLASH_NOT_FIRED = "Flash: Flash did not fire\n"

_UINT = 1 << 32

_DIRECTIVE = re.compile(r"%(\*?)(\d*)([uXsf])|(\s+)|(.)", re.S)
_WHITESPACE = re.compile(r"\s*")
_CONVERSIONS = {
    "u": re.compile(r"[+-]?\d+"),
    "X": re.compile(r"[+-]?(?:0[xX](?=[0-9a-fA-F]))?[0-9a-fA-F]+"),
    "s": re.compile(r"\S+"),
    "f": re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?"),
}


def _to_float32(value: float) -> float:
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def _convert(conv: str, text: str) -> int | float | str:
    if conv == "u":
        return int(text) % _UINT
    if conv == "X":
        return int(text, 16) % _UINT
    if conv == "f":
        return _to_float32(float(text))
    return text


def _scan(fmt: str, text: str) -> list[int | float | str]:
    """Match ``text`` against a scanf-style format, returning the converted values.

    Matching stops at the first mismatch; values converted before it are kept.
    """
    values: list[int | float | str] = []
    pos = 0
    for directive in _DIRECTIVE.finditer(fmt):
        suppress, width, conv, space, literal = directive.groups()
        if space:
            pos = _WHITESPACE.match(text, pos).end()
            continue
        if literal is not None:
            if not text.startswith(literal, pos):
                break
            pos += len(literal)
            continue
        pos = _WHITESPACE.match(text, pos).end()
        limit = min(len(text), pos + int(width)) if width else len(text)
        found = _CONVERSIONS[conv].match(text, pos, limit)
        if found is None:
            break
        pos = found.end()
        if not suppress:
            values.append(_convert(conv, found.group()))
    return values


def _scan_with_defaults(fmt: str, text: str, defaults: list) -> list:
    values = _scan(fmt, text)
    return values + defaults[len(values):]


def _field(raw: str) -> str:
    return raw[: _FIELD_LEN - 1]


def primary_af_point(phase_detect_af: int, point: int) -> str:
    """Name the primary AF point for a phase-detect AF system.

    Returns an empty string when ``point`` is outside the system's table.
    """
    if phase_detect_af == 0:
        return "FAIL"
    tables = {1: AF_POINTS_51, 2: AF_POINTS_11, 3: AF_POINTS_39}
    table = tables.get(phase_detect_af)
    if table is None:
        return "?"
    return table[point] if 0 <= point < len(table) else ""


def flash_output(value: int) -> str:
    """Describe flash output power, stored in steps of 1/6 stop below full."""
    if value == 0:
        return "Full"
    if value % 6 == 0:
        return f"1/{1 << (value // 6)}"
    return "1/2^(%f)" % (value / 6.0)


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def format_flash_exposure_compensation(raw: str) -> str:
    """Format maker-note tag 18, snapping the value to the nearest 1/6 EV."""
    (data,) = _scan_with_defaults(
        "Flash Exposure Compensation: %f", _field(raw), [0.0]
    )
    if math.isfinite(data):
        steps = (_round_half_away(data * 6.0) + 128) % 256 - 128
    else:
        steps = 0
    return "FlashExposureCompensation: %+.1f EV\n" % (steps / 6.0)


def format_active_d_lighting(raw: str) -> str:
    """Format maker-note tag 34 (Active D-Lighting)."""
    (data,) = _scan_with_defaults("(null): %u", _field(raw), [0])
    answer = _ACTIVE_D_LIGHTING.get(data, "N/A")
    return f"Active D-Lightning: {answer}\n"


def _decode_hex_name(field: str) -> str:
    chars = []
    value = 0
    for start in range(0, len(field), 2):
        decoded = _scan("%2X", field[start:start + 2])
        if decoded:
            value = decoded[0] % 256
        chars.append(chr(value))
    return "".join(chars).split("\0", 1)[0].rstrip(" ")


def format_picture_control(raw: str) -> str:
    """Format maker-note tag 35 (picture control data).

    Returns an empty string unless the data is a 58-byte version 0 record.
    """
    (
        length,
        version,
        name_hex,
        base_hex,
        adjust,
        quick,
        sharpness,
        contrast,
        brightness,
        saturation,
        hue,
    ) = _scan_with_defaults(
        "(null): %u bytes unknown data: 303130%02X%40s%40s%*8s"
        "%02X%02X%02X%02X%02X%02X%02X",
        _field(raw),
        [0, 0, "", "", 0, 0, 0, 0, 0, 0, 0],
    )
    if not (length == 58 and version == ord("0") and adjust < len(PICTURE_CONTROL_ADJUST)):
        return ""
    return (
        f"PictCtrlData: Name: {_decode_hex_name(name_hex)}; "
        f"Base: {_decode_hex_name(base_hex)}; "
        f"CtrlAdj: {PICTURE_CONTROL_ADJUST[adjust]}; Quick: {quick}; "
        f"Shrp: {sharpness}; Contr: {contrast}; Brght: {brightness}; "
        f"Sat: {saturation}; Hue: {hue}\n"
    )


def format_flash_control_mode(raw: str) -> str:
    """Format maker-note tag 168 (flash info: control mode and power).

    Returns an empty string for unknown flash info versions or modes.
    """
    length, version, _flags, mode, output, _compensation = _scan_with_defaults(
        "(null): %u bytes unknown data: 303130%02X%*8s%02X%02X%02X%02X",
        _field(raw),
        [0, 0, 0, len(FLASH_CONTROL_MODES) - 1, 0, 0],
    )
    mode &= _FLASH_CONTROL_MODE_MASK
    if mode >= len(FLASH_CONTROL_MODES) or (length, version) not in _FLASH_INFO_VERSIONS:
        return ""
    return (
        f"NikonFlashControlMode: {FLASH_CONTROL_MODES[mode]} "
        f"(Power: {flash_output(output)})\n"
    )


def format_af_info2(raw: str) -> str:
    """Format maker-note tag 183 (AF info 2).

    Describes contrast-detect AF when it was used, otherwise phase-detect AF;
    returns an empty string when neither applies.
    """
    length, version, contrast_af, area_mode, phase_af, primary = _scan_with_defaults(
        "(null): %u bytes unknown data: 303130%02X%02X%02X%02X%02X",
        _field(raw),
        [0, 0, 0, 0, 0, 0],
    )
    if not (
        length == 30
        and version == ord("0")
        and contrast_af < len(CONTRAST_DETECT_AF)
        and phase_af < len(PHASE_DETECT_AF)
    ):
        return ""
    if contrast_af != 0 and area_mode < len(AF_AREA_MODES_CONTRAST):
        return (
            f"ContrastDetectAF: {CONTRAST_DETECT_AF[contrast_af]}; "
            f"AFAreaMode: {AF_AREA_MODES_CONTRAST[area_mode]}\n"
        )
    if phase_af != 0 and area_mode < len(AF_AREA_MODES_PHASE):
        return (
            f"PhaseDetectAF: {PHASE_DETECT_AF[phase_af]}; "
            f"AreaMode: {AF_AREA_MODES_PHASE[area_mode]}; "
            f"PrimaryAFPoint: {primary_af_point(phase_af, primary)}\n"
        )
    return ""


def nikon_tag_text(tag: int, mnote_tag: Callable[[int], str], flash_line: str) -> str:
    """Return the display text for one Nikon maker-note tag.

    ``mnote_tag`` maps a tag number to its "Title: value" line, or an empty
    string; ``flash_line`` is the "Flash: ..." line of the image. Flash
    details are shown only when the flash fired.
    """
    fired = flash_line.rstrip(" ") != _FLASH_NOT_FIRED
    if tag in (8, 9, 135):
        return mnote_tag(tag) if fired else ""
    if tag == 18:
        return format_flash_exposure_compensation(mnote_tag(18)) if fired else ""
    if tag == 34:
        return format_active_d_lighting(mnote_tag(34))
    if tag == 35:
        return format_picture_control(mnote_tag(35))
    if tag == 168:
        return format_flash_control_mode(mnote_tag(168)) if fired else ""
    if tag == 183:
        return format_af_info2(mnote_tag(183))
    return mnote_tag(tag)
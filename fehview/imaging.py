"""Image loading, saving and simple drawing and filtering operations."""

from __future__ import annotations

import errno
import logging
import math
import os

from PIL import Image, ImageDraw, ImageFilter, ImageFont, UnidentifiedImageError

__all__ = [
    "ImageLoadError",
    "load_image",
    "image_format",
    "save_image",
    "clone_image",
    "create_rotated_image",
    "blur",
    "sharpen",
    "create_cropped_scaled_image",
    "fill_rectangle",
    "draw_rectangle",
    "draw_line",
    "flip_horizontal",
    "flip_vertical",
    "orientate",
    "clip",
    "load_font",
]

log = logging.getLogger(__name__)

Color = tuple[int, int, int, int]

_ERRNO_REASONS = {
    errno.ENOENT: "File does not exist",
    errno.EISDIR: "Directory specified for image filename",
    errno.EACCES: "No read access to directory",
    errno.ENAMETOOLONG: "Path specified is too long",
    errno.ENOTDIR: "Path component is not a directory",
    errno.EFAULT: "Path points outside address space",
    errno.ELOOP: "Too many levels of symbolic links",
    errno.ENOMEM: "Out of memory",
    errno.EMFILE: "Out of file descriptors",
    errno.ENFILE: "Out of file descriptors",
    errno.EROFS: "Cannot write to directory",
    errno.ENOSPC: "Cannot write - out of disk space",
}

_ORIENTATIONS = {
    1: Image.Transpose.ROTATE_270,  # 90 degrees clockwise
    2: Image.Transpose.ROTATE_180,
    3: Image.Transpose.ROTATE_90,  # 90 degrees counter-clockwise
    4: Image.Transpose.FLIP_LEFT_RIGHT,
    5: Image.Transpose.TRANSPOSE,
    6: Image.Transpose.FLIP_TOP_BOTTOM,
    7: Image.Transpose.TRANSVERSE,
}


class ImageLoadError(Exception):
    """An image could not be loaded; ``reason`` says why."""

    def __init__(self, path: str | os.PathLike, reason: str) -> None:
        super().__init__(f"{os.fspath(path)} - {reason}")
        self.path = os.fspath(path)
        self.reason = reason


def load_image(path: str | os.PathLike) -> Image.Image:
    """Load and decode the image at ``path``, raising ImageLoadError on failure."""
    try:
        with Image.open(path) as image:
            image.load()
            return image
    except UnidentifiedImageError as exc:
        raise ImageLoadError(path, "No loader for that file format") from exc
    except OSError as exc:
        reason = _ERRNO_REASONS.get(
            exc.errno, "Unknown error. Attempting to continue"
        )
        raise ImageLoadError(path, reason) from exc
    except (ValueError, SyntaxError, Image.DecompressionBombError) as exc:
        raise ImageLoadError(path, "Unknown error. Attempting to continue") from exc


def image_format(image: Image.Image) -> str | None:
    """Return the lower-case name of the format the image was loaded from."""
    return image.format.lower() if image.format else None


def save_image(image: Image.Image, path: str | os.PathLike) -> None:
    """Save ``image``, choosing the format from the lower-cased file extension."""
    target = os.fspath(path)
    _, ext = os.path.splitext(target)
    fmt = Image.registered_extensions().get(ext.lower()) if ext else None
    if fmt is None:
        fmt = image.format
    if fmt is None:
        raise ValueError(f"cannot determine image format for {target}")
    to_save = image
    if fmt == "JPEG" and image.mode not in ("RGB", "L", "CMYK"):
        to_save = image.convert("RGB")
    to_save.save(target, format=fmt)


def clone_image(image: Image.Image) -> Image.Image:
    """Return an independent copy of ``image``."""
    copy = image.copy()
    copy.format = image.format
    return copy


def create_rotated_image(image: Image.Image, angle: float) -> Image.Image:
    """Return ``image`` rotated clockwise by ``angle`` radians.

    The result is a square large enough to hold the image at any angle, with
    the image centred on a transparent background.
    """
    rgba = image if image.mode == "RGBA" else image.convert("RGBA")
    width, height = rgba.size
    side = max(1, math.ceil(math.hypot(width, height)))
    canvas = Image.new("RGBA", (side, side), (0, 0, 0, 0))
    canvas.paste(rgba, ((side - width) // 2, (side - height) // 2))
    if angle == 0:
        return canvas
    return canvas.rotate(-math.degrees(angle), resample=Image.Resampling.BICUBIC)


def blur(image: Image.Image, radius: int) -> None:
    """Blur ``image`` in place; a non-positive radius leaves it unchanged."""
    if radius > 0:
        image.paste(image.filter(ImageFilter.GaussianBlur(radius)))


def sharpen(image: Image.Image, radius: int) -> None:
    """Sharpen ``image`` in place; a non-positive radius leaves it unchanged."""
    if radius > 0:
        image.paste(image.filter(ImageFilter.UnsharpMask(radius=radius)))


def create_cropped_scaled_image(
    image: Image.Image,
    sx: int,
    sy: int,
    sw: int,
    sh: int,
    dw: int,
    dh: int,
    antialias: bool = True,
) -> Image.Image:
    """Crop the ``sw`` x ``sh`` region at (``sx``, ``sy``) and scale it to ``dw`` x ``dh``."""
    if dw <= 0 or dh <= 0:
        raise ValueError("destination size must be positive")
    region = image.crop((sx, sy, sx + sw, sy + sh))
    resample = Image.Resampling.LANCZOS if antialias else Image.Resampling.NEAREST
    return region.resize((dw, dh), resample=resample)


def _draw(image: Image.Image) -> ImageDraw.ImageDraw:
    if image.mode in ("RGB", "RGBA"):
        return ImageDraw.Draw(image, "RGBA")
    return ImageDraw.Draw(image)


def fill_rectangle(
    image: Image.Image, x: int, y: int, w: int, h: int, color: Color
) -> None:
    """Fill a ``w`` x ``h`` rectangle at (``x``, ``y``), blending by the colour's alpha."""
    if w <= 0 or h <= 0:
        return
    _draw(image).rectangle((x, y, x + w - 1, y + h - 1), fill=tuple(color))


def draw_rectangle(
    image: Image.Image, x: int, y: int, w: int, h: int, color: Color
) -> None:
    """Draw the one-pixel outline of a ``w`` x ``h`` rectangle at (``x``, ``y``)."""
    if w <= 0 or h <= 0:
        return
    _draw(image).rectangle((x, y, x + w - 1, y + h - 1), outline=tuple(color))


def draw_line(
    image: Image.Image, x1: int, y1: int, x2: int, y2: int, color: Color
) -> None:
    """Draw a one-pixel line between two points."""
    _draw(image).line((x1, y1, x2, y2), fill=tuple(color), width=1)


def flip_horizontal(image: Image.Image) -> None:
    """Mirror ``image`` left to right in place."""
    image.paste(image.transpose(Image.Transpose.FLIP_LEFT_RIGHT))


def flip_vertical(image: Image.Image) -> None:
    """Mirror ``image`` top to bottom in place."""
    image.paste(image.transpose(Image.Transpose.FLIP_TOP_BOTTOM))


def orientate(image: Image.Image, orientation: int) -> Image.Image:
    """Return ``image`` turned by an orientation code.

    1, 2 and 3 rotate clockwise by 90, 180 and 270 degrees; 4 flips
    horizontally, 5 transposes, 6 flips vertically and 7 transverses.
    Any other value returns an unchanged copy.
    """
    method = _ORIENTATIONS.get(orientation)
    if method is None:
        return image.copy()
    return image.transpose(method)


def clip(
    x: int, y: int, w: int, h: int, xx: int, yy: int, ww: int, hh: int
) -> tuple[int, int, int, int]:
    """Clip the rectangle (x, y, w, h) to the rectangle (xx, yy, ww, hh)."""
    if yy > y:
        h -= yy - y
        y = yy
    if yy + hh < y + h:
        h -= y + h - (yy + hh)
    if xx > x:
        w -= xx - x
        x = xx
    if xx + ww < x + w:
        w -= x + w - (xx + ww)
    return (x, y, w, h)


def load_font(name: str, size: int):
    """Load a TrueType font, falling back to a common font and then the built-in one."""
    try:
        return ImageFont.truetype(name, size)
    except OSError:
        log.warning("couldn't load font %s, attempting to fall back to a default.", name)
    try:
        return ImageFont.truetype("DejaVuSans.ttf", size)
    except OSError:
        log.warning("failed to load a fallback font, using the built-in font.")
    return ImageFont.load_default()
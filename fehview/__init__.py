"""File lists, PNG text comments, colours, image helpers and EXIF summaries for an image viewer."""

__version__ = "0.1.0"

__all__ = [
    "colors",
    "exif",
    "filelist",
    "hashes",
    "imaging",
    "lists",
    "nikon",
    "pngtext",
    "style",
]
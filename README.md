# fehview

Building blocks for a lightweight image viewer. The package handles the work
around the pixels: collecting and ordering image files, reading and writing
file lists, PNG text comments, colour strings, simple image operations (built
on Pillow) and readable EXIF summaries.

## Installation

```
pip install .
```

Running the tests needs the `test` extra:

```
pip install ".[test]"
pytest
```

## Modules

- `fehview.lists`
  - `jump(items, index, direction, num)` moves `num` steps through a sequence
    with wrap-around at both ends (`Direction.FORWARD` / `Direction.BACK`);
    it returns `None` for an empty sequence and `0` when `index` is `None`.
  - `randomize(items, rng)` returns a shuffled copy (Fisher-Yates), using the
    given `random.Random` if one is passed.
  - `merge_sort(items, cmp)` sorts with a three-way comparison function; on
    ties the element from the right half comes first.
  - `string_split(string, delimiter)` splits and drops an empty trailing piece;
    an empty delimiter raises `ValueError`.
- `fehview.hashes`: `CaseInsensitiveDict`, an insertion-ordered mapping with
  string keys that compare without regard to case. A key keeps the spelling it
  was first inserted with.
- `fehview.style`: `StyleBit` (an offset and an optional colour) and `Style`
  (a named list of bits) describe text drawn several times, e.g. for shadows.
  `Style.draw_shift()`, `Style.adjust_text_size(width, height)` and
  `Style.bit_color(bit, default)` give the drawing offset, the enlarged text
  size and the colour each bit is drawn in.
- `fehview.colors`: `parse_color` accepts `#RRGGBB`, `#RRGGBBAA`, `r,g,b` and
  `r,g,b,a` and returns an RGBA tuple, raising `ValueError` for anything else;
  `parse_fontpath` splits a colon-separated path into a list.
- `fehview.pngtext`: `is_png(stream)` checks the PNG signature;
  `read_comments(path)` returns the text chunks (tEXt, zTXt, iTXt) before the
  image data as a `CaseInsensitiveDict`, or `None`; `write_png(image, stream,
  comments)` writes an RGBA PNG with up to four text comments.
- `fehview.imaging`: `load_image` (raises `ImageLoadError` with a `reason`),
  `save_image` (format from the file extension), `image_format`,
  `clone_image`, `create_rotated_image`, `blur`, `sharpen`,
  `create_cropped_scaled_image`, `fill_rectangle`, `draw_rectangle`,
  `draw_line`, `flip_horizontal`, `flip_vertical`, `orientate`, `clip` and
  `load_font` (falls back to a default font).
- `fehview.filelist`: `FileList` gathers files from paths, directories
  (one level, or deeper with `recursive=True`), URLs (kept as entries, not
  downloaded) and `-` for standard input. `FileListOptions` controls
  filtering by dimension, sorting (`SortMode`), version sorting, reversing
  and shuffling; `FileList.prepare()` applies them. Also `sort_files`,
  `version_compare`, `load_file_info`, `read_filelist`, `write_filelist`,
  `absolute_path` and `http_unescape`.
- `fehview.nikon`: readable text for selected Nikon maker-note tags
  (flash, Active D-Lighting, picture control, AF info) via `nikon_tag_text`.
- `fehview.exif`: `ExifData.from_file(path)` reads the Exif directories of an
  image; `exif_info(ed, nikon_tags, canon_tags)` builds a readable summary
  (description, camera and lens, exposure, mode, flash, date, maker-note
  tags, GPS). `from_file` does not read maker notes; to include them,
  set `ExifData.makernote` to a list of `MakerNoteEntry` values.

## Example

```python
from fehview.filelist import FileList, FileListOptions, SortMode

files = FileList(FileListOptions(sort=SortMode.NAME, recursive=True))
files.add_recursively("/home/me/Pictures")
files.prepare()
for f in files:
    print(f.filename)
```

```python
from fehview.colors import parse_color

parse_color("#ff8000")      # (255, 128, 0, 255)
parse_color("10,20,30,40")  # (10, 20, 30, 40)
```

## What this package does not do

There is no viewer: no window, no screen rendering, no keyboard or mouse
handling, no menus, slideshow or thumbnail display, and no command-line
program. Paths given as URLs are listed but never fetched. The package
provides the file handling, metadata and image-processing pieces such a
viewer would use.
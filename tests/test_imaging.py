import pytest
from PIL import Image

from fehview import imaging
from fehview.imaging import ImageLoadError


def _gradient(width, height):
    image = Image.new("RGB", (width, height))
    for x in range(width):
        for y in range(height):
            image.putpixel((x, y), (x * 40 % 256, y * 40 % 256, (x + y) * 20 % 256))
    return image


def test_save_and_load_round_trip(tmp_path):
    original = _gradient(5, 4)
    target = tmp_path / "picture.PNG"
    imaging.save_image(original, target)
    loaded = imaging.load_image(target)
    assert loaded.size == original.size
    assert list(loaded.convert("RGB").getdata()) == list(original.getdata())
    assert imaging.image_format(loaded) == "png"


def test_image_format_of_new_image_is_none():
    assert imaging.image_format(Image.new("RGB", (2, 2))) is None


def test_save_without_known_format_raises(tmp_path):
    with pytest.raises(ValueError):
        imaging.save_image(Image.new("RGB", (2, 2)), tmp_path / "noext")


def test_load_missing_file(tmp_path):
    with pytest.raises(ImageLoadError) as info:
        imaging.load_image(tmp_path / "missing.png")
    assert info.value.reason == "File does not exist"


def test_load_directory(tmp_path):
    with pytest.raises(ImageLoadError) as info:
        imaging.load_image(tmp_path)
    assert info.value.path == str(tmp_path)


def test_load_non_image(tmp_path):
    target = tmp_path / "text.txt"
    target.write_text("not an image")
    with pytest.raises(ImageLoadError) as info:
        imaging.load_image(target)
    assert "loader" in info.value.reason


def test_clone_is_independent():
    original = _gradient(3, 3)
    copy = imaging.clone_image(original)
    copy.putpixel((0, 0), (1, 2, 3))
    assert original.getpixel((0, 0)) == (0, 0, 0)
    assert copy.getpixel((1, 1)) == original.getpixel((1, 1))


def test_rotated_image_is_square_and_holds_image():
    image = _gradient(3, 4)
    rotated = imaging.create_rotated_image(image, 0.0)
    assert rotated.width == rotated.height
    assert rotated.width >= 4
    turned = imaging.create_rotated_image(image, 1.0)
    assert turned.size == rotated.size


def test_rotated_zero_keeps_pixels():
    image = Image.new("RGB", (3, 3), (10, 20, 30))
    rotated = imaging.create_rotated_image(image, 0.0)
    cx, cy = rotated.width // 2, rotated.height // 2
    assert rotated.getpixel((cx, cy)) == (10, 20, 30, 255)
    assert rotated.getpixel((0, 0))[3] == 0


def test_blur_uniform_stays_uniform():
    image = Image.new("RGB", (6, 6), (50, 60, 70))
    imaging.blur(image, 2)
    assert set(image.getdata()) == {(50, 60, 70)}


def test_blur_changes_checkerboard_and_zero_radius_is_noop():
    image = Image.new("L", (8, 8))
    for x in range(8):
        for y in range(8):
            image.putpixel((x, y), 255 if (x + y) % 2 else 0)
    before = list(image.getdata())
    imaging.blur(image, 0)
    assert list(image.getdata()) == before
    imaging.blur(image, 2)
    assert list(image.getdata()) != before
    assert 0 < image.getpixel((4, 4)) < 255


def test_sharpen_uniform_unchanged():
    image = Image.new("RGB", (6, 6), (100, 100, 100))
    imaging.sharpen(image, 2)
    assert set(image.getdata()) == {(100, 100, 100)}


def test_cropped_scaled_size_and_content():
    image = Image.new("RGB", (10, 10), (0, 0, 0))
    imaging.fill_rectangle(image, 2, 2, 4, 4, (255, 0, 0, 255))
    result = imaging.create_cropped_scaled_image(image, 2, 2, 4, 4, 8, 6, False)
    assert result.size == (8, 6)
    assert set(result.getdata()) == {(255, 0, 0)}


def test_cropped_scaled_rejects_empty_destination():
    with pytest.raises(ValueError):
        imaging.create_cropped_scaled_image(Image.new("RGB", (4, 4)), 0, 0, 4, 4, 0, 2, True)


def test_fill_rectangle_bounds():
    image = Image.new("RGB", (4, 4), (0, 0, 0))
    imaging.fill_rectangle(image, 1, 1, 2, 2, (255, 0, 0, 255))
    assert image.getpixel((1, 1)) == (255, 0, 0)
    assert image.getpixel((2, 2)) == (255, 0, 0)
    assert image.getpixel((3, 3)) == (0, 0, 0)
    assert image.getpixel((0, 0)) == (0, 0, 0)


def test_draw_rectangle_outline_only():
    image = Image.new("RGB", (5, 5), (0, 0, 0))
    imaging.draw_rectangle(image, 0, 0, 5, 5, (0, 255, 0, 255))
    assert image.getpixel((0, 0)) == (0, 255, 0)
    assert image.getpixel((4, 4)) == (0, 255, 0)
    assert image.getpixel((2, 2)) == (0, 0, 0)


def test_draw_line_row():
    image = Image.new("RGB", (4, 4), (0, 0, 0))
    imaging.draw_line(image, 0, 0, 3, 0, (0, 0, 255, 255))
    assert [image.getpixel((x, 0)) for x in range(4)] == [(0, 0, 255)] * 4
    assert image.getpixel((0, 1)) == (0, 0, 0)


def test_flips_are_involutions():
    image = _gradient(4, 3)
    original = list(image.getdata())
    imaging.flip_horizontal(image)
    assert image.getpixel((0, 0)) == _gradient(4, 3).getpixel((3, 0))
    imaging.flip_horizontal(image)
    assert list(image.getdata()) == original
    imaging.flip_vertical(image)
    assert image.getpixel((0, 0)) == _gradient(4, 3).getpixel((0, 2))
    imaging.flip_vertical(image)
    assert list(image.getdata()) == original


def test_orientate_rotations():
    image = _gradient(2, 3)
    quarter = imaging.orientate(image, 1)
    assert quarter.size == (3, 2)
    # clockwise quarter turn puts the bottom-left pixel at the top-left
    assert quarter.getpixel((0, 0)) == image.getpixel((0, 2))
    back = imaging.orientate(quarter, 3)
    assert list(back.getdata()) == list(image.getdata())
    assert list(imaging.orientate(image, 0).getdata()) == list(image.getdata())


def test_orientate_four_matches_flip():
    image = _gradient(3, 2)
    flipped = imaging.clone_image(image)
    imaging.flip_horizontal(flipped)
    assert list(imaging.orientate(image, 4).getdata()) == list(flipped.getdata())


def test_clip_to_inner_rectangle():
    assert imaging.clip(0, 0, 10, 10, 2, 3, 4, 5) == (2, 3, 4, 5)


def test_clip_inside_is_unchanged():
    assert imaging.clip(3, 4, 2, 2, 0, 0, 10, 10) == (3, 4, 2, 2)


def test_load_font_falls_back():
    font = imaging.load_font("no-such-font-file.ttf", 12)
    box = font.getbbox("A")
    assert len(box) == 4
    assert box[2] >= box[0]
import pytest

from fehview.colors import parse_color, parse_fontpath


def test_comma_triplet_gets_opaque_alpha():
    assert parse_color("10,20,30") == (10, 20, 30, 255)


def test_comma_quadruplet_keeps_alpha():
    assert parse_color("10,20,30,40") == (10, 20, 30, 40)


@pytest.mark.parametrize(
    "hex_spec,comma_spec",
    [
        ("#ff8000", "255,128,0"),
        ("#000000", "0,0,0"),
        ("#ffffff", "255,255,255"),
        ("#12345678", "18,52,86,120"),
        ("#ff000080", "255,0,0,128"),
    ],
)
def test_hex_and_comma_forms_agree(hex_spec, comma_spec):
    assert parse_color(hex_spec) == parse_color(comma_spec)


def test_hex_is_case_insensitive():
    assert parse_color("#AbCdEf") == parse_color("#abcdef")


def test_six_digit_hex_is_opaque():
    assert parse_color("#102030")[3] == 255


@pytest.mark.parametrize("spec", ["#fff", "#fffffff", "#", "1,2", "1,2,3,4,5", ""])
def test_invalid_specs_raise(spec):
    with pytest.raises(ValueError):
        parse_color(spec)


def test_trailing_comma_is_dropped():
    assert parse_color("1,2,3,") == parse_color("1,2,3")


def test_non_numeric_components_read_as_zero():
    assert parse_color("x,5,y") == (0, 5, 0, 255)


def test_components_allow_leading_space():
    assert parse_color("1, 2, 3") == (1, 2, 3, 255)


def test_invalid_hex_digits_read_as_zero():
    assert parse_color("#zzzzzz") == (0, 0, 0, 255)


def test_fontpath_splits_on_colon():
    assert parse_fontpath("/usr/share/fonts:/opt/fonts") == [
        "/usr/share/fonts",
        "/opt/fonts",
    ]


def test_fontpath_empty_or_none():
    assert parse_fontpath(None) == []
    assert parse_fontpath("") == []


def test_fontpath_single_entry_with_trailing_colon():
    assert parse_fontpath("/fonts:") == ["/fonts"]
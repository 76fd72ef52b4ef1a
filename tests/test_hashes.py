import pytest

from fehview.hashes import CaseInsensitiveDict


def test_get_is_case_insensitive():
    d = CaseInsensitiveDict()
    d["Comment"] = "hello"
    assert d["comment"] == "hello"
    assert d["COMMENT"] == "hello"


def test_set_existing_key_replaces_value_keeps_spelling():
    d = CaseInsensitiveDict()
    d["Title"] = "first"
    d["TITLE"] = "second"
    assert len(d) == 1
    assert list(d) == ["Title"]
    assert d["title"] == "second"


def test_similar_keys_do_not_clobber():
    d = CaseInsensitiveDict()
    d["key1"] = "a"
    d["key11"] = "b"
    assert d["key1"] == "a"
    assert d["key11"] == "b"
    assert len(d) == 2


def test_missing_key_raises_keyerror():
    d = CaseInsensitiveDict({"a": 1})
    with pytest.raises(KeyError):
        d["b"]
    assert "b" not in d
    assert dict(d.items()) == {"a": 1}


def test_get_with_default_for_missing():
    d = CaseInsensitiveDict()
    assert d.get("absent") is None
    assert d.get("absent", "dflt") == "dflt"


def test_insertion_order_preserved():
    keys = ["Software", "Author", "Description"]
    d = CaseInsensitiveDict((k, i) for i, k in enumerate(keys))
    assert list(d) == keys
    assert list(d.values()) == [0, 1, 2]


def test_init_from_mapping():
    source = {"X": 1, "y": 2}
    d = CaseInsensitiveDict(source)
    assert dict(d.items()) == source


def test_delete_case_insensitive():
    d = CaseInsensitiveDict({"Name": "v"})
    del d["NAME"]
    assert len(d) == 0
    assert "name" not in d


def test_delete_missing_raises():
    d = CaseInsensitiveDict({"kept": "v"})
    with pytest.raises(KeyError):
        del d["nothing"]
    assert len(d) == 1
    assert d["KEPT"] == "v"


def test_contains_any_case():
    d = CaseInsensitiveDict({"MixedCase": 0})
    assert "mixedcase" in d
    assert "MIXEDCASE" in d


def test_non_string_key_rejected():
    d = CaseInsensitiveDict()
    with pytest.raises(TypeError):
        d[1] = "x"
    assert len(d) == 0
    assert list(d) == []
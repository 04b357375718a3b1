"""Tests for the rating side-car store."""

import json

import pytest

from whisky_catalog.errors import DeserializationError
from whisky_catalog.models import Rating
from whisky_catalog.ratings import RatingStore


def test_missing_document_is_empty(tmp_path):
    """A whisky nobody rated has no document and no ratings."""
    store = RatingStore(tmp_path / "ratings")
    assert store.load("abc") == []


def test_save_creates_directory_and_writes_array(tmp_path):
    """Saving writes a JSON array of Stars/Message objects."""
    store = RatingStore(tmp_path / "ratings")
    store.save("abc", [Rating(5, "Smoky"), Rating(3, "Fine")])

    path = tmp_path / "ratings" / "abc.json"
    assert path.exists()
    assert json.loads(path.read_text()) == [
        {"Stars": 5, "Message": "Smoky"},
        {"Stars": 3, "Message": "Fine"},
    ]
    assert store.load("abc") == [Rating(5, "Smoky"), Rating(3, "Fine")]


def test_save_overwrites_previous_document(tmp_path):
    store = RatingStore(tmp_path)
    store.save("abc", [Rating(1, "old")])
    store.save("abc", [])
    assert store.load("abc") == []
    # No temp files left behind
    assert [p.name for p in tmp_path.iterdir()] == ["abc.json"]


def test_malformed_json_raises(tmp_path):
    (tmp_path / "abc.json").write_text("[{not json", encoding="utf-8")
    with pytest.raises(DeserializationError):
        RatingStore(tmp_path).load("abc")


def test_wrong_shape_raises(tmp_path):
    """Non-array documents and entries without Stars are rejected."""
    store = RatingStore(tmp_path)
    (tmp_path / "obj.json").write_text('{"Stars": 5}', encoding="utf-8")
    with pytest.raises(DeserializationError):
        store.load("obj")

    (tmp_path / "nostars.json").write_text('[{"Message": "hi"}]', encoding="utf-8")
    with pytest.raises(DeserializationError):
        store.load("nostars")


def test_delete(tmp_path):
    store = RatingStore(tmp_path)
    store.save("abc", [Rating(4, "ok")])
    assert store.delete("abc") is True
    assert store.delete("abc") is False
    assert store.load("abc") == []


def test_invalid_utf8_raises(tmp_path):
    (tmp_path / "abc.json").write_bytes(b'[{"Stars": 5, "Message": "\xff\xfe"}]')
    with pytest.raises(DeserializationError):
        RatingStore(tmp_path).load("abc")

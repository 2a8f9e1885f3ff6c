from __future__ import annotations

import json
from pathlib import Path

import pytest

from app.storage import LectureDocument, LectureStore

from conftest import make_lecture


def test_load_missing_file_is_empty(empty_store: LectureStore) -> None:
    document = empty_store.load()
    assert document.lectures == []
    assert not empty_store.path.exists()


def test_load_unreadable_file_is_empty(tmp_path: Path) -> None:
    path = tmp_path / "lectures.json"
    path.write_text("{not json", encoding="utf-8")
    assert LectureStore(path).load().lectures == []


def test_load_undecodable_file_is_empty(tmp_path: Path) -> None:
    path = tmp_path / "lectures.json"
    path.write_bytes(b'{"lectures": ["\xff\xfe"]}')
    assert LectureStore(path).load().lectures == []


def test_load_wrong_shape_is_empty(tmp_path: Path) -> None:
    path = tmp_path / "lectures.json"
    path.write_text(json.dumps([make_lecture(1)]), encoding="utf-8")
    assert LectureStore(path).load().lectures == []


def test_load_propagates_io_errors(tmp_path: Path) -> None:
    folder = tmp_path / "lectures.json"
    folder.mkdir()
    with pytest.raises(OSError):
        LectureStore(folder).load()


def test_find_by_id(store: LectureStore) -> None:
    document = store.load()
    assert document.find_by_id(2)["title"] == "Lecture 2"
    assert document.find_by_id(42) is None


def test_persist_rewrites_whole_document(store: LectureStore) -> None:
    document = store.load()
    document.find_by_id(1)["notes"] = "karma yoga"
    document.lectures.pop()
    store.persist(document)

    on_disk = json.loads(store.path.read_text(encoding="utf-8"))
    assert [lecture["id"] for lecture in on_disk["lectures"]] == [1, 2]
    assert on_disk["lectures"][0]["notes"] == "karma yoga"


def test_persist_keeps_unknown_fields(tmp_path: Path) -> None:
    store = LectureStore(tmp_path / "lectures.json")
    store.persist(LectureDocument(lectures=[make_lecture(1, duration="41:02")]))
    assert store.load().find_by_id(1)["duration"] == "41:02"


def test_last_persist_wins(store: LectureStore) -> None:
    first = store.load()
    second = store.load()
    first.find_by_id(1)["listened"] = True
    second.find_by_id(2)["bookmarked"] = True
    store.persist(first)
    store.persist(second)

    final = store.load()
    assert final.find_by_id(1)["listened"] is False
    assert final.find_by_id(2)["bookmarked"] is True

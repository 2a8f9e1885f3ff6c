from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from app.storage import LectureStore


def make_lecture(lecture_id: int, **overrides: Any) -> dict[str, Any]:
    lecture = {
        "id": lecture_id,
        "chapter": 2,
        "verseRange": f"02.{lecture_id:02d}",
        "location": "London",
        "date": "1973-08-02",
        "title": f"Lecture {lecture_id}",
        "filename": f"{lecture_id:02d} BG 02.{lecture_id:02d} London 1973-08-02 Lecture {lecture_id}",
        "audioUrl": f"https://example.com/Chapter-02/lecture_{lecture_id}.mp3",
        "listened": False,
        "bookmarked": False,
        "notes": "",
        "summary": "",
    }
    lecture.update(overrides)
    return lecture


@pytest.fixture()
def store(tmp_path: Path) -> LectureStore:
    lecture_store = LectureStore(tmp_path / "lectures.json")
    lecture_store.replace_all([make_lecture(1), make_lecture(2), make_lecture(3)])
    return lecture_store


@pytest.fixture()
def empty_store(tmp_path: Path) -> LectureStore:
    return LectureStore(tmp_path / "empty" / "lectures.json")

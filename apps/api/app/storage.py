from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger("lectures.store")


def iso_now() -> str:
    return datetime.utcnow().isoformat() + "Z"


def atomic_write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=str(path.parent), prefix=path.name, text=True)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=True, indent=2)
        os.replace(tmp_path, path)
    finally:
        if os.path.exists(tmp_path):
            try:
                os.remove(tmp_path)
            except OSError:
                pass


def read_json(path: Path, default: Any = None) -> Any:
    if not path.exists():
        return default
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


@dataclass
class LectureDocument:
    """In-memory copy of the store file: ``{"lectures": [...]}``.

    Lectures are kept as the raw dicts read from disk so fields this
    service does not know about survive a rewrite.
    """

    lectures: list[dict[str, Any]] = field(default_factory=list)

    def find_by_id(self, lecture_id: int) -> Optional[dict[str, Any]]:
        for lecture in self.lectures:
            if lecture.get("id") == lecture_id:
                return lecture
        return None

    def to_dict(self) -> dict[str, Any]:
        return {"lectures": self.lectures}


class LectureStore:
    """Whole-document JSON store for the lecture collection.

    Every ``load`` re-reads the file and every ``persist`` rewrites it in
    full. There is no locking: two overlapping load/modify/persist
    sequences race and the later ``persist`` wins.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> LectureDocument:
        try:
            data = read_json(self._path)
        except json.JSONDecodeError as exc:
            logger.warning("Unreadable lecture store %s, starting empty: %s", self._path, exc)
            return LectureDocument()
        except UnicodeDecodeError as exc:
            logger.warning("Undecodable lecture store %s, starting empty: %s", self._path, exc)
            return LectureDocument()
        if data is None:
            return LectureDocument()
        if not isinstance(data, dict) or not isinstance(data.get("lectures"), list):
            logger.warning("Lecture store %s has no lectures list, starting empty", self._path)
            return LectureDocument()
        lectures = [item for item in data["lectures"] if isinstance(item, dict)]
        return LectureDocument(lectures=lectures)

    def persist(self, document: LectureDocument) -> None:
        atomic_write_json(self._path, document.to_dict())
        logger.debug("Persisted %d lectures to %s", len(document.lectures), self._path)

    def replace_all(self, lectures: list[dict[str, Any]]) -> LectureDocument:
        document = LectureDocument(lectures=list(lectures))
        self.persist(document)
        return document

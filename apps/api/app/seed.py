"""Build the lecture store from the catalog spreadsheet.

Two steps, usable separately::

    python -m app.seed convert --csv data/prabhupada_bg_lectures.csv --out data/bg_lectures.json
    python -m app.seed seed --source data/bg_lectures.json

``seed`` overwrites the whole store and resets all tracking fields.
"""
from __future__ import annotations

import argparse
import csv
import logging
from pathlib import Path
from typing import Any, Optional, Sequence

from pydantic import ValidationError

from .config import settings
from .logging_setup import configure_logging
from .schemas import CatalogEntry, Lecture
from .storage import LectureStore, atomic_write_json, read_json

logger = logging.getLogger("lectures.seed")


def parse_filename(filename: str) -> dict[str, str]:
    # "<index> <n> <verseRange> <location> <date> <title words...>"
    parts = filename.split(" ")

    def part(index: int) -> str:
        return parts[index] if index < len(parts) else ""

    return {
        "verseRange": part(2),
        "location": part(3),
        "date": part(4),
        "title": " ".join(parts[5:]),
    }


def build_audio_url(chapter: int, filename: str, base_url: str) -> str:
    underscored = filename.replace(" ", "_") + ".mp3"
    return f"{base_url.rstrip('/')}/Chapter-{chapter:02d}/{underscored}"


def read_catalog_csv(path: Path, base_url: str) -> list[dict[str, Any]]:
    entries: list[dict[str, Any]] = []
    with path.open("r", encoding="utf-8-sig", newline="") as f:
        for line_no, row in enumerate(csv.DictReader(f), start=2):
            filename = (row.get("Filename") or "").strip()
            if not filename:
                continue
            try:
                chapter = int((row.get("Chapter") or "").strip())
            except ValueError:
                logger.warning("Skipping %s line %d: invalid chapter %r", path, line_no, row.get("Chapter"))
                continue
            entry = CatalogEntry(
                chapter=chapter,
                filename=filename,
                audio_url=build_audio_url(chapter, filename, base_url),
                **parse_filename(filename),
            )
            entries.append(entry.model_dump(by_alias=True))
    return entries


def build_lectures(raw_entries: Sequence[dict[str, Any]]) -> list[dict[str, Any]]:
    """Assign 1-based ids and fresh tracking fields to catalog entries.

    Keys the catalog model does not know are carried over unchanged; ``id``
    and the tracking fields are always reset.
    """
    known = set(Lecture.model_fields)
    lectures: list[dict[str, Any]] = []
    for index, raw in enumerate(raw_entries):
        entry = CatalogEntry.model_validate(raw)
        lecture = Lecture(id=index + 1, **entry.model_dump()).model_dump(by_alias=True)
        extras = {key: value for key, value in raw.items() if key not in lecture and key not in known}
        lectures.append({**lecture, **extras})
    return lectures


def seed_store(store: LectureStore, raw_entries: Sequence[dict[str, Any]]) -> int:
    lectures = build_lectures(raw_entries)
    store.replace_all(lectures)
    logger.info("Seeded %d lectures to %s", len(lectures), store.path)
    return len(lectures)


def _convert(args: argparse.Namespace) -> int:
    entries = read_catalog_csv(args.csv, args.base_url)
    atomic_write_json(args.out, entries)
    logger.info("Generated %d lectures -> %s", len(entries), args.out)
    return 0


def _seed(args: argparse.Namespace) -> int:
    raw = read_json(args.source)
    if not isinstance(raw, list):
        logger.error("Seed source %s must contain a JSON array of lectures", args.source)
        return 1
    try:
        seed_store(LectureStore(args.store), raw)
    except ValidationError as exc:
        logger.error("Seed source %s is invalid: %s", args.source, exc)
        return 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="python -m app.seed", description="Lecture catalog import tools")
    sub = parser.add_subparsers(dest="command", required=True)

    convert = sub.add_parser("convert", help="Convert the catalog CSV to a JSON array of lectures")
    convert.add_argument("--csv", type=Path, default=settings.catalog_csv_path)
    convert.add_argument("--out", type=Path, default=settings.seed_source_path)
    convert.add_argument("--base-url", default=settings.audio_base_url)
    convert.set_defaults(handler=_convert)

    seed = sub.add_parser("seed", help="Overwrite the lecture store from a JSON array")
    seed.add_argument("--source", type=Path, default=settings.seed_source_path)
    seed.add_argument("--store", type=Path, default=settings.lectures_file)
    seed.set_defaults(handler=_seed)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(settings.log_level, settings.log_dir)
    return args.handler(args)


if __name__ == "__main__":
    raise SystemExit(main())

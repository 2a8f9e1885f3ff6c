from __future__ import annotations

import asyncio
import json
import logging
import re
from pathlib import Path
from typing import Any, Callable, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings, settings
from .llm import LLMClient, ProviderError, get_llm_client
from .logging_setup import configure_logging
from .schemas import UPDATABLE_FIELDS, ErrorResponse, SummaryResponse, UpdateResponse
from .storage import LectureDocument, LectureStore
from .summarization import LectureNotFoundError, summarize_lecture

NOT_FOUND = "Lecture not found"
SUMMARY_FAILED = "Failed to generate summary"

_ID_PATTERN = re.compile(r"\s*[+-]?\d+\s*", re.ASCII)

logger = logging.getLogger("lectures.api")


class ApiError(Exception):
    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def parse_lecture_id(raw: str) -> Optional[int]:
    """Parse a path id; anything that is not a base-10 integer yields ``None``."""
    if not _ID_PATTERN.fullmatch(raw):
        return None
    try:
        return int(raw)
    except ValueError:
        # Longer than the interpreter's integer-string digit limit.
        return None


def apply_lecture_update(lecture: dict[str, Any], payload: Any) -> list[str]:
    """Copy whitelisted, correctly typed fields from ``payload`` onto ``lecture``.

    Unknown keys and values of the wrong JSON type are ignored rather than
    rejected. Returns the names of the fields that were assigned.
    """
    if not isinstance(payload, dict):
        return []
    applied: list[str] = []
    for name, expected in UPDATABLE_FIELDS.items():
        if name not in payload:
            continue
        value = payload[name]
        if isinstance(value, expected):
            lecture[name] = value
            applied.append(name)
    return applied


def _find_lecture(document: LectureDocument, raw_id: str) -> dict[str, Any]:
    lecture_id = parse_lecture_id(raw_id)
    lecture = document.find_by_id(lecture_id) if lecture_id is not None else None
    if lecture is None:
        raise ApiError(404, NOT_FOUND)
    return lecture


async def _read_json_body(request: Request) -> Any:
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        return json.loads(raw)
    except ValueError:
        raise ApiError(400, "Invalid JSON body")


def create_app(
    store: Optional[LectureStore] = None,
    llm_factory: Optional[Callable[[], LLMClient]] = None,
    runs_dir: Optional[Path] = None,
    config: Optional[Settings] = None,
) -> FastAPI:
    config = config or settings
    configure_logging(config.log_level, config.log_dir)

    if store is None:
        store = LectureStore(config.lectures_file)
    if llm_factory is None:
        def llm_factory() -> LLMClient:
            return get_llm_client(config)
    if runs_dir is None and config.record_runs:
        runs_dir = config.runs_dir

    app = FastAPI(title=config.app_name)
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ApiError)
    async def _api_error(request: Request, exc: ApiError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(Exception)
    async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    not_found = {404: {"model": ErrorResponse}}

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/lectures")
    async def list_lectures() -> list[dict[str, Any]]:
        return store.load().lectures

    @app.get("/lectures/{lecture_id}", responses=not_found)
    async def get_lecture(lecture_id: str) -> dict[str, Any]:
        return _find_lecture(store.load(), lecture_id)

    @app.patch(
        "/lectures/{lecture_id}",
        response_model=UpdateResponse,
        responses={**not_found, 400: {"model": ErrorResponse}},
    )
    async def update_lecture(lecture_id: str, request: Request) -> dict[str, Any]:
        payload = await _read_json_body(request)
        document = store.load()
        lecture = _find_lecture(document, lecture_id)
        applied = apply_lecture_update(lecture, payload)
        store.persist(document)
        logger.info("Updated lecture=%s fields=%s", lecture.get("id"), applied)
        return {"message": "Updated successfully", "lecture": lecture}

    @app.post(
        "/lectures/{lecture_id}/summarize",
        response_model=SummaryResponse,
        responses={**not_found, 500: {"model": ErrorResponse}},
    )
    async def summarize(lecture_id: str) -> dict[str, str]:
        try:
            summary = await asyncio.to_thread(
                summarize_lecture,
                store,
                parse_lecture_id(lecture_id),
                llm_factory,
                config.summary_instruction,
                runs_dir,
            )
        except LectureNotFoundError:
            raise ApiError(404, NOT_FOUND)
        except ProviderError as exc:
            logger.error("Summary generation failed for lecture=%s: %s", lecture_id, exc)
            raise ApiError(500, SUMMARY_FAILED)
        return {"summary": summary}

    logger.info("Lecture API ready store=%s", store.path)
    return app


app = create_app()

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Optional

from .config import DEFAULT_SUMMARY_INSTRUCTION
from .llm import LLMClient, ProviderError
from .runs import save_summary_run
from .storage import LectureStore

logger = logging.getLogger("lectures.summarization")


class LectureNotFoundError(LookupError):
    def __init__(self, lecture_id: Optional[int]) -> None:
        super().__init__(f"Lecture not found: {lecture_id}")
        self.lecture_id = lecture_id


def placeholder_transcript(lecture: dict[str, Any]) -> str:
    # Stand-in until audio transcription exists.
    return (
        f"Lecture title: {lecture.get('title', '')}\n"
        f"Chapter: {lecture.get('chapter', '')}\n"
        "Content: Simulated transcript from Srila Prabhupada's lecture."
    )


def build_summary_prompt(lecture: dict[str, Any], instruction: str = DEFAULT_SUMMARY_INSTRUCTION) -> str:
    return f"{instruction}\nSummarize this:\n\n{placeholder_transcript(lecture)}"


def summarize_lecture(
    store: LectureStore,
    lecture_id: Optional[int],
    llm_factory: Callable[[], LLMClient],
    instruction: str = DEFAULT_SUMMARY_INSTRUCTION,
    runs_dir: Optional[Path] = None,
) -> str:
    """Generate a summary for one lecture and persist it into the store.

    Raises ``LectureNotFoundError`` when the id is absent and ``ProviderError``
    when no summary could be produced; the stored record is only rewritten
    after the provider returned text.
    """
    document = store.load()
    lecture = document.find_by_id(lecture_id) if lecture_id is not None else None
    if lecture is None:
        raise LectureNotFoundError(lecture_id)

    prompt = build_summary_prompt(lecture, instruction)
    try:
        llm = llm_factory()
        summary = llm.generate_summary(prompt)
    except ProviderError:
        raise
    except Exception as exc:  # noqa: BLE001
        raise ProviderError(f"Summary provider failed: {type(exc).__name__}: {exc}") from exc
    if not isinstance(summary, str):
        raise ProviderError(f"{llm.name} returned {type(summary).__name__} instead of text")

    lecture["summary"] = summary
    store.persist(document)
    logger.info("Stored summary for lecture=%s provider=%s chars=%d", lecture_id, llm.name, len(summary))

    if runs_dir is not None:
        try:
            save_summary_run(runs_dir, lecture_id, prompt, summary, provider=llm.name, model=llm.model)
        except OSError as exc:
            logger.warning("Could not record summary run for lecture=%s in %s: %s", lecture_id, runs_dir, exc)
    return summary

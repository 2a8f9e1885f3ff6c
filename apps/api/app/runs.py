from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from .storage import iso_now


def save_summary_run(
    runs_dir: Path,
    lecture_id: int,
    prompt: str,
    summary: str,
    provider: str,
    model: str,
    meta: Optional[dict] = None,
) -> Path:
    """Record one summarization request as ``<timestamp>-lecture-<id>-summary.json``."""
    runs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = iso_now()
    path = runs_dir / f"{timestamp.replace(':', '-')}-lecture-{lecture_id}-summary.json"
    payload = {
        "run_type": "summary",
        "timestamp": timestamp,
        "lecture_id": lecture_id,
        "provider": provider,
        "model": model,
        "prompt": prompt,
        "response": summary,
        "meta": meta or {},
    }
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=True, indent=2)
    return path

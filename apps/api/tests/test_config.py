from __future__ import annotations

import logging
from pathlib import Path

from app.config import Settings, _clean_api_key
from app.logging_setup import configure_logging


def test_clean_api_key() -> None:
    assert _clean_api_key('  "Bearer abc123" ') == "abc123"
    assert _clean_api_key("'xyz'") == "xyz"


def test_settings_defaults() -> None:
    config = Settings(llm_provider="mock")
    assert config.gemini_model == "gemini-1.5-flash"
    assert config.runs_dir == config.data_dir / "runs"
    assert "Bhagavad Gita" in config.summary_instruction


def test_configure_logging_writes_file(tmp_path: Path) -> None:
    log_path = configure_logging("DEBUG", tmp_path / "logs")
    assert log_path is not None
    logging.getLogger("lectures.test").info("hello from test")
    for handler in logging.getLogger("lectures").handlers:
        handler.flush()
    assert "hello from test" in log_path.read_text(encoding="utf-8")
    configure_logging("INFO", None)

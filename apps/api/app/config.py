from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings


ROOT_DIR = Path(__file__).resolve().parents[3]

DEFAULT_SUMMARY_INSTRUCTION = (
    "You are a devotional assistant who summarizes Srila Prabhupada's "
    "Bhagavad Gita lectures in a respectful and concise way."
)

DEFAULT_AUDIO_BASE_URL = (
    "https://audio.iskcondesiretree.com/01_-_Srila_Prabhupada/01_-_Lectures/"
    "01_-_English/01_-_Topic_wise/Bhagavad_Gita"
)


class Settings(BaseSettings):
    app_name: str = "Lecture Tracker API"
    environment: str = "development"

    data_dir: Path = ROOT_DIR / "data"
    lectures_file: Optional[Path] = None
    seed_source_path: Optional[Path] = None
    catalog_csv_path: Optional[Path] = None
    audio_base_url: str = DEFAULT_AUDIO_BASE_URL

    cors_origins: list[str] = ["*"]

    llm_provider: str = "mock"
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-1.5-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com"
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    llm_timeout_seconds: float = 60.0
    summary_instruction: str = DEFAULT_SUMMARY_INSTRUCTION

    record_runs: bool = False

    log_level: str = "INFO"
    log_dir: Optional[Path] = None

    class Config:
        env_file = (
            ".env",
            str(ROOT_DIR / ".env"),
            str(ROOT_DIR / "apps" / "api" / ".env"),
        )
        env_prefix = ""

    @property
    def runs_dir(self) -> Path:
        return self.data_dir / "runs"


def _clean_api_key(value: str) -> str:
    cleaned = value.strip().strip('"').strip("'")
    if cleaned.lower().startswith("bearer "):
        cleaned = cleaned.split(" ", 1)[1].strip()
    return cleaned


def _apply_data_dir(config: Settings) -> None:
    if config.lectures_file is None:
        config.lectures_file = config.data_dir / "lectures.json"
    if config.seed_source_path is None:
        config.seed_source_path = config.data_dir / "bg_lectures.json"
    if config.catalog_csv_path is None:
        config.catalog_csv_path = config.data_dir / "prabhupada_bg_lectures.csv"


settings = Settings()
if settings.gemini_api_key:
    settings.gemini_api_key = _clean_api_key(settings.gemini_api_key)
if settings.openai_api_key:
    settings.openai_api_key = _clean_api_key(settings.openai_api_key)

try:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
except OSError:
    settings.data_dir = Path("/tmp/lecture-tracker")
    settings.data_dir.mkdir(parents=True, exist_ok=True)
_apply_data_dir(settings)

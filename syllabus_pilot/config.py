"""Runtime configuration loaded from the environment and CLI flags."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


DEFAULT_MODEL = "deepseek-chat"
DEFAULT_BASE_URL = "https://api.deepseek.com"


@dataclass
class PilotConfig:
    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    api_key: str | None = None
    temperature: float = 0.1
    max_tokens: int = 4096
    store_dir: Path = Path("data/progress")
    pdf_password: str | None = None

    @classmethod
    def from_env(cls, env_file: str | os.PathLike | None = None) -> "PilotConfig":
        load_dotenv(env_file)
        return cls(
            model=os.environ.get("SYLLABUS_PILOT_MODEL", DEFAULT_MODEL),
            base_url=os.environ.get("SYLLABUS_PILOT_BASE_URL", DEFAULT_BASE_URL),
            api_key=os.environ.get("DEEPSEEK_API_KEY") or os.environ.get("OPENAI_API_KEY"),
            store_dir=Path(os.environ.get("SYLLABUS_PILOT_STORE_DIR", "data/progress")),
        )

    def require_api_key(self) -> str:
        if not self.api_key:
            raise ValueError("API key required. Provide --api-key or set DEEPSEEK_API_KEY.")
        return self.api_key

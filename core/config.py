import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

DEFAULT_MODEL = "gpt-3.5-turbo"
DEFAULT_TIMEOUT_SECONDS = 30.0


@dataclass
class Settings:
    openai_api_key: Optional[str] = None
    openai_model: str = DEFAULT_MODEL
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    assistant_api_url: str = "http://localhost:8000/api/ai-assistant"
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    log_level: str = "INFO"
    log_json: bool = False

    @property
    def has_llm(self) -> bool:
        return bool(self.openai_api_key)

    @property
    def has_store(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)


def _env(*names: str) -> Optional[str]:
    for name in names:
        value = os.getenv(name)
        if value:
            return value.strip()
    return None


def _split_origins(raw: Optional[str]) -> List[str]:
    if not raw:
        return ["*"]
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    return origins or ["*"]


def load_settings(env_file: Optional[Path] = None) -> Settings:
    """Read settings from the environment, loading a .env file first if present."""
    load_dotenv(dotenv_path=env_file or Path.cwd() / ".env")

    timeout_raw = _env("ASSISTANT_TIMEOUT_SECONDS")
    try:
        timeout = float(timeout_raw) if timeout_raw else DEFAULT_TIMEOUT_SECONDS
    except ValueError:
        raise ValueError(f"ASSISTANT_TIMEOUT_SECONDS must be a number, got {timeout_raw!r}")
    if timeout <= 0:
        raise ValueError("ASSISTANT_TIMEOUT_SECONDS must be positive")

    return Settings(
        openai_api_key=_env("OPENAI_API_KEY"),
        openai_model=_env("OPENAI_MODEL") or DEFAULT_MODEL,
        supabase_url=_env("SUPABASE_URL", "EXPO_PUBLIC_SUPABASE_URL"),
        supabase_key=_env("SUPABASE_ANON_KEY", "EXPO_PUBLIC_SUPABASE_ANON_KEY"),
        cors_origins=_split_origins(_env("ASSISTANT_CORS_ORIGINS")),
        assistant_api_url=_env("ASSISTANT_API_URL") or Settings.assistant_api_url,
        timeout_seconds=timeout,
        log_level=_env("LOG_LEVEL") or "INFO",
        log_json=(_env("LOG_JSON") or "").lower() in ("1", "true", "yes"),
    )

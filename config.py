import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_AI_API_URL = "https://ai.hackclub.com/chat/completions"
DEFAULT_AI_MODEL = "gpt-3.5-turbo"
DEFAULT_MEALDB_API_URL = "https://www.themealdb.com/api/json/v1/1"
DEFAULT_HTTP_TIMEOUT = 30.0


@dataclass
class Settings:
    """Runtime configuration read from the environment (and .env)."""

    spoonacular_api_key: Optional[str] = None
    ai_api_url: str = DEFAULT_AI_API_URL
    ai_model: str = DEFAULT_AI_MODEL
    ai_api_key: Optional[str] = None
    mealdb_api_url: str = DEFAULT_MEALDB_API_URL
    http_timeout: float = DEFAULT_HTTP_TIMEOUT


def _timeout_from_env(raw: Optional[str]) -> float:
    if not raw:
        return DEFAULT_HTTP_TIMEOUT
    try:
        timeout = float(raw)
    except ValueError:
        return DEFAULT_HTTP_TIMEOUT
    return timeout if timeout > 0 else DEFAULT_HTTP_TIMEOUT


def load_settings() -> Settings:
    return Settings(
        spoonacular_api_key=os.getenv("SPOONACULAR_API_KEY") or None,
        ai_api_url=os.getenv("AI_API_URL") or DEFAULT_AI_API_URL,
        ai_model=os.getenv("AI_MODEL") or DEFAULT_AI_MODEL,
        ai_api_key=os.getenv("AI_API_KEY") or None,
        mealdb_api_url=(os.getenv("MEALDB_API_URL") or DEFAULT_MEALDB_API_URL).rstrip("/"),
        http_timeout=_timeout_from_env(os.getenv("HTTP_TIMEOUT")),
    )

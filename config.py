"""
Central configuration

Purpose: single source of truth for the completion endpoint, API key, model name, output cap,
timeouts, retry policy and logging level.

Input: environment variables (optionally from a .env file next to this module).

Output: module-level constants used by other modules (strings, numbers).

Example: LLM_MODEL=gpt-4o-mini LLM_MAX_RETRIES=2 uvicorn API:app
"""
import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv(dotenv_path=os.path.join(os.path.dirname(__file__), ".env"))


def _float_env(name: str, default: Optional[float]) -> Optional[float]:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return float(value)


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return int(value)


API_KEY = os.getenv("API_KEY") or os.getenv("OPENAI_API_KEY")
LLM_ENDPOINT = os.getenv("LLM_ENDPOINT", "https://api.openai.com/v1/chat/completions")
LLM_MODEL = os.getenv("LLM_MODEL", "gpt-3.5-turbo")
LLM_MAX_TOKENS = _int_env("LLM_MAX_TOKENS", 512)
LLM_TEMPERATURE = _float_env("LLM_TEMPERATURE", None)  # None -> provider default
LLM_TIMEOUT = _float_env("LLM_TIMEOUT", 30.0)

# Retries happen in RetryingCompletionClient only. 0 = single attempt.
LLM_MAX_RETRIES = _int_env("LLM_MAX_RETRIES", 0)
LLM_RETRY_BACKOFF = _float_env("LLM_RETRY_BACKOFF", 1.0)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

SYSTEM_PERSONA = "You are a helpful medical assistant."
DEGRADED_MESSAGE = "Could not analyze medication documents. Please try again later."

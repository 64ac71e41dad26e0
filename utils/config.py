import os, streamlit as st

def _get(name, default=None):
    try:
        v = st.secrets.get(name, os.getenv(name, default))
    except Exception:
        # no secrets.toml on this host (tests, plain scripts)
        v = os.getenv(name, default)
    return v.strip() if isinstance(v, str) else v

def _get_float(name, default: float) -> float:
    try:
        return float(_get(name, default))
    except (TypeError, ValueError):
        return default

def _get_int(name, default: int) -> int:
    try:
        return int(_get(name, default))
    except (TypeError, ValueError):
        return default

OPENAI_API_KEY = _get("OPENAI_API_KEY")
OPENAI_BASE_URL = _get("OPENAI_BASE_URL") or None   # any OpenAI-compatible endpoint


EVALUATION_MODEL = _get("EVALUATION_MODEL", "gpt-4o-mini")
EVALUATION_TEMPERATURE = _get_float("EVALUATION_TEMPERATURE", 0.3)
SET_EVALUATION_TEMPERATURE = _get_float("SET_EVALUATION_TEMPERATURE", 0.5)
EVALUATION_MAX_TOKENS = _get_int("EVALUATION_MAX_TOKENS", 3000)
EVALUATION_MAX_ATTEMPTS = max(1, _get_int("EVALUATION_MAX_ATTEMPTS", 2))

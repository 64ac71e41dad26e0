# core/llm_service.py
from __future__ import annotations
from typing import Optional, Iterable
import logging

from langchain_openai import ChatOpenAI
from langchain_core.messages import HumanMessage, SystemMessage, BaseMessage
from utils import config

logger = logging.getLogger(__name__)

def _require_key() -> str:
    if not config.OPENAI_API_KEY:
        raise RuntimeError("OPENAI_API_KEY is not set. Check your secrets/env.")
    return config.OPENAI_API_KEY

def get_llm(model: Optional[str] = None, temperature: float = 0.3, max_tokens: Optional[int] = None) -> ChatOpenAI:
    return ChatOpenAI(
        model=model or config.EVALUATION_MODEL,
        temperature=temperature,
        api_key=_require_key(),
        base_url=config.OPENAI_BASE_URL,
        max_tokens=max_tokens,
    )

def _lc_msg(msg: dict) -> BaseMessage:
    return SystemMessage(content=msg["content"]) if msg.get("role") == "system" else HumanMessage(content=msg.get("content",""))

def _get_openai_client():
    from openai import OpenAI
    return OpenAI(api_key=_require_key(), base_url=config.OPENAI_BASE_URL)

def generate_completion(
    prompt: str,
    *,
    model: Optional[str] = None,
    max_tokens: Optional[int] = None,
    temperature: Optional[float] = None,
    system: Optional[str] = None,
    extra_messages: Optional[Iterable[dict]] = None,
    response_format: Optional[dict] = None,       # -> use Chat Completions JSON mode
) -> str:
    """
    Returns the raw model text. Raises on transport/auth errors; callers decide
    whether to retry or fall back.
    """
    model = model or config.EVALUATION_MODEL
    max_tokens = max_tokens or config.EVALUATION_MAX_TOKENS
    temperature = config.EVALUATION_TEMPERATURE if temperature is None else temperature
    sys_txt = (system or "").strip()

    # JSON mode path (Chat Completions)
    if response_format:
        client = _get_openai_client()
        messages = []
        if sys_txt:
            messages.append({"role": "system", "content": sys_txt})
        if extra_messages:
            messages.extend(list(extra_messages))
        messages.append({"role": "user", "content": prompt})
        try:
            resp = client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
                response_format=response_format,     # {"type":"json_object"}
            )
        except TypeError:
            # Older SDK without response_format support – the parser copes with free text
            logger.warning("response_format unsupported by SDK; retrying without JSON mode")
            resp = client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        return (resp.choices[0].message.content or "").strip()

    # Default LangChain path
    llm = get_llm(model=model, temperature=temperature, max_tokens=max_tokens)
    msgs: list[BaseMessage] = []
    if sys_txt:
        msgs.append(SystemMessage(content=sys_txt))
    if extra_messages:
        msgs.extend(_lc_msg(m) for m in extra_messages)
    msgs.append(HumanMessage(content=prompt))

    ai_message = llm.invoke(msgs)
    content = getattr(ai_message, "content", "")
    if isinstance(content, str):
        return content.strip()
    # content blocks
    return " ".join(seg.get("text", "") for seg in content if isinstance(seg, dict)).strip()

"""Tests for the LLM client wrapper (no network)."""

from unittest.mock import MagicMock

import pytest

from core import llm_service
from utils import config


def _mock_openai_client(content):
    client = MagicMock()
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    client.chat.completions.create.return_value = response
    return client


@pytest.mark.unit
def test_missing_key_raises(monkeypatch):
    monkeypatch.setattr(config, "OPENAI_API_KEY", None)
    with pytest.raises(RuntimeError):
        llm_service.generate_completion("hi", response_format={"type": "json_object"})


@pytest.mark.unit
def test_json_mode_uses_chat_completions(monkeypatch):
    client = _mock_openai_client('  {"ok": true}  ')
    monkeypatch.setattr(llm_service, "_get_openai_client", lambda: client)

    out = llm_service.generate_completion(
        "Evaluate this", system="Be strict", response_format={"type": "json_object"},
    )

    assert out == '{"ok": true}'
    kwargs = client.chat.completions.create.call_args.kwargs
    assert kwargs["response_format"] == {"type": "json_object"}
    assert kwargs["messages"][0] == {"role": "system", "content": "Be strict"}
    assert kwargs["messages"][-1] == {"role": "user", "content": "Evaluate this"}
    assert kwargs["model"] == config.EVALUATION_MODEL


@pytest.mark.unit
def test_plain_mode_uses_langchain(monkeypatch):
    llm = MagicMock()
    llm.invoke.return_value = MagicMock(content=" plain text ")
    monkeypatch.setattr(llm_service, "get_llm", lambda **kwargs: llm)

    assert llm_service.generate_completion("Hello", system="sys") == "plain text"
    messages = llm.invoke.call_args.args[0]
    assert [m.content for m in messages] == ["sys", "Hello"]

import asyncio
import json
from types import SimpleNamespace

import pytest

from src.services.openai_service import OpenAIService
from src.services.supabase_service import SupabaseService

from conftest import FakeSupabase


class FakeCompletions:
    def __init__(self, content):
        self.content = content
        self.requests = []

    def create(self, **kwargs):
        self.requests.append(kwargs)
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _openai_service(content):
    service = OpenAIService("sk-test", model="gpt-test")
    completions = FakeCompletions(content)
    service.client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return service, completions


def test_secret_from_environment_wins(monkeypatch):
    client = FakeSupabase({"app_settings": [{"key": "TELEGRAM_BOT_TOKEN", "value": "from-table"}]})
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "from-env")

    service = SupabaseService("https://example.supabase.co", "key", client=client)
    assert service.get_secret("TELEGRAM_BOT_TOKEN") == "from-env"
    assert client.calls == []


def test_secret_falls_back_to_settings_table(monkeypatch):
    client = FakeSupabase({"app_settings": [{"key": "OPENAI_API_KEY", "value": "from-table"}]})
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("MISSING_SECRET", raising=False)

    service = SupabaseService("https://example.supabase.co", "key", client=client)
    assert service.get_secret("OPENAI_API_KEY") == "from-table"
    assert service.get_secret("MISSING_SECRET") is None
    assert service.get_client() is client


def test_secret_read_error_returns_none(monkeypatch):
    client = FakeSupabase()
    client.failures.add(("app_settings", "select"))
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)

    service = SupabaseService("https://example.supabase.co", "key", client=client)
    assert service.get_secret("OPENAI_API_KEY") is None


def test_suggest_sends_profile_and_kind():
    service, completions = _openai_service("- Drink water")

    text = asyncio.run(service.suggest("meal", {"goal": "cutting"}, {"climate": "hot"}))

    assert text == "- Drink water"
    request = completions.requests[0]
    assert request["model"] == "gpt-test"
    assert request["messages"][0]["content"].startswith("You are a Filipino nutrition coach")
    assert '"goal": "cutting"' in request["messages"][1]["content"]


def test_suggest_rejects_unknown_kind():
    service, completions = _openai_service("ignored")
    with pytest.raises(ValueError):
        asyncio.run(service.suggest("sleep", {}))
    assert completions.requests == []


def test_monthly_review_parses_json():
    review = {"assessment": "Good month", "adjustments": {"workout": [], "meal": []}}
    service, completions = _openai_service(json.dumps(review))

    result = asyncio.run(service.monthly_review({"goal": "bulking"}, {"total_workouts": 12}, month="2024-05"))

    assert result == review
    assert completions.requests[0]["response_format"] == {"type": "json_object"}


def test_monthly_review_falls_back_to_plain_text():
    service, _ = _openai_service("Great consistency, keep going!")
    result = asyncio.run(service.monthly_review({}, {}))
    assert result == {"assessment": "Great consistency, keep going!"}


def test_general_chat_includes_history():
    service, completions = _openai_service("Kain ka ng gulay!")
    history = [{"role": "user", "content": "Hi"}, {"role": "assistant", "content": "Hello!"}]

    answer = asyncio.run(service.general_chat("Ano ang kakainin ko?", history))

    assert answer == "Kain ka ng gulay!"
    messages = completions.requests[0]["messages"]
    assert [m["role"] for m in messages] == ["system", "user", "assistant", "user"]
    assert messages[-1]["content"] == "Ano ang kakainin ko?"

"""Tests for the completion client."""
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.exceptions import LLMConfigurationError


def sdk_client(choices):
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=SimpleNamespace(choices=choices))
    return client


def choice(content):
    return SimpleNamespace(message=SimpleNamespace(content=content))


@pytest.mark.asyncio
class TestCompletionClient:
    async def test_requests_json_object(self):
        from app.services.llm_client import CompletionClient

        sdk = sdk_client([choice('{"questions": []}')])
        client = CompletionClient(api_key="sk-test", model="gpt-4o", client=sdk)

        text = await client.complete("system", "user", 0.8)

        assert text == '{"questions": []}'
        kwargs = sdk.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o"
        assert kwargs["temperature"] == 0.8
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["messages"] == [
            {"role": "system", "content": "system"},
            {"role": "user", "content": "user"},
        ]

    async def test_no_choices(self):
        from app.services.llm_client import CompletionClient

        client = CompletionClient(api_key="sk-test", client=sdk_client([]))

        assert await client.complete("system", "user", 0.7) == ""

    async def test_empty_content(self):
        from app.services.llm_client import CompletionClient

        client = CompletionClient(api_key="sk-test", client=sdk_client([choice(None)]))

        assert await client.complete("system", "user", 0.7) == ""


class TestCompletionClientDependency:
    def test_missing_key(self, monkeypatch):
        from app.config import settings
        from app.services.llm_client import get_completion_client

        monkeypatch.setattr(settings, "openai_api_key", None)

        with pytest.raises(LLMConfigurationError) as exc_info:
            get_completion_client()

        assert exc_info.value.message == "OpenAI configuration is missing."

    def test_configured(self, monkeypatch):
        from app.config import settings
        from app.services.llm_client import CompletionClient, get_completion_client

        monkeypatch.setattr(settings, "openai_api_key", "sk-test")
        monkeypatch.setattr(settings, "openai_model", "gpt-4o-mini")

        client = get_completion_client()

        assert isinstance(client, CompletionClient)
        assert client.model == "gpt-4o-mini"

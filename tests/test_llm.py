"""
Tests for the generative-text client
"""
from unittest.mock import AsyncMock, MagicMock

import httpx
import openai
import pytest

from lead_intake.errors import AIProcessingError
from lead_intake.services.llm import LLMClient, _strip_markdown_json


class TestGenerateJson:

    @pytest.mark.asyncio
    async def test_returns_parsed_object(self, openai_client_factory):
        client = openai_client_factory({"decision": "good_fit"})
        llm = LLMClient(client, "test-model")

        data = await llm.generate_json("instructions", "prompt", stage="analysis")

        assert data == {"decision": "good_fit"}

    @pytest.mark.asyncio
    async def test_requests_json_object_output(self, openai_client_factory):
        """System message carries the instruction document; JSON-only output is requested"""
        client = openai_client_factory({})
        llm = LLMClient(client, "test-model", temperature=0.1)

        await llm.generate_json("SYSTEM DOC", "task prompt", stage="analysis")

        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["messages"][0] == {"role": "system", "content": "SYSTEM DOC"}
        assert kwargs["messages"][1] == {"role": "user", "content": "task prompt"}

    @pytest.mark.asyncio
    async def test_markdown_fence_is_stripped(self, openai_client_factory):
        client = openai_client_factory('```json\n{"ok": true}\n```')
        llm = LLMClient(client, "test-model")

        assert await llm.generate_json("i", "p", stage="analysis") == {"ok": True}

    @pytest.mark.asyncio
    async def test_non_json_raises(self, openai_client_factory):
        client = openai_client_factory("Sure! Here is the analysis you asked for.")
        llm = LLMClient(client, "test-model")

        with pytest.raises(AIProcessingError) as exc_info:
            await llm.generate_json("i", "p", stage="composition")

        assert exc_info.value.stage == "composition"
        assert "not valid JSON" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_json_array_raises(self, openai_client_factory):
        client = openai_client_factory("[1, 2, 3]")
        llm = LLMClient(client, "test-model")

        with pytest.raises(AIProcessingError):
            await llm.generate_json("i", "p", stage="analysis")

    @pytest.mark.asyncio
    async def test_empty_content_raises(self, openai_client_factory):
        client = openai_client_factory("")
        llm = LLMClient(client, "test-model")

        with pytest.raises(AIProcessingError) as exc_info:
            await llm.generate_json("i", "p", stage="analysis")

        assert "empty" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_api_error_raises(self):
        request = httpx.Request("POST", "https://api.openai.test/v1/chat/completions")
        client = MagicMock()
        client.chat.completions.create = AsyncMock(side_effect=openai.APITimeoutError(request=request))
        llm = LLMClient(client, "test-model")

        with pytest.raises(AIProcessingError) as exc_info:
            await llm.generate_json("i", "p", stage="analysis")

        assert exc_info.value.stage == "analysis"


def test_strip_markdown_leaves_plain_json():
    assert _strip_markdown_json('  {"a": 1}  ') == '{"a": 1}'

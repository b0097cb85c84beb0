from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import openai
import pytest

from statement_ingest.completion.exceptions import CompletionError, CompletionNetworkError
from statement_ingest.completion.openai_client_adapter import OpenAIClientAdapter

_ASYNC_OPENAI = "statement_ingest.completion.openai_client_adapter.openai.AsyncOpenAI"


def _make_mock_response(content: str | None) -> MagicMock:
    choice = MagicMock()
    choice.message.content = content
    response = MagicMock()
    response.choices = [choice]
    return response


def _make_adapter(create: AsyncMock) -> OpenAIClientAdapter:
    mock_client = MagicMock()
    mock_client.chat.completions.create = create
    with patch(_ASYNC_OPENAI, return_value=mock_client):
        return OpenAIClientAdapter(api_key="k", timeout_seconds=30, base_url=None)


async def _complete(adapter: OpenAIClientAdapter, system_prompt: str = "system") -> str:
    return await adapter.create_chat_completion(
        model="m",
        temperature=0.1,
        max_tokens=100,
        system_prompt=system_prompt,
        user_prompt="user",
    )


class TestOpenAIClientAdapter:
    async def test_returns_content(self) -> None:
        create = AsyncMock(return_value=_make_mock_response('{"ok": true}'))
        adapter = _make_adapter(create)

        assert await _complete(adapter) == '{"ok": true}'
        messages = create.call_args.kwargs["messages"]
        assert messages[0] == {"role": "system", "content": "system"}
        assert create.call_args.kwargs["max_tokens"] == 100

    async def test_omits_empty_system_prompt(self) -> None:
        create = AsyncMock(return_value=_make_mock_response("[]"))
        adapter = _make_adapter(create)

        await _complete(adapter, system_prompt="")

        assert create.call_args.kwargs["messages"] == [{"role": "user", "content": "user"}]

    async def test_raises_error_for_empty_content(self) -> None:
        adapter = _make_adapter(AsyncMock(return_value=_make_mock_response(None)))
        with pytest.raises(CompletionError, match="empty response"):
            await _complete(adapter)

    async def test_raises_error_for_no_choices(self) -> None:
        response = MagicMock()
        response.choices = []
        adapter = _make_adapter(AsyncMock(return_value=response))
        with pytest.raises(CompletionError, match="no choices"):
            await _complete(adapter)

    async def test_raises_network_error_on_connection_failure(self) -> None:
        create = AsyncMock(side_effect=openai.APIConnectionError(request=MagicMock()))
        adapter = _make_adapter(create)
        with pytest.raises(CompletionNetworkError, match="network error"):
            await _complete(adapter)

    async def test_raises_network_error_on_timeout(self) -> None:
        adapter = _make_adapter(AsyncMock(side_effect=httpx.TimeoutException("timeout")))
        with pytest.raises(CompletionNetworkError, match="network error"):
            await _complete(adapter)

    async def test_raises_network_error_on_api_error(self) -> None:
        create = AsyncMock(
            side_effect=openai.APIError(message="server error", request=MagicMock(), body=None)
        )
        adapter = _make_adapter(create)
        with pytest.raises(CompletionNetworkError, match="API error"):
            await _complete(adapter)

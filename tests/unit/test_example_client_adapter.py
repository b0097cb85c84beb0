"""Tests for ExampleClientAdapter (offline reference adapter)."""

import json

from statement_ingest.completion.example_client_adapter import ExampleClientAdapter


async def _complete(adapter: ExampleClientAdapter, **overrides: object) -> str:
    params: dict = {
        "model": "any",
        "temperature": 0.0,
        "max_tokens": 10,
        "system_prompt": "sys",
        "user_prompt": "user",
    }
    params.update(overrides)
    return await adapter.create_chat_completion(**params)


class TestExampleClientAdapter:
    async def test_default_reply_is_unknown_classification(self) -> None:
        data = json.loads(await _complete(ExampleClientAdapter()))
        assert data == {"bank": "Unknown", "language": "unknown"}

    async def test_returns_configured_reply(self) -> None:
        adapter = ExampleClientAdapter(response="not json")
        assert await _complete(adapter) == "not json"

    async def test_ignores_input_parameters(self) -> None:
        adapter = ExampleClientAdapter()
        r1 = await _complete(adapter, model="a", user_prompt="u1")
        r2 = await _complete(adapter, model="b", temperature=1.0, user_prompt="u2")
        assert r1 == r2

    async def test_close_is_noop(self) -> None:
        await ExampleClientAdapter().close()

from unittest.mock import patch

import pytest

from statement_ingest.completion.example_client_adapter import ExampleClientAdapter
from statement_ingest.completion.factory import CompletionClientFactory
from statement_ingest.completion.openai_client_adapter import OpenAIClientAdapter
from statement_ingest.config.settings import Settings

_ADAPTER = "statement_ingest.completion.factory.OpenAIClientAdapter"


class TestCompletionClientFactory:
    def test_returns_none_when_ai_disabled(self) -> None:
        assert CompletionClientFactory.create(Settings(ai_enabled=False)) is None

    def test_creates_example_adapter(self) -> None:
        client = CompletionClientFactory.create(Settings(completion_provider="example"))
        assert isinstance(client, ExampleClientAdapter)

    def test_creates_openai_adapter(self) -> None:
        client = CompletionClientFactory.create(
            Settings(completion_provider="openai", completion_api_key="k")
        )
        assert isinstance(client, OpenAIClientAdapter)

    def test_known_provider_uses_default_base_url(self) -> None:
        with patch(_ADAPTER) as adapter:
            CompletionClientFactory.create(
                Settings(completion_provider="groq", completion_api_key="k")
            )
        assert adapter.call_args.kwargs["base_url"] == "https://api.groq.com/openai/v1"

    def test_base_url_override_wins(self) -> None:
        with patch(_ADAPTER) as adapter:
            CompletionClientFactory.create(
                Settings(
                    completion_provider="ollama",
                    completion_base_url="http://gpu-box:11434/v1",
                )
            )
        assert adapter.call_args.kwargs["base_url"] == "http://gpu-box:11434/v1"

    def test_openai_compatible_requires_base_url(self) -> None:
        with pytest.raises(ValueError, match="completion_base_url is required"):
            CompletionClientFactory.create(Settings(completion_provider="openai_compatible"))

    def test_unknown_provider_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown completion provider"):
            CompletionClientFactory.create(Settings(completion_provider="nope"))

"""Offline completion client.

Use this module as a reference when implementing new provider adapters.
Implement BaseCompletionClient and register the provider in CompletionClientFactory.
"""

from typing import ClassVar

from statement_ingest.completion.client_base import BaseCompletionClient


class ExampleClientAdapter(BaseCompletionClient):
    """Returns a fixed reply without any network call.

    The default reply is a valid classification object and contains no JSON
    array, so transaction extraction through this client always degrades to
    the pattern extractor.
    """

    DEFAULT_RESPONSE: ClassVar[str] = '{"bank": "Unknown", "language": "unknown"}'

    def __init__(self, response: str | None = None) -> None:
        self._response = response if response is not None else self.DEFAULT_RESPONSE

    async def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        max_tokens: int,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        _ = model, temperature, max_tokens, system_prompt, user_prompt
        return self._response

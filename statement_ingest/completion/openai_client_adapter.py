import httpx
import openai

from statement_ingest.completion.client_base import BaseCompletionClient
from statement_ingest.completion.exceptions import CompletionError, CompletionNetworkError


class OpenAIClientAdapter(BaseCompletionClient):
    """Completion client built on the OpenAI-compatible async chat API."""

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: float,
        base_url: str | None = None,
    ) -> None:
        self._client = openai.AsyncOpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
            max_retries=1,
        )

    async def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        max_tokens: int,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": user_prompt})
        try:
            response = await self._client.chat.completions.create(
                model=model,
                temperature=temperature,
                max_tokens=max_tokens,
                messages=messages,
            )
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise CompletionNetworkError(f"AI provider network error: {exc}") from exc
        except openai.APIStatusError as exc:
            raise CompletionNetworkError(
                f"AI provider API error: status {exc.status_code}"
            ) from exc
        except openai.APIError as exc:
            raise CompletionNetworkError(f"AI provider API error: {exc}") from exc

        if not response.choices:
            raise CompletionError("AI returned no choices")
        content = response.choices[0].message.content
        if content is None:
            raise CompletionError("AI returned empty response")
        return content

    async def close(self) -> None:
        await self._client.close()

from abc import ABC, abstractmethod


class BaseCompletionClient(ABC):
    """Contract for hosted text-completion providers."""

    @abstractmethod
    async def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        max_tokens: int,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        """Return the provider's reply as plain text.

        Raises:
            CompletionNetworkError: on transport, timeout or non-2xx failures.
            CompletionError: when the provider answers without content.
        """

    async def close(self) -> None:
        """Release network resources held by the client."""

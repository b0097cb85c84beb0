"""Completion-service transaction extraction."""

import asyncio

from statement_ingest.classification.models import DetectionResult
from statement_ingest.completion.client_base import BaseCompletionClient
from statement_ingest.completion.exceptions import (
    AIResponseMalformed,
    CompletionError,
    CompletionNetworkError,
)
from statement_ingest.completion.json_block import parse_json_block
from statement_ingest.completion.prompt_loader import load_prompt_template
from statement_ingest.logging.logger import Log
from statement_ingest.transactions.models import (
    CATEGORIES,
    AIExtractionFailure,
    AIFailureKind,
    TransactionBatch,
    TransactionSource,
)
from statement_ingest.transactions.schema import build_transactions

_LANGUAGE_NAMES = {"it": "Italian", "en": "English"}


class AITransactionExtractor:
    """Asks the completion service for every transaction in the statement.

    The reply is untrusted: the first JSON array is located, validated and
    turned into candidates. Every failure comes back as an
    `AIExtractionFailure` so the caller can fall back to pattern extraction.
    """

    def __init__(
        self,
        client: BaseCompletionClient,
        *,
        model: str,
        temperature: float = 0.1,
        max_tokens: int = 8000,
        timeout_seconds: float = 60.0,
        empty_is_failure: bool = True,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._timeout_seconds = timeout_seconds
        self._empty_is_failure = empty_is_failure
        self._system_prompt = load_prompt_template("system_prompt.txt")
        self._prompt_template = load_prompt_template("transactions_prompt.txt")

    async def extract(
        self, text: str, detection: DetectionResult
    ) -> TransactionBatch | AIExtractionFailure:
        prompt = self._build_prompt(text, detection)
        Log.debug(f"Transaction extraction prompt:\n{prompt}")

        try:
            reply = await asyncio.wait_for(self._call_ai(prompt), timeout=self._timeout_seconds)
        except asyncio.TimeoutError:
            return self._fail(
                AIFailureKind.TIMEOUT,
                f"AI extraction timed out after {self._timeout_seconds:g}s",
            )
        except CompletionNetworkError as exc:
            return self._fail(AIFailureKind.NETWORK, str(exc))
        except CompletionError as exc:
            return self._fail(AIFailureKind.MALFORMED, str(exc))
        Log.debug(f"AI raw response:\n{reply}")

        try:
            transactions = build_transactions(parse_json_block(reply, "["))
        except AIResponseMalformed as exc:
            return self._fail(AIFailureKind.MALFORMED, str(exc))

        if not transactions and self._empty_is_failure:
            return self._fail(AIFailureKind.EMPTY, "AI returned no transactions")
        Log.info(f"AI extraction returned {len(transactions)} transactions")
        return TransactionBatch(transactions=tuple(transactions), source=TransactionSource.AI)

    def _build_prompt(self, text: str, detection: DetectionResult) -> str:
        return self._prompt_template.format(
            bank=detection.bank,
            language=_LANGUAGE_NAMES.get(detection.language, "unknown"),
            categories=", ".join(CATEGORIES),
            text=text,
        )

    async def _call_ai(self, prompt: str) -> str:
        return await self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            max_tokens=self._max_tokens,
            system_prompt=self._system_prompt,
            user_prompt=prompt,
        )

    @staticmethod
    def _fail(kind: AIFailureKind, reason: str) -> AIExtractionFailure:
        Log.warning(f"AI transaction extraction failed ({kind.value}): {reason}")
        return AIExtractionFailure(kind=kind, reason=reason)

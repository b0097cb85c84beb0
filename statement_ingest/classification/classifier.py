import asyncio
import re

from statement_ingest.classification.banks import detect_bank
from statement_ingest.classification.models import (
    UNKNOWN_BANK,
    UNKNOWN_LANGUAGE,
    DetectionResult,
)
from statement_ingest.completion.client_base import BaseCompletionClient
from statement_ingest.completion.exceptions import AIResponseMalformed, CompletionError
from statement_ingest.completion.json_block import parse_json_block
from statement_ingest.completion.prompt_loader import load_prompt_template
from statement_ingest.extraction.quality import detect_language
from statement_ingest.logging.logger import Log

_BANK_FIELD_RE = re.compile(r'"bank"\s*:\s*"([^"]+)"', re.IGNORECASE)
_LANGUAGE_FIELD_RE = re.compile(r'"language"\s*:\s*"([^"]+)"', re.IGNORECASE)
_LANGUAGE_CODE_RE = re.compile(r"^[a-z]{2}$")


class DocumentClassifier:
    """Detects the issuing bank and the statement language.

    Asks the completion service first when one is configured; any failure,
    timeout or unusable reply falls back to name patterns and keyword counts.
    """

    def __init__(
        self,
        client: BaseCompletionClient | None,
        *,
        model: str = "",
        temperature: float = 0.1,
        sample_chars: int = 1000,
        timeout_seconds: float = 30.0,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = temperature
        self._sample_chars = sample_chars
        self._timeout_seconds = timeout_seconds
        self._system_prompt = load_prompt_template("system_prompt.txt")
        self._prompt_template = load_prompt_template("classification_prompt.txt")

    async def classify(self, text: str, use_ai: bool = True) -> DetectionResult:
        fallback = self.classify_with_patterns(text)
        if self._client is None or not use_ai:
            return fallback

        reply = await self._ask(self._client, text)
        if reply is None:
            return fallback
        detected = self._parse_reply(reply)
        if detected is None:
            Log.warning("Classification reply unusable, using pattern detection")
            return fallback
        return DetectionResult(
            bank=detected.bank if detected.bank_known else fallback.bank,
            language=detected.language if detected.language_known else fallback.language,
        )

    @staticmethod
    def classify_with_patterns(text: str) -> DetectionResult:
        return DetectionResult(bank=detect_bank(text), language=detect_language(text))

    async def _ask(self, client: BaseCompletionClient, text: str) -> str | None:
        prompt = self._prompt_template.format(text_sample=text[: self._sample_chars])
        try:
            return await asyncio.wait_for(
                client.create_chat_completion(
                    model=self._model,
                    temperature=self._temperature,
                    max_tokens=100,
                    system_prompt=self._system_prompt,
                    user_prompt=prompt,
                ),
                timeout=self._timeout_seconds,
            )
        except asyncio.TimeoutError:
            Log.warning(f"Classification timed out after {self._timeout_seconds:g}s")
        except CompletionError as exc:
            Log.warning(f"Classification request failed: {exc}")
        return None

    @classmethod
    def _parse_reply(cls, reply: str) -> DetectionResult | None:
        try:
            data = parse_json_block(reply, "{")
        except AIResponseMalformed:
            return cls._salvage_fields(reply)
        if not isinstance(data, dict):
            return None
        return DetectionResult(
            bank=cls._clean_bank(data.get("bank")),
            language=cls._clean_language(data.get("language")),
        )

    @classmethod
    def _salvage_fields(cls, reply: str) -> DetectionResult | None:
        bank_match = _BANK_FIELD_RE.search(reply)
        language_match = _LANGUAGE_FIELD_RE.search(reply)
        if bank_match is None and language_match is None:
            return None
        return DetectionResult(
            bank=cls._clean_bank(bank_match.group(1) if bank_match else None),
            language=cls._clean_language(language_match.group(1) if language_match else None),
        )

    @staticmethod
    def _clean_bank(value: object) -> str:
        if not isinstance(value, str) or not value.strip():
            return UNKNOWN_BANK
        bank = value.strip()
        return UNKNOWN_BANK if bank.lower().startswith("unknown") else bank

    @staticmethod
    def _clean_language(value: object) -> str:
        if not isinstance(value, str):
            return UNKNOWN_LANGUAGE
        language = value.strip().lower()
        return language if _LANGUAGE_CODE_RE.match(language) else UNKNOWN_LANGUAGE

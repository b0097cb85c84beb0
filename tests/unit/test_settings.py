import pytest
from pydantic import ValidationError

from statement_ingest.config.settings import Settings


class TestSettingsDefaults:
    def test_default_app_env(self) -> None:
        s = Settings()
        assert s.app_env == "dev"

    def test_default_max_file_size_is_ten_megabytes(self) -> None:
        s = Settings()
        assert s.max_file_size_bytes == 10 * 1024 * 1024

    def test_default_min_text_length(self) -> None:
        s = Settings()
        assert s.min_text_length == 100

    def test_default_pdf_engine(self) -> None:
        s = Settings()
        assert s.pdf_engine == "pdfplumber"

    def test_default_timeouts(self) -> None:
        s = Settings()
        assert s.ocr_timeout_seconds == 120
        assert s.pipeline_timeout_seconds == 300

    def test_default_completion_provider(self) -> None:
        s = Settings()
        assert s.completion_provider == "openai"

    def test_default_ocr_retry_threshold(self) -> None:
        s = Settings()
        assert s.ocr_retry_transaction_threshold == 10


class TestSettingsFromEnv:
    def test_loads_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        s = Settings()
        assert s.log_level == "DEBUG"

    def test_loads_ocr_enabled(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OCR_ENABLED", "false")
        s = Settings()
        assert s.ocr_enabled is False

    def test_loads_completion_provider(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("COMPLETION_PROVIDER", "groq")
        s = Settings()
        assert s.completion_provider == "groq"

    def test_loads_pipeline_timeout(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PIPELINE_TIMEOUT_SECONDS", "180")
        s = Settings()
        assert s.pipeline_timeout_seconds == 180

    def test_invalid_integer_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MIN_TEXT_LENGTH", "not-a-number")
        with pytest.raises(ValidationError):
            Settings()

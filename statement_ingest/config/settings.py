from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    max_file_size_bytes: int = 10 * 1024 * 1024
    min_text_length: int = 100

    pdf_engine: str = "pdfplumber"

    ocr_enabled: bool = True
    ocr_engine: str = "tesseract"
    ocr_dpi: int = 200
    ocr_timeout_seconds: float = 120.0
    ocr_tesseract_cmd: str = ""

    pipeline_timeout_seconds: float = 300.0

    ai_enabled: bool = True
    completion_provider: str = "openai"
    completion_api_key: str = ""
    completion_model_name: str = "gpt-4o-mini"
    completion_base_url: str = ""
    completion_timeout_seconds: float = 60.0
    completion_temperature: float = 0.1
    completion_max_tokens: int = 8000
    classification_sample_chars: int = 1000

    low_confidence_threshold: float = 0.5
    anomaly_amount_factor: float = 5.0
    ocr_retry_transaction_threshold: int = 10
    ai_empty_result_fallback: bool = True

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "localhost"
    db_port: int = 5432
    db_database: str = "doclens"
    db_username: str = "doclens"
    db_password: str = "secret"
    db_pool_max_size: int = 10

    storage_root: str = "./uploads"
    max_upload_size_bytes: int = 10 * 1024 * 1024
    allowed_mime_types: list[str] = [
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/gif",
        "image/webp",
        "application/pdf",
    ]

    pdf_engine: str = "pdfplumber"
    ocr_language: str = "eng"
    tesseract_cmd: str = ""
    extraction_timeout_seconds: int = 120

    assistant_provider: str = "openai"
    openai_api_key: str = ""
    openai_base_url: str = ""
    openai_model_name: str = "gpt-4o-mini"
    openai_timeout_seconds: int = 60
    assistant_temperature: float = 0.7
    assistant_max_tokens: int = 1000

    summary_max_chars: int = 150
    summary_source_chars: int = 3000
    query_history_limit: int = 5

import pytest
from pydantic import ValidationError

from doclens.config.settings import Settings


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:  # type: ignore[no-untyped-def]
    monkeypatch.chdir(tmp_path)
    for name in ("APP_ENV", "DB_PORT", "PDF_ENGINE", "OPENAI_API_KEY", "SUMMARY_MAX_CHARS"):
        monkeypatch.delenv(name, raising=False)


class TestSettingsDefaults:
    def test_default_app_env(self) -> None:
        s = Settings()
        assert s.app_env == "dev"

    def test_default_db_port(self) -> None:
        s = Settings()
        assert s.db_port == 5432

    def test_default_pdf_engine(self) -> None:
        s = Settings()
        assert s.pdf_engine == "pdfplumber"

    def test_default_upload_limit_is_ten_mebibytes(self) -> None:
        s = Settings()
        assert s.max_upload_size_bytes == 10 * 1024 * 1024

    def test_default_allowed_mime_types(self) -> None:
        s = Settings()
        assert "application/pdf" in s.allowed_mime_types
        assert "image/png" in s.allowed_mime_types
        assert "text/plain" not in s.allowed_mime_types

    def test_default_assistant_tuning(self) -> None:
        s = Settings()
        assert s.openai_model_name == "gpt-4o-mini"
        assert s.assistant_temperature == 0.7
        assert s.assistant_max_tokens == 1000

    def test_default_summary_and_history_limits(self) -> None:
        s = Settings()
        assert s.summary_max_chars == 150
        assert s.summary_source_chars == 3000
        assert s.query_history_limit == 5

    def test_api_key_is_empty_by_default(self) -> None:
        s = Settings()
        assert s.openai_api_key == ""


class TestSettingsFromEnv:
    def test_loads_app_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_ENV", "production")
        s = Settings()
        assert s.app_env == "production"

    def test_loads_db_port(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_PORT", "5433")
        s = Settings()
        assert s.db_port == 5433

    def test_loads_openai_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        s = Settings()
        assert s.openai_api_key == "sk-test"

    def test_loads_from_env_file(self, tmp_path) -> None:  # type: ignore[no-untyped-def]
        (tmp_path / ".env").write_text("SUMMARY_MAX_CHARS=80\n")
        s = Settings()
        assert s.summary_max_chars == 80


class TestSettingsValidation:
    def test_invalid_db_port_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_PORT", "not_a_number")
        with pytest.raises(ValidationError):
            Settings()

import pytest
from pydantic import ValidationError

from portfolio_review.config.settings import Settings


class TestSettingsDefaults:
    def test_default_app_env(self) -> None:
        s = Settings()
        assert s.app_env == "dev"

    def test_default_api_port(self) -> None:
        s = Settings()
        assert s.api_port == 8000

    def test_default_db_port(self) -> None:
        s = Settings()
        assert s.db_port == 5432

    def test_default_session_store_backend(self) -> None:
        s = Settings()
        assert s.session_store_backend == "memory"

    def test_default_max_upload_bytes(self) -> None:
        s = Settings()
        assert s.max_upload_bytes == 10 * 1024 * 1024

    def test_default_pdf_engine(self) -> None:
        s = Settings()
        assert s.pdf_engine == "pdfplumber"

    def test_default_interpretation_provider(self) -> None:
        s = Settings()
        assert s.interpretation_provider == "openai"

    def test_default_interpretation_timeout(self) -> None:
        s = Settings()
        assert s.interpretation_timeout_seconds == 30

    def test_phone_verification_off_by_default(self) -> None:
        s = Settings()
        assert s.require_phone_verification is False


class TestSettingsFromEnv:
    def test_loads_app_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_ENV", "production")
        s = Settings()
        assert s.app_env == "production"

    def test_loads_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        s = Settings()
        assert s.log_level == "DEBUG"

    def test_loads_db_host(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_HOST", "db.example.com")
        s = Settings()
        assert s.db_host == "db.example.com"

    def test_loads_storage_root(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STORAGE_ROOT", "/tmp/uploads")
        s = Settings()
        assert s.storage_root == "/tmp/uploads"

    def test_loads_phone_verification_flag(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("REQUIRE_PHONE_VERIFICATION", "true")
        s = Settings()
        assert s.require_phone_verification is True


class TestSettingsValidation:
    def test_invalid_db_port_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_PORT", "not_a_number")
        with pytest.raises(ValidationError):
            Settings()

    def test_invalid_temperature_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("INTERPRETATION_TEMPERATURE", "warm")
        with pytest.raises(ValidationError):
            Settings()

import pytest
from pydantic import ValidationError

from filetools.config.settings import Settings


class TestSettingsDefaults:
    def test_default_app_env(self) -> None:
        s = Settings()
        assert s.app_env == "dev"

    def test_default_pdf_engine(self) -> None:
        s = Settings()
        assert s.pdf_engine == "pdfplumber"

    def test_default_rate_limit(self) -> None:
        s = Settings()
        assert s.rate_limit_max_requests == 50
        assert s.rate_limit_window_seconds == 900

    def test_default_size_limits(self) -> None:
        s = Settings()
        assert s.pdf_max_size_bytes() == 100 * 1024 * 1024
        assert s.image_max_size_bytes() == 50 * 1024 * 1024

    def test_default_resize_width(self) -> None:
        s = Settings()
        assert s.image_resize_default_width == 800


class TestSettingsFromEnv:
    def test_loads_app_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_ENV", "production")
        s = Settings()
        assert s.app_env == "production"

    def test_loads_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        s = Settings()
        assert s.log_level == "DEBUG"

    def test_loads_pdf_engine(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PDF_ENGINE", "pymupdf")
        s = Settings()
        assert s.pdf_engine == "pymupdf"

    def test_loads_rate_limit(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RATE_LIMIT_MAX_REQUESTS", "5")
        s = Settings()
        assert s.rate_limit_max_requests == 5


class TestEffectiveMaxWorkers:
    def test_explicit_value_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MAX_WORKERS", "3")
        s = Settings()
        assert s.effective_max_workers() == 3

    def test_auto_is_capped_at_eight(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("filetools.config.settings.os.cpu_count", lambda: 32)
        s = Settings()
        assert s.effective_max_workers() == 8

    def test_auto_falls_back_when_cpu_count_unknown(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("filetools.config.settings.os.cpu_count", lambda: None)
        s = Settings()
        assert s.effective_max_workers() == 4


class TestSettingsValidation:
    def test_invalid_max_requests_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RATE_LIMIT_MAX_REQUESTS", "not_a_number")
        with pytest.raises(ValidationError):
            Settings()

    def test_invalid_pdf_size_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PDF_MAX_SIZE_MB", "abc")
        with pytest.raises(ValidationError):
            Settings()

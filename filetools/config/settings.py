import os
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

_MB = 1024 * 1024

PdfEngine = Literal["pdfplumber", "pymupdf"]


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    pdf_engine: PdfEngine = "pdfplumber"

    rate_limit_max_requests: int = 50
    rate_limit_window_seconds: int = 15 * 60

    # 0 means "derive from CPU count"
    max_workers: int = 0

    pdf_max_size_mb: int = 100
    image_max_size_mb: int = 50
    default_max_size_mb: int = 100

    image_resize_default_width: int = 800

    def pdf_max_size_bytes(self) -> int:
        return self.pdf_max_size_mb * _MB

    def image_max_size_bytes(self) -> int:
        return self.image_max_size_mb * _MB

    def default_max_size_bytes(self) -> int:
        return self.default_max_size_mb * _MB

    def effective_max_workers(self) -> int:
        """Worker pool size: explicit setting, or min(cpu_count, 8)."""
        if self.max_workers > 0:
            return self.max_workers
        return min(os.cpu_count() or 4, 8)

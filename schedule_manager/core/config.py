# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Core configuration — all env-driven, zero hardcode.
Single source of truth for every tunable parameter.
"""

import os
from pathlib import Path


class Settings:
    """Application settings loaded from environment variables.

    Values are read when the object is built, so a fresh ``Settings()``
    picks up environment changes (tests rely on this).
    """

    def __init__(self) -> None:
        self.SERVICE_NAME: str = os.getenv("SERVICE_NAME", "schedule-service")
        self.SERVICE_VERSION: str = os.getenv("SERVICE_VERSION", "1.0.0")
        self.SERVICE_PORT: int = int(os.getenv("SERVICE_PORT", "3001"))

        self.DATA_DIR: str = os.getenv("DATA_DIR", "data")
        self.SCHEDULES_FILE: str = os.getenv("SCHEDULES_FILE", "schedules.json")
        self.TEMPLATES_FILE: str = os.getenv("TEMPLATES_FILE", "templates.json")

        self.MAX_OCCURRENCES: int = int(os.getenv("MAX_OCCURRENCES", "100"))
        self.SEED_DEFAULT_TEMPLATES: bool = (
            os.getenv("SEED_DEFAULT_TEMPLATES", "true").lower() == "true"
        )

        self.CORS_ORIGINS: list[str] = os.getenv(
            "CORS_ORIGINS", "http://localhost:3000"
        ).split(",")
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def schedules_path(self) -> Path:
        return Path(self.DATA_DIR) / self.SCHEDULES_FILE

    @property
    def templates_path(self) -> Path:
        return Path(self.DATA_DIR) / self.TEMPLATES_FILE


settings = Settings()

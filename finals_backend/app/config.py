from pydantic import field_validator
from pydantic_settings import BaseSettings
from pathlib import Path
from typing import Optional


class Settings(BaseSettings):
    # Environment
    NODE_ENV: str = "development"

    # Base directory for the project
    BASE_DIR: Path = Path(__file__).parent.parent.parent

    # Storage directories
    UPLOAD_DIR: Path = BASE_DIR / "uploads"
    DOWNLOAD_DIR: Path = BASE_DIR / "downloads"
    LOGS_DIR: Path = BASE_DIR / "logs"

    # Output file name
    FINAL_EXAMS_FILENAME: str = "final_exams.csv"

    # Maximum file size (10 MB)
    MAX_FILE_SIZE: int = 10 * 1024 * 1024

    # Parsing options
    REFERENCE_YEAR: Optional[int] = None
    ALLOW_FORMAT_FALLBACK: bool = False

    LOG_LEVEL: str = "INFO"

    @field_validator("REFERENCE_YEAR")
    @classmethod
    def check_reference_year(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and not 1900 <= value <= 2100:
            raise ValueError("REFERENCE_YEAR must be a four-digit calendar year")
        return value

    @field_validator("LOG_LEVEL")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        if value.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown LOG_LEVEL {value}")
        return value.upper()

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.ensure_directories()

    @property
    def is_production(self) -> bool:
        return self.NODE_ENV.lower() == "production"

    def ensure_directories(self):
        """Ensure all necessary directories exist"""
        self.UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
        self.DOWNLOAD_DIR.mkdir(parents=True, exist_ok=True)
        self.LOGS_DIR.mkdir(parents=True, exist_ok=True)

    class Config:
        env_file = ".env"

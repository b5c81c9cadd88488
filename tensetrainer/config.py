"""
Configuration for TenseTrainer.

Settings are read from the environment; a .env file in the working
directory is loaded first so secrets stay out of git:

    GEMINI_API_KEY=...
    TENSETRAINER_NATIVE_LANGUAGE=Urdu
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_DATA_DIR = Path.home() / ".tensetrainer"
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def _env_number(name: str, default: str, kind: type = float):
    """Parse a numeric environment variable, naming it on failure."""
    raw = os.getenv(name, default)
    try:
        return kind(raw)
    except ValueError:
        raise ValueError(f"{name} must be a {kind.__name__}, got {raw!r}") from None


def _timeout_from_env() -> Optional[float]:
    """Request timeout in seconds; 0 disables it."""
    value = _env_number("TENSETRAINER_REQUEST_TIMEOUT", "60")
    return value if value > 0 else None


def _temperature_from_env() -> Optional[float]:
    """Sampling temperature override; unset keeps each prompt's own."""
    if not os.getenv("TENSETRAINER_TEMPERATURE"):
        return None
    return _env_number("TENSETRAINER_TEMPERATURE", "")


def _env(name: str, default: Optional[str] = None):
    return field(default_factory=lambda: os.getenv(name, default))


@dataclass
class Settings:
    """
    Runtime settings.

    Defaults are read from the environment each time an instance is built,
    so a malformed variable surfaces from get_settings(), not from import.
    """
    gemini_api_key: Optional[str] = _env("GEMINI_API_KEY")
    model: str = _env("TENSETRAINER_MODEL", DEFAULT_MODEL)
    temperature: Optional[float] = field(default_factory=_temperature_from_env)
    native_language: str = _env("TENSETRAINER_NATIVE_LANGUAGE", "Urdu")
    data_dir: Path = field(
        default_factory=lambda: Path(os.getenv("TENSETRAINER_DATA_DIR", str(DEFAULT_DATA_DIR)))
    )
    request_timeout: Optional[float] = field(default_factory=_timeout_from_env)
    max_retries: int = field(
        default_factory=lambda: _env_number("TENSETRAINER_MAX_RETRIES", "3", int)
    )
    log_level: str = _env("LOG_LEVEL", "INFO")

    @property
    def store_path(self) -> Path:
        """SQLite file backing the key-value store."""
        return self.data_dir / "store.db"

    def validate(self) -> None:
        """Validate settings and raise ValueError if invalid."""
        if self.temperature is not None and not 0.0 <= self.temperature <= 2.0:
            raise ValueError("TENSETRAINER_TEMPERATURE must be between 0 and 2")

        if self.max_retries < 1:
            raise ValueError("TENSETRAINER_MAX_RETRIES must be positive")

        if self.request_timeout is not None and self.request_timeout <= 0:
            raise ValueError("TENSETRAINER_REQUEST_TIMEOUT must be positive")

        if not self.native_language.strip():
            raise ValueError("TENSETRAINER_NATIVE_LANGUAGE must not be empty")

        if logging.getLevelName(self.log_level.upper()) not in (
            logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR, logging.CRITICAL
        ):
            raise ValueError(f"Unknown LOG_LEVEL: {self.log_level}")


def get_settings() -> Settings:
    """Get validated settings."""
    settings = Settings()
    settings.validate()
    return settings


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger and quiet chatty third-party loggers."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("google_genai").setLevel(logging.WARNING)

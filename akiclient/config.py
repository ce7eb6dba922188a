import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# --- Configuration ---
load_dotenv(dotenv_path=Path.cwd() / ".env")

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 6.1; Win64; x64; rv:47.0) Gecko/20100101 Firefox/47.0"
)


def parse_bool(value, default: bool = False) -> bool:
    """Read a flag given as a bool, a number or text such as 'true' / 'off'."""
    if value is None:
        return default
    if isinstance(value, (bool, int)):
        return bool(value)
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def _env_bool(name: str, default: bool) -> bool:
    return parse_bool(os.getenv(name), default)


class Settings:
    PROJECT_NAME: str = "akiclient"
    LANGUAGE: str = os.getenv("AKI_LANGUAGE", "en")
    THEME: str = os.getenv("AKI_THEME", "characters")
    CHILD_MODE: bool = _env_bool("AKI_CHILD_MODE", False)
    VARIANT: str = os.getenv("AKI_VARIANT", "json")
    TIMEOUT: float = float(os.getenv("AKI_TIMEOUT", "10"))
    USER_AGENT: str = os.getenv("AKI_USER_AGENT", DEFAULT_USER_AGENT)
    LOG_LEVEL: str = os.getenv("AKI_LOG_LEVEL", "INFO")
    WEB_PORT: int = int(os.getenv("AKI_WEB_PORT", "5001"))


settings = Settings()


def configure_logging(level=None):
    """Attach a console handler to the package logger."""
    logger = logging.getLogger(settings.PROJECT_NAME)
    logger.setLevel(level or settings.LOG_LEVEL)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
        )
        logger.addHandler(handler)
    return logger

from dotenv import load_dotenv
from dataclasses import Field, dataclass, fields
from pathlib import Path
import json
import logging
import os

from seotoolkit.constants import DEFAULT_REQUEST_TIMEOUT_SECONDS, DEFAULT_USER_AGENT

load_dotenv()  # Loads variables from .env file

logger = logging.getLogger(__name__)


class Settings:
    """
    Manages application settings loaded from environment variables.
    """
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///seo_toolkit.db")  # Default to SQLite
    DB_BACKEND = os.getenv("DB_BACKEND", "local")

    USER_AGENT = os.getenv("USER_AGENT", DEFAULT_USER_AGENT)
    FETCH_TIMEOUT = int(os.getenv("FETCH_TIMEOUT", str(DEFAULT_REQUEST_TIMEOUT_SECONDS)))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    DEFAULT_COUNTRY = os.getenv("DEFAULT_COUNTRY", "IN")


settings = Settings()


@dataclass
class AnalysisThresholds:
    """Configurable thresholds for SEO issue detection."""

    # Meta tags
    title_min: int = 30
    title_max: int = 60
    meta_description_min: int = 120
    meta_description_max: int = 160

    # Content
    thin_content_words: int = 300
    min_readability_score: float = 50.0

    # Links
    min_internal_links: int = 3

    # Keyword density band considered natural (percentage)
    keyword_density_min: float = 0.5
    keyword_density_max: float = 3.0

    # On-page structure
    min_h2_headings: int = 2

    @classmethod
    def from_env(cls, prefix: str = "SEO_THRESHOLD_") -> "AnalysisThresholds":
        """Thresholds overridden by ``SEO_THRESHOLD_<FIELD>`` variables.

        e.g. SEO_THRESHOLD_TITLE_MAX=65. Unparseable values keep the
        default and are logged.
        """
        overrides = {}
        for f in fields(cls):
            env_key = f"{prefix}{f.name.upper()}"
            raw = os.getenv(env_key)
            if raw is None:
                continue
            try:
                overrides[f.name] = _coerce(f, raw)
            except ValueError:
                logger.warning(f"Ignoring invalid value for {env_key}: {raw!r}")
        return cls(**overrides)

    @classmethod
    def from_file(cls, path: str) -> "AnalysisThresholds":
        """Thresholds from a JSON file.

        The file may hold the fields at the top level or under a
        ``thresholds`` key. A missing file yields the defaults; unknown
        keys and unparseable values are skipped.
        """
        file_path = Path(path)
        if not file_path.exists():
            logger.warning(f"Thresholds file {path} not found, using defaults")
            return cls()

        data = json.loads(file_path.read_text())
        data = data.get('thresholds', data)

        overrides = {}
        for f in fields(cls):
            if f.name not in data:
                continue
            try:
                overrides[f.name] = _coerce(f, data[f.name])
            except (TypeError, ValueError):
                logger.warning(f"Ignoring invalid threshold {f.name}: {data[f.name]!r}")
        return cls(**overrides)


def _coerce(f: Field, value):
    caster = float if f.type in (float, "float") else int
    return caster(value)


# Global default thresholds instance
default_thresholds = AnalysisThresholds()

"""
Configuration for the catalog enrichment tools.

Values come from three layers, later ones winning: dataclass defaults,
settings.json in the data directory, then environment variables (a .env
file in the working directory is honored).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from gamecatalog.utils.json_utils import load_json

logger = logging.getLogger("gamecatalog.config")


__all__ = ["Config", "config"]

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


@dataclass
class Config:
    """
    Central configuration handling for the enrichment tools.
    Manages paths, lookup thresholds, HTTP settings and UI language.
    """

    DATA_DIR: Path = Path.cwd() / "data"
    CATALOG_FILE: Path | None = None
    SETTINGS_FILE: Path | None = None
    LOG_FILE: Path | None = None

    UI_LANGUAGE: str = "en"

    # HTTP
    REQUEST_TIMEOUT: float = 30.0
    USER_AGENT: str = DEFAULT_USER_AGENT
    CANDIDATE_DELAY: float = 1.0

    # Matching and extraction
    MAX_CANDIDATES: int = 5
    MIN_CONTENT_LENGTH: int = 1000
    MATCH_THRESHOLD: float = 75.0
    NUMERAL_MATCH_THRESHOLD: float = 90.0

    # Retry policy
    COOLDOWN_DAYS: float = 7
    COOLDOWN_ATTEMPTS: int = 1

    def __post_init__(self) -> None:
        """Apply settings.json and environment overrides after instantiation."""
        load_dotenv()

        env_data_dir = os.getenv("GAMECATALOG_DATA_DIR")
        if env_data_dir:
            self.DATA_DIR = Path(env_data_dir)

        if self.SETTINGS_FILE is None:
            self.SETTINGS_FILE = self.DATA_DIR / "settings.json"

        self._load_settings()

        if self.CATALOG_FILE is None:
            self.CATALOG_FILE = self.DATA_DIR / "db.json"

        env_db = os.getenv("GAMECATALOG_DB")
        if env_db:
            self.CATALOG_FILE = Path(env_db)

        env_lang = os.getenv("GAMECATALOG_LANGUAGE")
        if env_lang:
            self.UI_LANGUAGE = env_lang

    def _load_settings(self) -> None:
        """Load settings from JSON file."""
        data = load_json(self.SETTINGS_FILE)
        if not isinstance(data, dict):
            logger.warning("Ignoring settings file %s: expected a JSON object", self.SETTINGS_FILE)
            return

        catalog_file = data.get("catalog_file")
        if catalog_file:
            self.CATALOG_FILE = Path(catalog_file)
        log_file = data.get("log_file")
        if log_file:
            self.LOG_FILE = Path(log_file)

        self.UI_LANGUAGE = data.get("ui_language", self.UI_LANGUAGE)
        self.REQUEST_TIMEOUT = float(data.get("request_timeout", self.REQUEST_TIMEOUT))
        self.USER_AGENT = data.get("user_agent", self.USER_AGENT)
        self.CANDIDATE_DELAY = float(data.get("candidate_delay", self.CANDIDATE_DELAY))
        self.MAX_CANDIDATES = int(data.get("max_candidates", self.MAX_CANDIDATES))
        self.MIN_CONTENT_LENGTH = int(data.get("min_content_length", self.MIN_CONTENT_LENGTH))
        self.MATCH_THRESHOLD = float(data.get("match_threshold", self.MATCH_THRESHOLD))
        self.NUMERAL_MATCH_THRESHOLD = float(data.get("numeral_match_threshold", self.NUMERAL_MATCH_THRESHOLD))
        self.COOLDOWN_DAYS = float(data.get("cooldown_days", self.COOLDOWN_DAYS))
        self.COOLDOWN_ATTEMPTS = int(data.get("cooldown_attempts", self.COOLDOWN_ATTEMPTS))


config = Config()

from __future__ import annotations

from typing import List
from pathlib import Path
from dotenv import load_dotenv

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator

# Load .env file explicitly
ENV_FILE_NAME = ".env"
env_path = Path(__file__).parent.parent.parent / ENV_FILE_NAME
load_dotenv(env_path, override=False)


class Settings(BaseSettings):
    DEFAULT_LANG: str = "en"
    # Comma separated, e.g. "en,he"
    SUPPORTED_LANGS: str = "en,he"
    PREFERENCE_KEY: str = "selectedLanguage"
    DATABASE_URL: str = "sqlite+aiosqlite:///./data/preferences.db"

    # Locale files are read from SITE_ROOT unless LOCALE_BASE_URL is set
    SITE_ROOT: str = "."
    LOCALE_BASE_URL: str = ""
    LOCALE_PATH_TEMPLATE: str = "assets/locales/{lang}.json"
    LOCALE_FETCH_TIMEOUT: float = 5.0

    RTL_STYLESHEET_HREF: str = "assets/css/rtl.css"
    DEBUG: bool = False

    @field_validator("SUPPORTED_LANGS", mode="before")
    @classmethod
    def parse_langs(cls, v):  # type: ignore
        if not v:
            return "en,he"
        if isinstance(v, (list, tuple)):
            return ",".join(str(x) for x in v)
        return str(v)

    @field_validator("LOCALE_BASE_URL", mode="after")
    @classmethod
    def strip_base_url(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def supported_langs(self) -> List[str]:
        return [x.strip().lower() for x in self.SUPPORTED_LANGS.split(",") if x.strip()]

    model_config = SettingsConfigDict(
        env_file=ENV_FILE_NAME,
        env_file_encoding="utf-8",
        extra="ignore",
        env_ignore_empty=True,
    )


settings = Settings()

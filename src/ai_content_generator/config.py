from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

GEMINI_OPENAI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    api_key: str = Field(default="", validation_alias=AliasChoices("API_KEY", "GEMINI_API_KEY"))
    openai_base_url: str = Field(default=GEMINI_OPENAI_BASE_URL, alias="OPENAI_BASE_URL")
    llm_model: str = Field(default="gemini-2.5-flash", alias="LLM_MODEL")

    storage_path: str = Field(default=".data/local_storage.json", alias="STORAGE_PATH")
    autosave_delay_seconds: float = Field(default=1.5, alias="AUTOSAVE_DELAY_SECONDS")
    notification_seconds: float = Field(default=3.0, alias="NOTIFICATION_SECONDS")
    max_saved_items: int = Field(default=50, alias="MAX_SAVED_ITEMS")

    def model_post_init(self, __context) -> None:  # type: ignore[override]
        self.api_key = self.api_key.strip()
        if self.max_saved_items < 1:
            self.max_saved_items = 50
        if self.autosave_delay_seconds < 0:
            self.autosave_delay_seconds = 1.5


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()

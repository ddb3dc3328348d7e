from pydantic_settings import BaseSettings
from pydantic import ConfigDict


class Settings(BaseSettings):
    SEARCH_DEBOUNCE_MS: int = 500
    SEARCH_FIRST_PAGE: int = 1

    model_config = ConfigDict(
        env_file=".env",
        extra="ignore"
    )


settings = Settings()

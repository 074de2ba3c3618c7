from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./programador.db"
    LOG_LEVEL: str = "INFO"

    # Holiday source
    HOLIDAY_COUNTRY_CODE: str = "CO"
    # "work" | "skip"; unset means an undecided holiday cancels the generation
    DEFAULT_HOLIDAY_DECISION: Optional[str] = None

    # Public schedule lookup
    PUBLIC_HISTORY_LIMIT: int = 20

    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()

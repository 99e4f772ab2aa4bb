# pos_api/config.py

from functools import lru_cache
from typing import ClassVar, List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///db.sqlite"  # file in project root
    SQL_ECHO: bool = False

    # Sample catalog/customers are only inserted into empty tables
    SEED_SAMPLE_DATA: bool = True

    STATIC_DIR: str = "public"
    CORS_ORIGINS: List[str] = ["*"]

    INVOICE_NUMBER_ATTEMPTS: int = 5
    LOG_LEVEL: str = "INFO"

    class Config:
        env_prefix: ClassVar[str] = "POS_"
        env_file: ClassVar[str] = ".env"


@lru_cache
def get_settings() -> Settings:
    return Settings()

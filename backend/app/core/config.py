# app/core/config.py
# Settings loaded from environment variables (.env)
import logging
from typing import List

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    MONGO_URI: str = "mongodb://127.0.0.1:27017"
    MONGO_DB: str = "securin"
    MONGO_COLLECTION: str = "securincol"
    STORE_BACKEND: str = "mongo"        # "mongo" | "memory"
    CORS_ORIGINS: List[str] = ["*"]
    MAX_PAGE_SIZE: int = 100
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

settings = Settings()

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

def configure_logging(level: str | None = None) -> None:
    # module-level loggers inherit this
    logging.basicConfig(level=(level or settings.LOG_LEVEL).upper(), format=LOG_FORMAT)

# schoolhub/core/config.py
"""Application configuration using Pydantic."""
from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    database_url: str
    jwt_secret_key: str

    jwt_algorithm: str = 'HS256'
    jwt_expires_minutes: int = 60 * 24 * 7

    app_version: str = '1.0.0'
    environment: str = 'development'
    log_level: str = 'info'
    allowed_origins: List[str] = ['*']

    db_pool_size: int = 10
    db_max_overflow: int = 20

    model_config = {
        'env_file': '.env',
        'extra': 'ignore'
    }

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == 'production'

settings = Settings()

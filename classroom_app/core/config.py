# classroom_app/core/config.py
"""Application configuration using Pydantic."""
from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    database_url: str = 'sqlite+aiosqlite:///./classroom.db'
    database_echo: bool = False

    app_name: str = 'classroom_app'
    app_version: str = '1.0.0'
    environment: str = 'development'
    log_level: str = 'INFO'
    allowed_origins: List[str] = ['*']

    # Join codes
    join_code_length: int = 6
    join_code_max_attempts: int = 10

    # Grading scale (inclusive)
    grade_min: float = 0
    grade_max: float = 100

    # Submission files
    upload_dir: str = './uploads'
    max_upload_size: int = 10 * 1024 * 1024

    model_config = {
        'env_file': '.env',
        'extra': 'ignore'
    }

settings = Settings()

"""
Configuration settings for the application
"""

import os
from typing import List
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application settings"""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./guest_graph.db")

    # Security
    ADMIN_TOKEN: str = os.getenv("ADMIN_TOKEN", "admin_token_123")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS
    ALLOW_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:8000",
    ]

    # Event defaults
    DEFAULT_BUDGET_TOTAL: float = 60000

    # Sync: prefer a delta transfer while changes stay under this share of all items
    DELTA_SYNC_THRESHOLD: float = 0.5

    # Reports
    TOP_INFLUENCERS_LIMIT: int = 10

    class Config:
        env_file = ".env"

settings = Settings()

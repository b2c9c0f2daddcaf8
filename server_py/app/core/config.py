from pydantic_settings import BaseSettings
from pathlib import Path
from typing import List

class Settings(BaseSettings):
    # Project
    PROJECT_NAME: str = "RUEating API"
    VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"

    # Paths
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    DATA_DIR: Path = BASE_DIR / "data"
    STATIC_DIR: Path = BASE_DIR / "public"

    # Server
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 3000

    # Database
    DATABASE_URL: str = f"sqlite+aiosqlite:///{DATA_DIR}/rueating.db"
    DATABASE_ECHO: bool = False
    SEED_DEMO_DATA: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = ["*"]

    # Nearby search
    DEFAULT_RADIUS_KM: float = 5.0
    DEFAULT_NEARBY_LIMIT: int = 10
    LOCATION_PINGS_ENABLED: bool = True  # Последний пинг важнее статической таблицы

    # Orders
    ORDER_LOOKUP_LIMIT: int = 50

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

# Создаем экземпляр настроек
settings = Settings()

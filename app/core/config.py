from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Dict, List

class Settings(BaseSettings):
    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # API Settings
    PROJECT_NAME: str = "Mess Manager API"
    API_V1_STR: str = "/api"
    PROJECT_VERSION: str = "0.1.0"
    DESCRIPTION: str = "Mess members, meals, expenses and monthly billing API"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # MongoDB
    MONGODB_URL: str = "mongodb://localhost:27017"
    DATABASE_NAME: str = "mess_manager"

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:5173", "http://localhost:3000"]

    # JWT
    SECRET_KEY: str = "change-this-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # Billing policy
    MIN_MEALS_PER_MONTH: int = 40
    GUEST_MEAL_PRICES: Dict[str, float] = {
        "fish": 40,
        "egg": 40,
        "veg": 35,
        "meat": 50,
    }

    # Market duty
    MARKET_REQUEST_LIMIT: int = 4

    # Admin bootstrap
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = "change-me"
    ADMIN_ACTOR: str = "admin"

    # Initial passwords for protected bulk deletions
    DEFAULT_FEATURE_PASSWORDS: Dict[str, str] = {
        "clear_notifications_password": "cnhis",
        "clear_guests_password": "dage",
        "clear_all_meals_password": "dame",
        "clear_expenses_password": "hdelall",
    }

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env"
    )

settings = Settings()

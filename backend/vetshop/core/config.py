from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    # Cart Storage
    CART_STORAGE_BACKEND: str = "file"  # file | mongo | memory | none
    CART_STORAGE_KEY_PREFIX: str = "vetshop:cart"
    CART_FILE_DIR: str = ".cart_data"
    CART_TTL_DAYS: int = 30  # 0 keeps carts forever
    
    # MongoDB Configuration (mongo backend only)
    MONGODB_URI: str = "mongodb://localhost:27017"
    MONGODB_DB_NAME: str = "vetshop_db"
    CART_COLLECTION: str = "carts"
    
    # Cart display
    LOW_STOCK_THRESHOLD: int = 5
    
    # Application Settings
    BACKEND_CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]
    API_V1_PREFIX: str = "/api"
    PROJECT_NAME: str = "Vetshop"
    LOG_LEVEL: str = "INFO"
    
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )


# Global settings instance
settings = Settings()

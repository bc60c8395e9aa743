from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    PROJECT_NAME: str = "DineWithUs Booking Companion"
    API_V1_STR: str = "/api"
    
    # Server
    PORT: int = 8000
    ENVIRONMENT: str = "development"
    
    # Booking backend
    BASE_URL: str = "http://localhost:3001/api"
    API_TIMEOUT: float = 30.0
    
    # Money and time
    CURRENCY: str = "EUR"
    TIMEZONE: str = "Europe/Berlin"
    
    # Logging
    LOG_LEVEL: str = "INFO"
    ERROR_LOG_PATH: str = "logs/errors.log"

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()

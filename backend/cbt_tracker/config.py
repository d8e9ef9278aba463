# backend configuration
# loads env vars for mongodb, jwt, cors and the client's api base url

import os
from pathlib import Path
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# load .env from project root
load_dotenv(Path(__file__).parent.parent.parent / ".env")


class Settings(BaseSettings):
    # mongodb
    MONGODB_URI: str = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
    MONGODB_DATABASE: str = os.getenv("MONGODB_DATABASE", "cbt_tracker")

    # jwt auth
    JWT_SECRET: str = os.getenv("JWT_SECRET", "cbt-tracker-dev-secret-change-in-production")
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7
    PASSWORD_MIN_LENGTH: int = 6

    # cors
    FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:3000")

    # client core: where the store client sends its requests
    API_URL: str = os.getenv("API_URL", "http://localhost:8000")

    # seed script
    SEED_DEMO_EMAIL: str = os.getenv("SEED_DEMO_EMAIL", "demo@cbt-tracker.app")

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()

# backend/config.py
from pydantic_settings import BaseSettings
from typing import ClassVar, Optional
from pathlib import Path

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

class Settings(BaseSettings):
    SECRET_KEY: str = "dev-secret-change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 480
    DATABASE_URL: str = "sqlite:///./shopflow.db"

    FRONTEND_URL: Optional[str] = None

    # Invoice numbering and dashboard thresholds
    INVOICE_PREFIX: str = "INV-"
    LOW_STOCK_THRESHOLD: int = 20

    # Where printable receipts are written
    RECEIPT_DIR: str = "storage/receipts"

    # Bind address for the bundled uvicorn runner
    HOST: str = "127.0.0.1"
    PORT: int = 8000

    class Config:
        env_file: ClassVar[str] = str(env_path)

settings = Settings()

# app/config.py
import os
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


class Settings(BaseModel):
    # General app settings
    APP_NAME: str = "SyncScholars Backend API"
    env: str = os.getenv("ENV", "dev")

    # Host & Port settings
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "5000"))

    # CORS origins for frontend (comma-separated in CORS_ORIGINS, "*" allows all)
    CORS_ORIGINS: list[str] = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

    # Realtime policy
    # Echo `send-message` back to its sender as `new-message` (clients that render
    # their own messages locally should turn this off)
    reflect_to_sender: bool = _env_flag("REFLECT_MESSAGES_TO_SENDER", "true")
    # Answer rejected events with an `error` event to the sender
    notify_malformed: bool = _env_flag("NOTIFY_MALFORMED_EVENTS", "true")
    # Reject `join-group` for ids with no StudyGroup row
    enforce_group_lookup: bool = _env_flag("ENFORCE_GROUP_LOOKUP", "false")

settings = Settings()  # Instantiate configuration

import os

from dotenv import load_dotenv


load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]

APP_ENV = os.getenv("APP_ENV", "development")
DEBUG = _get_bool(os.getenv("DEBUG"), default=False)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

DEFAULT_MONGODB_URI = "mongodb://localhost:27017"

MONGODB_URI = os.getenv("MONGODB_URI", DEFAULT_MONGODB_URI)
MONGODB_DATABASE = os.getenv("MONGODB_DATABASE", "Appointy")
MONGODB_USERS_COLLECTION = os.getenv("MONGODB_USERS_COLLECTION", "Users")
MONGODB_CONNECT_TIMEOUT_SECONDS = float(os.getenv("MONGODB_CONNECT_TIMEOUT_SECONDS", "15"))

REQUEST_TIMEOUT_SECONDS = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "5"))
PASSWORD_MIN_LENGTH = int(os.getenv("PASSWORD_MIN_LENGTH", "3"))

HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", "8080"))
CORS_ALLOW_ORIGINS = _get_list(os.getenv("CORS_ALLOW_ORIGINS"))

def validate_runtime_config() -> None:
    if APP_ENV.lower() == "production" and MONGODB_URI == DEFAULT_MONGODB_URI:
        raise RuntimeError("MONGODB_URI must be set in production.")
    if REQUEST_TIMEOUT_SECONDS <= 0 or MONGODB_CONNECT_TIMEOUT_SECONDS <= 0:
        raise RuntimeError("Datastore timeouts must be positive.")
    if PASSWORD_MIN_LENGTH < 1:
        raise RuntimeError("PASSWORD_MIN_LENGTH must be at least 1.")

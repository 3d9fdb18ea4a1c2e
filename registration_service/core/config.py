import logging
import sys

from registration_service.core.logging import InterceptHandler
from loguru import logger
from starlette.config import Config

# Load .env
config = Config(".env")

# Core App Settings
VERSION = "0.1.0"
API_PREFIX: str = config("API_PREFIX", default="")

DEBUG: bool = config("DEBUG", cast=bool, default=False)
DESCRIPTION: str = config("DESCRIPTION", default="Event registrations service")
DOCS_URL: str = config("DOCS_URL", default="/docs")
PROJECT_NAME: str = config("PROJECT_NAME", default="registration-service")

# DB Connection Pieces
POSTGRES_HOST: str = config("POSTGRES_HOST", default="127.0.0.1")
POSTGRES_PORT: str = config("POSTGRES_PORT", default="5432")
POSTGRES_USER: str = config("POSTGRES_USER", default="postgres")
POSTGRES_PASSWORD: str = config("POSTGRES_PASSWORD", default="password")
POSTGRES_DB: str = config("POSTGRES_DB", default="registrations")

# Full PostgreSQL URL for SQLAlchemy, DATABASE_URL wins when set
DATABASE_URL: str = config(
    "DATABASE_URL",
    default=(
        f"postgresql+asyncpg://{POSTGRES_USER}:{POSTGRES_PASSWORD}"
        f"@{POSTGRES_HOST}:{POSTGRES_PORT}/{POSTGRES_DB}"
    ),
)
DB_ECHO: bool = config("DB_ECHO", cast=bool, default=False)
CREATE_TABLES_ON_STARTUP: bool = config("CREATE_TABLES_ON_STARTUP", cast=bool, default=True)

# External directories
EVENT_SERVICE_URL: str = config("EVENT_SERVICE_URL", default="http://localhost:8081")
USER_SERVICE_URL: str = config("USER_SERVICE_URL", default="http://localhost:8082")
DIRECTORY_TIMEOUT_SECONDS: float = config("DIRECTORY_TIMEOUT_SECONDS", cast=float, default=5.0)

# Notifications
KAFKA_ENABLED: bool = config("KAFKA_ENABLED", cast=bool, default=True)
KAFKA_BOOTSTRAP_SERVERS: str = config("KAFKA_BOOTSTRAP_SERVERS", default="localhost:9092")
KAFKA_TOPIC: str = config("KAFKA_TOPIC", default="registration-notifications")

# Registration passwords: "plain" or "argon2"
PASSWORD_SCHEME: str = config("PASSWORD_SCHEME", default="plain")

# Uvicorn settings
HOST: str = config("HOST", default="0.0.0.0")
PORT: int = config("PORT", cast=int, default=8080)
RELOAD: bool = config("RELOAD", cast=bool, default=False)

# Logging
LOGGING_LEVEL = logging.DEBUG if DEBUG else logging.INFO
logging.basicConfig(
    handlers=[InterceptHandler(level=LOGGING_LEVEL)],
    level=LOGGING_LEVEL,
)
logger.configure(handlers=[{"sink": sys.stderr, "level": LOGGING_LEVEL}])

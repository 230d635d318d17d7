# deployhub/config.py
import os


def _as_int(value, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


class BaseConfig:
    CELERY_BROKER_URL = os.environ.get("CELERY_BROKER_URL", "redis://redis:6379/0")
    CELERY_RESULT_BACKEND = os.environ.get("CELERY_RESULT_BACKEND", "redis://redis:6379/0")

    # --- DB ---
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", "postgresql+psycopg2://deployhub:deployhub@db:5432/deployhub"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JSON_SORT_KEYS = False

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # --- Artifact import ---
    DEPLOYMENTS_DIR = os.environ.get("DEPLOYMENTS_DIR", "deployments")
    DEFAULT_PROJECT_NAME = os.environ.get("DEFAULT_PROJECT_NAME", "Default Project")
    IMPORT_MAX_WORKERS = _as_int(os.environ.get("IMPORT_MAX_WORKERS"), 4)

    # --- RPC ---
    ALCHEMY_API_KEY = os.environ.get("ALCHEMY_API_KEY")
    FALLBACK_RPC_URL = os.environ.get("FALLBACK_RPC_URL")
    DEFAULT_RPC_URL = os.environ.get("DEFAULT_RPC_URL", "http://localhost:8545")
    RPC_TIMEOUT = _as_int(os.environ.get("RPC_TIMEOUT"), 10)


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    ENV = "development"


class ProductionConfig(BaseConfig):
    DEBUG = False
    ENV = "production"


class TestingConfig(BaseConfig):
    TESTING = True
    ENV = "testing"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    IMPORT_MAX_WORKERS = 1
    ALCHEMY_API_KEY = None
    FALLBACK_RPC_URL = None
    DEFAULT_RPC_URL = "http://localhost:8545"

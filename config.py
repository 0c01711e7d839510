import os
from dotenv import load_dotenv
load_dotenv()


def _env_flag(name, default="0"):
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///aceleradora.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
    OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
    OPENAI_MAX_ATTEMPTS = int(os.getenv("OPENAI_MAX_ATTEMPTS", "6"))
    # recommendation thresholds over the 0-100 total
    APPROVAL_THRESHOLD = float(os.getenv("APPROVAL_THRESHOLD", "70"))
    REJECTION_THRESHOLD = float(os.getenv("REJECTION_THRESHOLD", "40"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    # JSON API clients authenticate with the session cookie; enable for browser forms
    WTF_CSRF_ENABLED = _env_flag("WTF_CSRF_ENABLED")


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    REDIS_URL = None
    OPENAI_API_KEY = None
    OPENAI_MAX_ATTEMPTS = 1
    WTF_CSRF_ENABLED = False
    LOG_LEVEL = "DEBUG"

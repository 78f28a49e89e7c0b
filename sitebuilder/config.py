"""
Configuration module for the Site Builder API
"""

# Application configuration
import os

def env_bool(key: str, default: bool = False) -> bool:
    """Get boolean value from environment variable"""
    value = os.getenv(key, str(default)).lower()
    return value in ("true", "1", "yes", "on")

# Version information
from pathlib import Path

def _read_version_from_repo(default: str = "dev") -> str:
    try:
        # repo root: sitebuilder/.. (two parents up)
        version_file = Path(__file__).resolve().parents[1] / "VERSION"
        v = version_file.read_text(encoding="utf-8").strip()
        if v:
            return v
    except Exception:
        pass
    return os.getenv("APP_VERSION", default)

APP_NAME = os.getenv("APP_NAME", "sitebuilder-api")
API_VERSION = _read_version_from_repo()

# Environment
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
IS_PRODUCTION = ENVIRONMENT.lower() == "production"

# API configuration
API_PREFIX = "/api"

# Database configuration
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./sitebuilder.db")
DB_ECHO = env_bool("DB_ECHO", False)
AUTO_MIGRATE = env_bool("AUTO_MIGRATE", False)
AUTO_CREATE_SCHEMA = env_bool("AUTO_CREATE_SCHEMA", True)
SEED_DEMO_TENANT = env_bool("SEED_DEMO_TENANT", False)

# Operator keys (full access to every tenant)
DEV_ADMIN_KEY = os.getenv("DEV_ADMIN_KEY", "DEV_ADMIN_KEY_5a8f9ffdc3")
ALLOW_DEV_KEYS = env_bool("ALLOW_DEV_KEYS", False)
ADMIN_KEYS = {k.strip() for k in os.getenv("ADMIN_KEYS", "").split(",") if k.strip()}

# Tenant API keys
API_KEY_DEFAULT_RATE_LIMIT = int(os.getenv("API_KEY_DEFAULT_RATE_LIMIT", "1000"))

# AI provider configuration
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
AI_MODEL = os.getenv("AI_MODEL", "gpt-4o-mini")
AI_TEMPERATURE = float(os.getenv("AI_TEMPERATURE", "0.7"))
AI_MAX_TOKENS = int(os.getenv("AI_MAX_TOKENS", "1000"))
AI_TIMEOUT_SECONDS = float(os.getenv("AI_TIMEOUT_SECONDS", "60"))

# Logging configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "json")
LOG_SAMPLE_RATE = float(os.getenv("LOG_SAMPLE_RATE", "1.0"))
LOG_EXCLUDE_PATHS = [p for p in os.getenv("LOG_EXCLUDE_PATHS", f"{API_PREFIX}/health").split(",") if p]

# Security configuration
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")

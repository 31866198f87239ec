import os


class Config:
    # CORS
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")

    # Reverse proxy / IP headers
    TRUST_PROXY_HEADERS = os.environ.get("TRUST_PROXY_HEADERS", "1") == "1"

    # Storage (defaults to in-memory when neither is set; SQL wins over Redis)
    DATABASE_URL = os.environ.get("DATABASE_URL", "") or os.environ.get("NETLIFY_DATABASE_URL", "")
    REDIS_URL = os.environ.get("REDIS_URL", "")
    REDIS_KEY_PREFIX = os.environ.get("REDIS_KEY_PREFIX", "bingo")

    # Game
    DEFAULT_ROOM = os.environ.get("DEFAULT_ROOM", "demo")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

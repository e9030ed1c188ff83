import os
from typing import Any, Dict, Optional


def _flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


def load_config(overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Read portal settings from the environment.

    ``overrides`` wins over the environment and is mainly used by tests.
    """
    config: Dict[str, Any] = {
        "SECRET_KEY": os.environ.get("SECRET_KEY", "dev"),
        "SESSION_COOKIE_SECURE": _flag("SESSION_COOKIE_SECURE", "true"),
        "DATABASE_URL": os.environ.get("DATABASE_URL", "sqlite:///portal.db"),
        "RUN_MIGRATIONS": _flag("RUN_MIGRATIONS", "true"),
        "REDIS_URL": os.environ.get("REDIS_URL"),
        "REDIS_HOST": os.getenv("REDIS_HOST", "localhost"),
        "REDIS_PORT": int(os.getenv("REDIS_PORT", "6379")),
        "REDIS_DB": int(os.getenv("REDIS_DB", "0")),
        "REDIS_PASSWORD": os.getenv("REDIS_PASSWORD"),
        "DASHBOARD_CACHE_ENABLED": _flag("DASHBOARD_CACHE_ENABLED", "true"),
        # Seconds a dashboard payload stays in Redis and in client caches
        "DASHBOARD_CACHE_TTL": int(os.environ.get("DASHBOARD_CACHE_TTL", "120")),
        "CACHE_WRITE_WORKERS": int(os.environ.get("CACHE_WRITE_WORKERS", "2")),
        "LOG_LEVEL": os.environ.get("LOG_LEVEL", "INFO").upper(),
    }
    if overrides:
        config.update(overrides)
    return config

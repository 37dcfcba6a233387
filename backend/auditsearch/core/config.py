from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# backend/auditsearch/core/config.py -> backend/.env
_ENV_PATH = Path(__file__).resolve().parents[2] / ".env"
if _ENV_PATH.exists():
    # Process environment wins over .env values.
    load_dotenv(_ENV_PATH, override=False)


def _env_str(name: str, default: str = "") -> str:
    return os.getenv(name, default).strip()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw, 10)
    except ValueError:
        return default


def _env_float(name: str, default: float | None) -> float | None:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_flag(name: str, *, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


@dataclass(frozen=True)
class Settings:
    app_name: str = field(default_factory=lambda: _env_str("APP_NAME", "Audit Event Search API"))
    app_env: str = field(default_factory=lambda: _env_str("APP_ENV", "dev"))
    app_version: str = field(default_factory=lambda: _env_str("APP_VERSION", "0.1.0"))
    log_level: str = field(default_factory=lambda: _env_str("LOG_LEVEL", "INFO"))

    # opensearch | elasticsearch | hybrid
    storage_driver: str = field(default_factory=lambda: _env_str("AUDIT_STORAGE_DRIVER", "opensearch").lower())
    # Seconds; None leaves queries without a deadline.
    query_timeout: float | None = field(default_factory=lambda: _env_float("AUDIT_QUERY_TIMEOUT", None))

    opensearch_url: str = field(default_factory=lambda: _env_str("OPENSEARCH_NODE", "http://localhost:9200"))
    opensearch_username: str = field(default_factory=lambda: _env_str("OPENSEARCH_USERNAME"))
    opensearch_password: str = field(default_factory=lambda: _env_str("OPENSEARCH_PASSWORD"))
    opensearch_index: str = field(default_factory=lambda: _env_str("OPENSEARCH_INDEX", "audit"))
    opensearch_max_result_window: int = field(default_factory=lambda: _env_int("OPENSEARCH_MAX_RESULT_WINDOW", 0))
    opensearch_response_timeout: int = field(default_factory=lambda: _env_int("OPENSEARCH_RESPONSE_TIMEOUT", 5))
    opensearch_verify_certs: bool = field(default_factory=lambda: _env_flag("OPENSEARCH_VERIFY_CERTS", default=True))

    elasticsearch_url: str = field(default_factory=lambda: _env_str("ELASTICSEARCH_URL", "http://localhost:9201"))
    elasticsearch_username: str = field(default_factory=lambda: _env_str("ELASTICSEARCH_USERNAME"))
    elasticsearch_password: str = field(default_factory=lambda: _env_str("ELASTICSEARCH_PASSWORD"))
    elasticsearch_index_prefix: str = field(default_factory=lambda: _env_str("ELASTICSEARCH_INDEX_PREFIX", "audit"))
    elasticsearch_max_result_window: int = field(default_factory=lambda: _env_int("ELASTICSEARCH_MAX_RESULT_WINDOW", 0))
    elasticsearch_response_timeout: int = field(default_factory=lambda: _env_int("ELASTICSEARCH_RESPONSE_TIMEOUT", 5))


settings = Settings()

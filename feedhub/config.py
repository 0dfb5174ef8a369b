# feedhub/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv
load_dotenv()

STORE_BACKEND = os.getenv("STORE_BACKEND", "postgres").lower()
DB_DSN = os.getenv("DATABASE_URL")
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_SERVICE_KEY = os.getenv("SUPABASE_SERVICE_KEY")
STORE_TIMEOUT = float(os.getenv("STORE_TIMEOUT", "30"))
# 0 keeps the per-channel count fan-out unbounded
CHANNEL_COUNT_CONCURRENCY = int(os.getenv("CHANNEL_COUNT_CONCURRENCY", "0"))

CHANNELS_TABLE = os.getenv("CHANNELS_TABLE", "channels")
SUBSCRIPTIONS_TABLE = os.getenv("SUBSCRIPTIONS_TABLE", "subscriptions")
ARTICLES_TABLE = os.getenv("ARTICLES_TABLE", "articles")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
ROOT_PATH = os.getenv("ROOT_PATH", "")


@dataclass(frozen=True)
class Settings:
    store_backend: str = STORE_BACKEND
    database_url: Optional[str] = DB_DSN
    supabase_url: Optional[str] = SUPABASE_URL
    supabase_service_key: Optional[str] = SUPABASE_SERVICE_KEY
    store_timeout: float = STORE_TIMEOUT
    channel_count_concurrency: int = CHANNEL_COUNT_CONCURRENCY
    channels_table: str = CHANNELS_TABLE
    subscriptions_table: str = SUBSCRIPTIONS_TABLE
    articles_table: str = ARTICLES_TABLE


def get_settings() -> Settings:
    return Settings()

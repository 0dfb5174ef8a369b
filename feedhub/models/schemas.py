# feedhub/models/schemas.py
import uuid
from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


RowId = Union[int, uuid.UUID, str]


# --- Канал ---
# Строка из коллекции channels как есть; все колонки кроме id проходят насквозь
class Channel(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: RowId


# --- Канал с числом подписчиков ---
# Ответ /api/channels; subscriberCount всегда целое >= 0
class EnrichedChannel(Channel):
    subscriberCount: int = Field(default=0, ge=0)


# --- Статья ---
# Ответ /api/articles: только опубликованные, от новых к старым
class Article(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: RowId
    published: bool
    # str rows (REST) pass through untouched; asyncpg hands over datetime
    created_at: Optional[Union[str, datetime]] = None


class HealthStatus(BaseModel):
    status: str
    timestamp: datetime

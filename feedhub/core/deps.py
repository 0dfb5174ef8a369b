from __future__ import annotations

from fastapi import Depends, Request

from feedhub.config import get_settings
from feedhub.db.store import DataStore
from feedhub.services.articles import ArticleService
from feedhub.services.channels import ChannelService


def get_store(request: Request) -> DataStore:
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise RuntimeError("Data store is not initialized. Is the app lifespan running?")
    return store


def get_channel_service(store: DataStore = Depends(get_store)) -> ChannelService:
    settings = get_settings()
    return ChannelService(
        store,
        channels_table=settings.channels_table,
        subscriptions_table=settings.subscriptions_table,
        max_concurrency=settings.channel_count_concurrency,
    )


def get_article_service(store: DataStore = Depends(get_store)) -> ArticleService:
    return ArticleService(store, articles_table=get_settings().articles_table)

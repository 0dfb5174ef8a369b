from __future__ import annotations

import logging
from typing import List

from pydantic import ValidationError

from feedhub.core.errors import FetchError, StoreError
from feedhub.db.store import DataStore
from feedhub.models.schemas import Article


logger = logging.getLogger("feedhub.articles")


class ArticleService:
    def __init__(self, store: DataStore, *, articles_table: str = "articles") -> None:
        self._store = store
        self._articles_table = articles_table

    async def fetch_articles(self) -> List[Article]:
        """Published articles, newest first. One round trip, no partial results."""
        logger.info("Fetching articles from store")
        try:
            rows = await self._store.select(
                self._articles_table,
                filters={"published": True},
                order_by="created_at",
                descending=True,
            )
        except StoreError as e:
            logger.error("Error fetching articles: %s", e, extra={"event": "articles_fetch_failed"})
            raise FetchError("Failed to fetch articles", details=e) from e
        try:
            articles = [Article.model_validate(r) for r in rows]
        except ValidationError as e:
            logger.error("Malformed article row: %s", e, extra={"event": "articles_fetch_failed"})
            raise FetchError("Failed to fetch articles", details=e) from e
        logger.info("Successfully fetched %d articles", len(articles))
        return articles

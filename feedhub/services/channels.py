from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Sequence, Union

from pydantic import ValidationError

from feedhub.core.errors import FetchError, PartialAggregationError, StoreError
from feedhub.db.store import DataStore
from feedhub.models.schemas import Channel, EnrichedChannel


logger = logging.getLogger("feedhub.channels")

CountOutcome = Union[int, PartialAggregationError]


class ChannelService:
    """Lists channels and enriches each one with its subscriber count.

    The base fetch and the enrichment are two sequential phases. The base
    fetch is all-or-nothing (``FetchError``); inside the enrichment every
    channel is counted concurrently and a failed count only degrades that
    channel's ``subscriberCount`` to 0.
    """

    def __init__(
        self,
        store: DataStore,
        *,
        channels_table: str = "channels",
        subscriptions_table: str = "subscriptions",
        channel_column: str = "channel_id",
        max_concurrency: int = 0,
    ) -> None:
        self._store = store
        self._channels_table = channels_table
        self._subscriptions_table = subscriptions_table
        self._channel_column = channel_column
        self._max_concurrency = max_concurrency

    async def list_channels(self) -> List[EnrichedChannel]:
        channels = await self.fetch_channels()
        return await self.enrich(channels)

    async def fetch_channels(self) -> List[Channel]:
        logger.info("Fetching channels from store")
        try:
            rows = await self._store.select(self._channels_table)
        except StoreError as e:
            logger.error("Error fetching channels: %s", e, extra={"event": "channels_fetch_failed"})
            raise FetchError("Failed to fetch channels", details=e) from e
        try:
            channels = [Channel.model_validate(r) for r in rows]
        except ValidationError as e:
            logger.error("Malformed channel row: %s", e, extra={"event": "channels_fetch_failed"})
            raise FetchError("Failed to fetch channels", details=e) from e
        logger.info("Successfully fetched %d channels", len(channels))
        return channels

    async def enrich(self, channels: Sequence[Channel]) -> List[EnrichedChannel]:
        if not channels:
            return []

        semaphore: Optional[asyncio.Semaphore] = None
        if self._max_concurrency > 0:
            semaphore = asyncio.Semaphore(self._max_concurrency)

        async def _count(channel: Channel) -> CountOutcome:
            try:
                if semaphore is None:
                    return await self._count_subscribers(channel)
                async with semaphore:
                    return await self._count_subscribers(channel)
            except Exception as e:  # noqa: BLE001 - absorbed per channel, see below
                return PartialAggregationError(channel.id, e)

        # gather keeps input order; shield lets every count finish even if the request is cancelled
        outcomes = await asyncio.shield(asyncio.gather(*[_count(c) for c in channels]))

        enriched: List[EnrichedChannel] = []
        for channel, outcome in zip(channels, outcomes):
            if isinstance(outcome, PartialAggregationError):
                logger.error(
                    "Error fetching subscriber count for channel %s: %s",
                    outcome.channel_id,
                    outcome.cause,
                    extra={"event": "subscriber_count_failed", "error_kind": outcome.kind.value},
                )
                count = 0
            else:
                count = outcome
            enriched.append(EnrichedChannel.model_validate({**channel.model_dump(), "subscriberCount": count}))
        return enriched

    async def _count_subscribers(self, channel: Channel) -> int:
        count = await self._store.count(self._subscriptions_table, {self._channel_column: channel.id})
        return max(int(count or 0), 0)

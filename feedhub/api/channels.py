# feedhub/api/channels.py
from typing import List

from fastapi import APIRouter, Depends

from feedhub.core.deps import get_channel_service
from feedhub.models.schemas import EnrichedChannel
from feedhub.services.channels import ChannelService

router = APIRouter(prefix="/api/channels", tags=["channels"])


@router.get("", response_model=List[EnrichedChannel],
            summary="All channels with their subscriber counts")
async def api_list_channels(svc: ChannelService = Depends(get_channel_service)):
    """
    Order follows the store's base fetch. A channel whose count query failed
    is still returned, with subscriberCount = 0.
    """
    return await svc.list_channels()

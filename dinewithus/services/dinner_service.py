import asyncio
from datetime import datetime
from typing import List, Optional

from pydantic import ValidationError

from dinewithus.core.exceptions import InvalidDateError
from dinewithus.core.logger import logger
from dinewithus.models.dinner import Dinner, HostDinnerView
from dinewithus.services.backend_client import BackendClient, backend_client
from dinewithus.services.cancellation_policy import TZ, describe_policy
from dinewithus.services.dinner_filters import filter_listings, get_dinner_status
from dinewithus.services.transforms import transform_dinner


class DinnerService:
    def __init__(self, client: BackendClient = None):
        self.client = client or backend_client

    def _transform_all(self, payloads: List[dict]) -> List[Dinner]:
        dinners = []
        for payload in payloads:
            try:
                dinners.append(transform_dinner(payload))
            except (InvalidDateError, ValidationError) as e:
                logger.error(f"❌ Skipping malformed dinner {payload.get('id')!r}: {e}")
        return dinners

    async def list_dinners(self, now: Optional[datetime] = None, limit: int = 20, page: int = 1) -> List[Dinner]:
        """Dinners that can still be booked, in backend order."""
        if now is None:
            now = datetime.now(TZ)
        payloads = await asyncio.to_thread(self.client.get_dinners, limit, page)
        dinners = self._transform_all(payloads)
        listed = filter_listings(dinners, now)
        logger.info(f"🍽️ Listing {len(listed)} of {len(dinners)} dinners")
        return listed

    async def list_host_dinners(self, host_id: str, token: str, now: Optional[datetime] = None) -> List[HostDinnerView]:
        if now is None:
            now = datetime.now(TZ)
        payloads = await asyncio.to_thread(self.client.get_host_dinners, host_id, token)
        return [
            HostDinnerView(
                dinner=dinner,
                status=get_dinner_status(dinner, now, dinner.is_active),
                guests_booked=max(dinner.capacity - dinner.available, 0),
                policy_description=describe_policy(dinner.cancellation_policy),
            )
            for dinner in self._transform_all(payloads)
        ]

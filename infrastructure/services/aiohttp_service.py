import asyncio
import logging
import aiohttp
from app.domain.exceptions import ExternalServiceError
from app.domain.services_interfaces.aiohttp_service import AiohttpServiceInterface


logger = logging.getLogger('external_apis')


class AiohttpService(AiohttpServiceInterface):
    def __init__(self, timeout: int = 10):
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    async def post_form(self, url, data, headers=None):
        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            try:
                async with session.post(url, data=data, headers=headers) as response:
                    return await self._json(url, response)
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                logger.error(f"POST {url} failed: {e}")
                raise ExternalServiceError(f"POST {url} failed")

    @staticmethod
    async def _json(url, response) -> dict:
        try:
            payload = await response.json()
        except aiohttp.ContentTypeError:
            logger.error(f"{url} returned {response.status} with {response.content_type}")
            raise ExternalServiceError(f"Unexpected response from {url}")
        if response.status >= 400:
            logger.error(f"{url} returned {response.status}: {payload}")
            raise ExternalServiceError(f"{url} returned {response.status}")
        return payload

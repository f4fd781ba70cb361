from redis import asyncio as aioredis

from busbook.config import settings


redis_client = aioredis.from_url(settings.REDIS_URL, decode_responses=True)


async def close_redis():
    await redis_client.aclose()

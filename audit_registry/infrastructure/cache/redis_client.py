# audit_registry/infrastructure/cache/redis_client.py

import redis.asyncio as redis


class RedisClient:
    def __init__(self, redis_url: str):
        self.client = redis.from_url(
            redis_url,
            decode_responses=True,
        )

    async def is_member(self, key: str, member: str) -> bool:
        """True if member is in the set stored at key."""
        return bool(await self.client.sismember(key, member))

    async def add_members(self, key: str, *members: str) -> int:
        """Add members to the set at key. Returns how many were new."""
        return await self.client.sadd(key, *members)

    async def remove_members(self, key: str, *members: str) -> int:
        return await self.client.srem(key, *members)

    async def ping(self) -> bool:
        return bool(await self.client.ping())

    async def close(self) -> None:
        await self.client.aclose()

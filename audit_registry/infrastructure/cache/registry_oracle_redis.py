"""Redis-backed registry oracle. Verified registries are members of one Redis set."""

from audit_registry.infrastructure.cache.redis_client import RedisClient

VERIFIED_REGISTRIES_KEY = "registry:verified"


class RedisRegistryOracle:
    """Implements RegistryOracle with SISMEMBER. Connection errors propagate to the service boundary."""

    def __init__(self, redis_client: RedisClient, key: str = VERIFIED_REGISTRIES_KEY) -> None:
        self._redis = redis_client
        self._key = key

    async def is_verified(self, identity: str) -> bool:
        return await self._redis.is_member(self._key, identity)

    async def verify(self, *identities: str) -> None:
        await self._redis.add_members(self._key, *identities)

    async def revoke(self, *identities: str) -> None:
        await self._redis.remove_members(self._key, *identities)

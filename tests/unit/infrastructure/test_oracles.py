"""Registry oracles: static set and Redis set membership."""

from unittest.mock import AsyncMock

from audit_registry.infrastructure.cache.registry_oracle_redis import (
    VERIFIED_REGISTRIES_KEY,
    RedisRegistryOracle,
)
from audit_registry.infrastructure.memory.registry_oracle_static import StaticRegistryOracle


async def test_static_oracle():
    oracle = StaticRegistryOracle(["ST1TEST"])
    assert await oracle.is_verified("ST1TEST") is True
    assert await oracle.is_verified("ST2FAKE") is False
    oracle.verify("ST2FAKE")
    assert await oracle.is_verified("ST2FAKE") is True
    oracle.revoke("ST1TEST")
    assert await oracle.is_verified("ST1TEST") is False


async def test_redis_oracle_uses_set_membership():
    redis_client = AsyncMock()
    redis_client.is_member = AsyncMock(return_value=True)
    oracle = RedisRegistryOracle(redis_client=redis_client)

    assert await oracle.is_verified("ST1TEST") is True
    redis_client.is_member.assert_awaited_once_with(VERIFIED_REGISTRIES_KEY, "ST1TEST")


async def test_redis_oracle_verify_and_revoke():
    redis_client = AsyncMock()
    oracle = RedisRegistryOracle(redis_client=redis_client, key="custom:key")
    await oracle.verify("A", "B")
    await oracle.revoke("A")
    redis_client.add_members.assert_awaited_once_with("custom:key", "A", "B")
    redis_client.remove_members.assert_awaited_once_with("custom:key", "A")

"""
Redis-based storage for learned selectors.

Keys (with the configured prefix):

    {prefix}global            full learning state as JSON
    {prefix}domain:<domain>   per-domain export as JSON
    {prefix}domains           set of exported domains
"""

import json

import redis.asyncio as redis

from htmlsoups.exceptions import StorageError
from htmlsoups.learning.state import LearningState
from htmlsoups.storage.base import DomainPatterns, patterns_from_dict, patterns_to_dict
from htmlsoups.utils import metrics
from htmlsoups.utils.logging import SoupsLogger


class RedisLearningStorage:
    """
    Learning state store backed by Redis.

    Keeps the whole state under one key so a load always sees a consistent
    snapshot.
    """

    backend = "redis"

    def __init__(
        self,
        redis_client: redis.Redis,
        key_prefix: str = "htmlsoups:learning:",
        logger: SoupsLogger | None = None,
    ):
        """
        Initialize the Redis store.

        Args:
            redis_client: Redis async client.
            key_prefix: Prefix for every key this store writes.
            logger: Logger instance.
        """
        self.redis = redis_client
        self.key_prefix = key_prefix
        self.logger = logger or SoupsLogger("redis_storage")

    @property
    def state_key(self) -> str:
        return f"{self.key_prefix}global"

    @property
    def index_key(self) -> str:
        return f"{self.key_prefix}domains"

    def _domain_key(self, domain: str) -> str:
        return f"{self.key_prefix}domain:{domain}"

    async def save(self, state: LearningState) -> None:
        try:
            await self.redis.set(self.state_key, json.dumps(state.to_dict()))
        except redis.RedisError as e:
            self.logger.error("Failed to save learning state", error=str(e))
            metrics.record_storage(self.backend, "save", False)
            raise StorageError("save", self.backend, str(e)) from e

        metrics.record_storage(self.backend, "save", True)

    async def load(self) -> LearningState:
        try:
            data = await self.redis.get(self.state_key)
        except redis.RedisError as e:
            self.logger.error("Failed to load learning state", error=str(e))
            metrics.record_storage(self.backend, "load", False)
            raise StorageError("load", self.backend, str(e)) from e

        metrics.record_storage(self.backend, "load", True)
        if not data:
            return LearningState()

        try:
            return LearningState.from_dict(json.loads(data))
        except (json.JSONDecodeError, AttributeError, KeyError, TypeError, ValueError) as e:
            raise StorageError("load", self.backend, f"corrupt state: {e}") from e

    async def save_domain_patterns(self, domain: str, patterns: DomainPatterns) -> None:
        payload = json.dumps({"domain": domain, "patterns": patterns_to_dict(patterns)})
        try:
            await self.redis.set(self._domain_key(domain), payload)
            await self.redis.sadd(self.index_key, domain)
        except redis.RedisError as e:
            self.logger.error("Failed to save domain patterns", domain=domain, error=str(e))
            metrics.record_storage(self.backend, "save_domain", False)
            raise StorageError("save_domain", self.backend, str(e)) from e

        metrics.record_storage(self.backend, "save_domain", True)

    async def load_domain_patterns(self, domain: str) -> DomainPatterns:
        try:
            data = await self.redis.get(self._domain_key(domain))
        except redis.RedisError as e:
            self.logger.error("Failed to load domain patterns", domain=domain, error=str(e))
            metrics.record_storage(self.backend, "load_domain", False)
            raise StorageError("load_domain", self.backend, str(e)) from e

        metrics.record_storage(self.backend, "load_domain", True)
        if not data:
            return {}

        try:
            return patterns_from_dict(json.loads(data).get("patterns", {}))
        except (json.JSONDecodeError, AttributeError, KeyError, TypeError, ValueError) as e:
            raise StorageError("load_domain", self.backend, f"corrupt patterns: {e}") from e

    async def list_domains(self) -> list[str]:
        try:
            members = await self.redis.smembers(self.index_key)
        except redis.RedisError as e:
            metrics.record_storage(self.backend, "list_domains", False)
            raise StorageError("list_domains", self.backend, str(e)) from e

        domains = {m.decode() if isinstance(m, bytes) else m for m in members}

        state = await self.load()
        domains.update(state.domain_patterns)
        return sorted(domains)

"""
Factory for creating learning state stores based on configuration.
"""

import redis.asyncio as redis

from htmlsoups.config import StorageBackend, StorageConfig
from htmlsoups.storage.base import LearningStorage
from htmlsoups.storage.file_store import FileLearningStorage
from htmlsoups.storage.memory_store import InMemoryLearningStorage
from htmlsoups.storage.redis_store import RedisLearningStorage
from htmlsoups.utils.logging import SoupsLogger


def create_learning_storage(
    config: StorageConfig,
    redis_client: redis.Redis | None = None,
    logger: SoupsLogger | None = None,
) -> LearningStorage:
    """
    Create a learning state store based on configuration.

    Args:
        config: Storage configuration.
        redis_client: Redis async client; built from config.redis_url if omitted.
        logger: Logger instance.

    Returns:
        Configured store.

    Raises:
        ValueError: If the backend is unknown.

    Example:
        ```python
        from htmlsoups.config import StorageBackend, StorageConfig
        from htmlsoups.storage.factory import create_learning_storage

        store = create_learning_storage(
            StorageConfig(backend=StorageBackend.FILE, path="./patterns")
        )
        ```
    """
    logger = logger or SoupsLogger("storage_factory")
    backend = StorageBackend(config.backend)

    if backend == StorageBackend.MEMORY:
        logger.info("Creating in-memory learning storage")
        return InMemoryLearningStorage()

    elif backend == StorageBackend.FILE:
        logger.info("Creating file learning storage", path=config.path)
        return FileLearningStorage(config.path, logger=logger)

    elif backend == StorageBackend.REDIS:
        if redis_client is None:
            redis_client = redis.from_url(config.redis_url)
        logger.info("Creating Redis learning storage", key_prefix=config.key_prefix)
        return RedisLearningStorage(
            redis_client,
            key_prefix=config.key_prefix,
            logger=logger,
        )

    else:
        raise ValueError(f"Unknown storage backend: {config.backend}")

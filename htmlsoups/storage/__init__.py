"""Persistence of learned selectors: in-memory, JSON file and Redis stores."""

from htmlsoups.storage.base import DomainPatterns, LearningStorage
from htmlsoups.storage.factory import create_learning_storage
from htmlsoups.storage.file_store import FileLearningStorage
from htmlsoups.storage.memory_store import InMemoryLearningStorage
from htmlsoups.storage.redis_store import RedisLearningStorage

__all__ = [
    "DomainPatterns",
    "FileLearningStorage",
    "InMemoryLearningStorage",
    "LearningStorage",
    "RedisLearningStorage",
    "create_learning_storage",
]

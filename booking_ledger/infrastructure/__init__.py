"""
Infrastructure layer - external system integrations.
Keeps business logic clean from implementation details.
"""

from .json_store import JsonFileStore, empty_document
from .redis_client import get_redis, close_redis, RedisClient

__all__ = ['JsonFileStore', 'empty_document', 'get_redis', 'close_redis', 'RedisClient']

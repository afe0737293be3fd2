"""
Local key-value store backed by Redis
"""

import logging
from typing import Optional

import redis

logger = logging.getLogger(__name__)

EMPLOYEE_DETAILS_KEY = 'employee_details'
EMPLOYEES_CACHE_KEY = 'employees'
TIME_ENTRIES_CACHE_KEY = 'time_entries_cache'


class KeyValueStore:
    """String-keyed, string-valued store that outlives the process"""

    def __init__(self, client=None, host: str = 'localhost', port: int = 6379, db: int = 0):
        """Use the given Redis client, or connect to host/port/db"""
        if client is not None:
            self.redis_client = client
            return

        try:
            self.redis_client = redis.Redis(
                host=host,
                port=port,
                db=db,
                decode_responses=True
            )
            # Test connection
            self.redis_client.ping()
            logger.info("Redis connection established")
        except redis.RedisError as e:
            logger.warning(f"Redis connection failed: {e}. Local storage operations will be skipped.")
            self.redis_client = None

    @property
    def available(self) -> bool:
        return self.redis_client is not None

    def get(self, key: str) -> Optional[str]:
        """Get value from the store"""
        if not self.redis_client:
            return None

        try:
            return self.redis_client.get(key)
        except redis.RedisError as e:
            logger.error(f"Error getting key {key}: {e}")
            return None

    def set(self, key: str, value: str) -> bool:
        """Set value in the store (no expiry)"""
        if not self.redis_client:
            return False

        try:
            return bool(self.redis_client.set(key, value))
        except redis.RedisError as e:
            logger.error(f"Error setting key {key}: {e}")
            return False

    def delete(self, key: str) -> bool:
        """Delete key from the store"""
        if not self.redis_client:
            return False

        try:
            return bool(self.redis_client.delete(key))
        except redis.RedisError as e:
            logger.error(f"Error deleting key {key}: {e}")
            return False

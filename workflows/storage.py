"""Redis-based itinerary storage with an in-memory fallback."""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import redis
from redis.exceptions import RedisError

from workflows.schemas import ItineraryCreate, ItineraryRecord

logger = logging.getLogger(__name__)

_KEY_PREFIX = "itinerary:"
_ID_COUNTER_KEY = "itinerary:next_id"
_INDEX_KEY = "itinerary:ids"


class ItineraryStorage:
    """Persist itinerary records as JSON documents.

    Every method returns a fresh snapshot; callers never hold the stored copy.
    Connection problems at startup fall back to process memory, while errors
    on an established Redis connection are logged and re-raised.
    """

    def __init__(self, redis_url: Optional[str] = None, *, client: Optional[redis.Redis] = None) -> None:
        self._redis_client: Optional[redis.Redis] = client
        self._fallback_storage: Dict[int, ItineraryRecord] = {}
        self._next_id = 1
        self._lock = threading.Lock()

        if self._redis_client is None and redis_url:
            try:
                self._redis_client = redis.from_url(
                    redis_url,
                    decode_responses=False,  # We'll handle JSON encoding/decoding ourselves
                    socket_connect_timeout=5,
                    socket_timeout=5,
                    health_check_interval=30,
                )
                self._redis_client.ping()
                logger.info("Connected to Redis for itinerary storage")
            except RedisError as e:
                logger.warning(f"Failed to connect to Redis: {e}. Using in-memory storage.")
                self._redis_client = None
        elif self._redis_client is None:
            logger.info("REDIS_URL not set. Using in-memory storage.")

    @property
    def uses_redis(self) -> bool:
        return self._redis_client is not None

    def create(self, data: ItineraryCreate) -> ItineraryRecord:
        """Store a new draft itinerary with no generated content."""
        if self._redis_client is not None:
            try:
                new_id = int(self._redis_client.incr(_ID_COUNTER_KEY))
            except RedisError as e:
                logger.error(f"Error allocating itinerary id in Redis: {e}")
                raise
        else:
            with self._lock:
                new_id = self._next_id
                self._next_id += 1

        record = ItineraryRecord(id=new_id, **data.model_dump(), generated_content=None, status="draft")
        self._write(record)
        return record

    def get(self, itinerary_id: int) -> Optional[ItineraryRecord]:
        if self._redis_client is None:
            record = self._fallback_storage.get(itinerary_id)
            return record.model_copy(deep=True) if record is not None else None
        try:
            data = self._redis_client.get(f"{_KEY_PREFIX}{itinerary_id}")
        except RedisError as e:
            logger.error(f"Error retrieving itinerary {itinerary_id} from Redis: {e}")
            raise
        if data is None:
            return None
        return ItineraryRecord.model_validate_json(data)

    def list(self) -> List[ItineraryRecord]:
        if self._redis_client is None:
            return [self._fallback_storage[key].model_copy(deep=True) for key in sorted(self._fallback_storage)]
        try:
            ids = sorted(int(raw) for raw in self._redis_client.smembers(_INDEX_KEY))
        except RedisError as e:
            logger.error(f"Error listing itineraries from Redis: {e}")
            raise
        records = (self.get(itinerary_id) for itinerary_id in ids)
        return [record for record in records if record is not None]

    def update(self, itinerary_id: int, changes: Dict[str, Any]) -> Optional[ItineraryRecord]:
        """Apply ``changes`` (field name -> value) and stamp ``updated_at``.

        Last write wins; there is no version check between concurrent updates.
        """
        current = self.get(itinerary_id)
        if current is None:
            return None
        updated = ItineraryRecord.model_validate(
            {**current.model_dump(), **changes, "updated_at": datetime.now(timezone.utc)}
        )
        self._write(updated)
        return updated

    def delete(self, itinerary_id: int) -> bool:
        if self._redis_client is None:
            return self._fallback_storage.pop(itinerary_id, None) is not None
        try:
            removed = self._redis_client.delete(f"{_KEY_PREFIX}{itinerary_id}")
            self._redis_client.srem(_INDEX_KEY, itinerary_id)
        except RedisError as e:
            logger.error(f"Error deleting itinerary {itinerary_id} from Redis: {e}")
            raise
        return bool(removed)

    def _write(self, record: ItineraryRecord) -> None:
        if self._redis_client is None:
            self._fallback_storage[record.id] = record.model_copy(deep=True)
            return
        try:
            pipe = self._redis_client.pipeline()
            pipe.set(f"{_KEY_PREFIX}{record.id}", record.model_dump_json(by_alias=True))
            pipe.sadd(_INDEX_KEY, record.id)
            pipe.execute()
        except RedisError as e:
            logger.error(f"Error storing itinerary {record.id} in Redis: {e}")
            raise

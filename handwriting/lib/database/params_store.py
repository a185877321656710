import json
import logging
import redis
from typing import Optional, Protocol
from pydantic import ValidationError
from ..errors import PersistenceCorrupt, PersistenceMiss
from ..layout.models import StyleParameters


class KeyValueProtocol(Protocol):
    def get(self, key: str) -> Optional[bytes]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class RedisParamsStore:
    """StyleParameters as one flat camelCase JSON blob under a single key."""

    def __init__(self, redis_client: Optional[KeyValueProtocol], key: str = "handwritingParams") -> None:
        try:
            self.redis_client = redis_client
            if isinstance(redis_client, redis.Redis):
                self.redis_client.ping()
        except redis.RedisError as e:
            logging.error(f"Redis unavailable, parameters cannot be persisted: {e}")
            self.redis_client = None
        self.key = key

    @property
    def available(self) -> bool:
        return self.redis_client is not None

    def save(self, params: StyleParameters) -> None:
        if not self.redis_client:
            raise PersistenceMiss("Parameter storage is not available")
        try:
            self.redis_client.set(self.key, params.model_dump_json(by_alias=True))
        except redis.RedisError as e:
            logging.error(f"Error in saving parameters {e}")
            raise PersistenceMiss("Parameters could not be saved") from e

    def load(self) -> StyleParameters:
        if not self.redis_client:
            raise PersistenceMiss("Parameter storage is not available")
        try:
            value = self.redis_client.get(self.key)
        except redis.RedisError as e:
            logging.error(f"Error in loading parameters {e}")
            raise PersistenceMiss("Saved parameters could not be read") from e
        if not value:
            raise PersistenceMiss("No saved parameters found")
        try:
            return StyleParameters.model_validate(json.loads(value))
        except (ValueError, TypeError, ValidationError) as e:
            logging.error(f"Saved parameters are corrupt: {e}")
            raise PersistenceCorrupt("Saved parameters could not be parsed") from e

    def delete(self) -> None:
        if self.redis_client:
            try:
                self.redis_client.delete(self.key)
            except redis.RedisError as e:
                logging.error(f"Error in deleting parameters {e}")

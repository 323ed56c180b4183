"""
Key-value store client for the cached daily brief.

Talks to Vercel KV through the Upstash Redis REST API: each call posts
one Redis command as a JSON array.
"""

import json
import logging
from datetime import datetime
from typing import Any, Optional

import requests

from .models import DailyBrief


logger = logging.getLogger(__name__)


DAILY_NEWS_KEY = "daily_news"


class KVStoreError(Exception):
    """Raised when a key-value store command fails."""
    pass


class KVStore:
    """Upstash Redis REST client."""

    def __init__(self, url: str, token: str, timeout: int = 30):
        self.url = url.rstrip("/")
        self.token = token
        self.timeout = timeout

    def _command(self, *args: str) -> Any:
        """Run one Redis command and return its ``result`` field."""
        try:
            response = requests.post(
                self.url,
                headers={"Authorization": f"Bearer {self.token}"},
                json=list(args),
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            raise KVStoreError(f"KV {args[0]} failed: {e}") from e
        except ValueError as e:
            raise KVStoreError(f"KV {args[0]} returned a non-JSON response: {e}") from e

        if not isinstance(data, dict):
            raise KVStoreError(f"KV {args[0]} returned an unexpected response: {data!r}")
        if "error" in data:
            raise KVStoreError(f"KV {args[0]} failed: {data['error']}")
        return data.get("result")

    def set(self, key: str, value: Any) -> None:
        """Overwrite ``key`` with the JSON encoding of ``value``."""
        self._command("SET", key, json.dumps(value, ensure_ascii=False))

    def get(self, key: str) -> Optional[Any]:
        """Return the decoded value at ``key``, or None if unset."""
        raw = self._command("GET", key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise KVStoreError(f"Value at {key!r} is not valid JSON: {e}") from e


def write_daily_brief(
    store: KVStore,
    news: list[Any],
    key: str = DAILY_NEWS_KEY,
    now: Optional[datetime] = None,
) -> DailyBrief:
    """Stamp ``news`` and overwrite whatever brief is stored at ``key``."""
    brief = DailyBrief.create(news, now=now)
    store.set(key, brief.to_dict())
    logger.info(f"Stored {len(news)} items under {key!r} (updatedAt={brief.updated_at})")
    return brief


def read_daily_brief(store: KVStore, key: str = DAILY_NEWS_KEY) -> Optional[DailyBrief]:
    """Load the stored brief, or None if nothing has been written yet."""
    data = store.get(key)
    if data is None:
        return None
    if not isinstance(data, dict):
        raise KVStoreError(f"Value at {key!r} is not a daily brief object")
    return DailyBrief.from_dict(data)

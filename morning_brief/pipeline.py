"""
The fetch → summarize → store run.

Stages run one after another; the first exception aborts the run and
propagates to the caller untouched.
"""

import logging
from datetime import datetime
from typing import Optional

from .config import Config
from .kv_store import DAILY_NEWS_KEY, KVStore, write_daily_brief
from .models import DailyBrief
from .rss_client import RSSFeedSource
from .summarizer import GeminiClient, summarize_news


logger = logging.getLogger(__name__)


def run_pipeline(
    feed_source: RSSFeedSource,
    client: GeminiClient,
    store: KVStore,
    key: str = DAILY_NEWS_KEY,
    now: Optional[datetime] = None,
) -> DailyBrief:
    """
    Fetch headlines, summarize them and overwrite the stored brief.

    Args:
        feed_source: Anything with ``fetch() -> list[NewsItem]``.
        client: Anything with ``generate(prompt) -> str``.
        store: Anything with ``set(key, value)``.
        key: Store key for the brief.
        now: Timestamp override for the brief.

    Returns:
        The brief that was written.
    """
    items = feed_source.fetch()
    logger.info(f"Fetched {len(items)} news items")

    news = summarize_news(items, client)

    return write_daily_brief(store, news, key=key, now=now)


def build_pipeline(config: Config) -> tuple[RSSFeedSource, GeminiClient, KVStore]:
    """
    Construct the real collaborators from configuration.

    Raises:
        ConfigError: If the API key or store credentials are missing.
    """
    api_key = config.require_api_key()
    kv_url, kv_token = config.require_kv()

    feed_source = RSSFeedSource(limit=config.items_per_feed, timeout=config.request_timeout)
    client = GeminiClient(
        api_key=api_key,
        model=config.gemini_model,
        base_url=config.gemini_base_url,
        timeout=config.request_timeout,
    )
    store = KVStore(kv_url, kv_token, timeout=config.request_timeout)
    return feed_source, client, store

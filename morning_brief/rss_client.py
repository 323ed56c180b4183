"""
RSS feed client for the finance headline feeds.

Fetches RSS/Atom feeds one at a time and keeps only the first few items
of each, in the order the feed lists them.
"""

import logging
from dataclasses import dataclass
from typing import Optional
from xml.etree import ElementTree

import requests

from .models import NewsItem


logger = logging.getLogger(__name__)


# Common RSS namespaces
NAMESPACES = {
    "dc": "http://purl.org/dc/elements/1.1/",
    "atom": "http://www.w3.org/2005/Atom",
}

ATOM_NS = "{http://www.w3.org/2005/Atom}"
RSS1_NS = "{http://purl.org/rss/1.0/}"

# Browser-like headers to avoid bot detection
REQUEST_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Accept": "application/rss+xml, application/atom+xml, application/xml, text/xml, */*",
}


class RSSClientError(Exception):
    """Raised when RSS feed fetching or parsing fails."""
    pass


@dataclass
class RSSFeedConfig:
    """Configuration for a single RSS feed."""

    name: str  # Display name used in logs
    url: str
    limit: int = 5  # Items taken from the top of the feed


def _get_element_text(element: Optional[ElementTree.Element]) -> Optional[str]:
    """Safely get stripped text content from an XML element."""
    if element is None or element.text is None:
        return None
    return element.text.strip()


def _find_rss_child(item: ElementTree.Element, tag_name: str) -> Optional[ElementTree.Element]:
    """Find an RSS child element, with or without the RSS 1.0 namespace."""
    elem = item.find(tag_name)
    if elem is None:
        elem = item.find(f"{RSS1_NS}{tag_name}")
    return elem


def _parse_rss_item(item: ElementTree.Element) -> NewsItem:
    """
    Map an RSS <item> element to a NewsItem.

    <item>
        <title>Article Title</title>
        <link>https://example.com/article</link>
        <pubDate>Mon, 15 Jan 2024 10:30:00 GMT</pubDate>
    </item>
    """
    pub_date = _get_element_text(_find_rss_child(item, "pubDate"))
    if not pub_date:
        pub_date = _get_element_text(item.find("dc:date", NAMESPACES))

    return NewsItem(
        title=_get_element_text(_find_rss_child(item, "title")),
        link=_get_element_text(_find_rss_child(item, "link")),
        published_date=pub_date,
    )


def _find_atom_element(entry: ElementTree.Element, tag_name: str) -> Optional[ElementTree.Element]:
    """Find an Atom element, trying both namespaced and non-namespaced versions."""
    elem = entry.find(f"{ATOM_NS}{tag_name}")
    if elem is not None:
        return elem
    return entry.find(tag_name)


def _parse_atom_entry(entry: ElementTree.Element) -> NewsItem:
    """
    Map an Atom <entry> element to a NewsItem.

    Atom puts the link in an href attribute and the date in
    <published>, falling back to <updated>.
    """
    link = None
    link_elem = _find_atom_element(entry, "link")
    if link_elem is not None:
        link = link_elem.get("href") or _get_element_text(link_elem)

    pub_elem = _find_atom_element(entry, "published")
    if pub_elem is None:
        pub_elem = _find_atom_element(entry, "updated")

    return NewsItem(
        title=_get_element_text(_find_atom_element(entry, "title")),
        link=link,
        published_date=_get_element_text(pub_elem),
    )


def _detect_feed_type(root: ElementTree.Element) -> str:
    """Detect whether the feed is RSS 2.0, RSS 1.0, or Atom."""
    tag = root.tag.lower()

    if "}" in tag:
        tag = tag.split("}")[-1]

    if tag == "rss":
        return "rss2"
    elif tag == "rdf":
        return "rss1"
    elif tag == "feed":
        return "atom"

    if root.find("channel") is not None:
        return "rss2"

    return "unknown"


def parse_feed(xml_content: str, feed_name: str = "RSS Feed") -> list[NewsItem]:
    """
    Parse RSS/Atom feed XML content into NewsItem objects.

    Items keep the feed's own order. Items with missing fields are kept
    with those fields set to None.

    Raises:
        RSSClientError: If XML parsing fails or the document is not a feed.
    """
    try:
        root = ElementTree.fromstring(xml_content)
    except ElementTree.ParseError as e:
        raise RSSClientError(f"Failed to parse RSS feed XML from {feed_name}: {e}") from e

    feed_type = _detect_feed_type(root)
    logger.debug(f"Detected feed type: {feed_type}")

    if feed_type == "rss2":
        channel = root.find("channel")
        if channel is None:
            logger.warning(f"RSS 2.0 feed has no channel element: {feed_name}")
            return []
        items = [_parse_rss_item(item) for item in channel.findall("item")]

    elif feed_type == "rss1":
        elements = root.findall("item") or root.findall(f"{RSS1_NS}item")
        items = [_parse_rss_item(item) for item in elements]

    elif feed_type == "atom":
        entries = root.findall(f"{ATOM_NS}entry") or root.findall("entry")
        items = [_parse_atom_entry(entry) for entry in entries]

    else:
        raise RSSClientError(f"Unknown feed type for root tag {root.tag!r}: {feed_name}")

    logger.debug(f"Parsed {len(items)} items from {feed_name}")
    return items


def fetch_rss_feed(
    url: str,
    feed_name: str = "RSS Feed",
    limit: int = 5,
    timeout: int = 30,
) -> list[NewsItem]:
    """
    Fetch an RSS/Atom feed and return its first ``limit`` items.

    Raises:
        RSSClientError: If fetching or parsing fails.
    """
    logger.info(f"Fetching RSS feed: {feed_name} ({url})")

    try:
        response = requests.get(url, headers=REQUEST_HEADERS, timeout=timeout)
        response.raise_for_status()
    except requests.Timeout as e:
        raise RSSClientError(f"RSS feed request timed out: {url}") from e
    except requests.RequestException as e:
        raise RSSClientError(f"Failed to fetch RSS feed {url}: {e}") from e

    items = parse_feed(response.text, feed_name)

    return items[:limit]


def fetch_all_feeds(
    feeds: list[RSSFeedConfig],
    limit: Optional[int] = None,
    timeout: int = 30,
) -> list[NewsItem]:
    """
    Fetch every feed in order and concatenate their items.

    Feed 1's items come before feed 2's. A failure on any feed aborts
    the whole fetch; there is no partial result.

    Args:
        feeds: Feeds to fetch, in order.
        limit: Overrides each feed's own item limit when given.
        timeout: Per-request timeout in seconds.

    Raises:
        RSSClientError: If any feed fails.
    """
    all_items: list[NewsItem] = []

    for feed in feeds:
        items = fetch_rss_feed(
            url=feed.url,
            feed_name=feed.name,
            limit=limit if limit is not None else feed.limit,
            timeout=timeout,
        )
        logger.info(f"Fetched {len(items)} items from {feed.name}")
        all_items.extend(items)

    return all_items


class RSSFeedSource:
    """Feed source handed to the pipeline."""

    def __init__(
        self,
        feeds: Optional[list[RSSFeedConfig]] = None,
        limit: Optional[int] = None,
        timeout: int = 30,
    ):
        self.feeds = feeds if feeds is not None else DEFAULT_RSS_FEEDS
        self.limit = limit
        self.timeout = timeout

    def fetch(self) -> list[NewsItem]:
        return fetch_all_feeds(self.feeds, limit=self.limit, timeout=self.timeout)


# =============================================================================
# Default RSS Feeds (Google News finance searches)
# =============================================================================

DEFAULT_RSS_FEEDS = [
    RSSFeedConfig(
        name="US Finance",
        url="https://news.google.com/rss/search?q=economy+stock+market&hl=en-US&gl=US&ceid=US:en",
        limit=5,
    ),
    RSSFeedConfig(
        name="KR Finance",
        url="https://news.google.com/rss/search?q=%EA%B2%BD%EC%A0%9C+%EC%A3%BC%EC%8B%9D&hl=ko&gl=KR&ceid=KR:ko",
        limit=5,
    ),
]

"""Data records passed between pipeline stages."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional


@dataclass
class NewsItem:
    """Headline taken from a feed. Any field may be missing."""

    title: Optional[str]
    link: Optional[str]
    published_date: Optional[str]

    def to_dict(self) -> dict[str, Optional[str]]:
        return {
            "title": self.title,
            "link": self.link,
            "pubDate": self.published_date,
        }


def _isoformat(moment: datetime) -> str:
    """ISO-8601 UTC with millisecond precision and a Z suffix."""
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


@dataclass
class DailyBrief:
    """
    The persisted record.

    ``news`` holds the summarized items exactly as parsed from the model
    output ({title, link, summary, tickers} objects, not validated).
    """

    updated_at: str
    news: list[Any]

    @classmethod
    def create(cls, news: list[Any], now: Optional[datetime] = None) -> "DailyBrief":
        """Stamp ``news`` with the current (or given) time."""
        if now is None:
            now = datetime.now(timezone.utc)
        return cls(updated_at=_isoformat(now), news=news)

    def to_dict(self) -> dict[str, Any]:
        return {"updatedAt": self.updated_at, "news": self.news}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DailyBrief":
        return cls(updated_at=data.get("updatedAt", ""), news=data.get("news") or [])

"""In-memory stand-ins for the feed, model and store."""

from morning_brief.models import NewsItem


class FakeFeedSource:
    """Returns a fixed item list and counts fetches."""

    def __init__(self, items=None, error=None):
        self.items = items or []
        self.error = error
        self.calls = 0

    def fetch(self):
        self.calls += 1
        if self.error:
            raise self.error
        return list(self.items)


class FakeClient:
    """Returns canned model replies in order and records prompts."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.prompts = []

    def generate(self, prompt):
        self.prompts.append(prompt)
        return self.replies.pop(0)


class FakeStore:
    """Dict-backed store that counts writes."""

    def __init__(self, error=None):
        self.data = {}
        self.error = error
        self.set_calls = 0

    def set(self, key, value):
        self.set_calls += 1
        if self.error:
            raise self.error
        self.data[key] = value

    def get(self, key):
        return self.data.get(key)


def make_items(prefix: str, count: int) -> list[NewsItem]:
    """Helper to create numbered test items."""
    return [
        NewsItem(
            title=f"{prefix} headline {i}",
            link=f"https://example.com/{prefix}/{i}",
            published_date="Mon, 15 Jan 2024 10:30:00 GMT",
        )
        for i in range(count)
    ]



"""
Headline summarization using Google Gemini.

Sends every headline in one prompt and pulls the JSON array of
summaries out of the model's free-form reply.
"""

import json
import logging
import re
from datetime import datetime
from typing import Any

import requests

from .models import NewsItem


logger = logging.getLogger(__name__)


PROMPT_TEMPLATE = """
You are a stock market expert. Summarize the following news items into a concise format for a "Stock Morning Brief".

For each news item, provide:
1. A 3-line summary in Korean.
2. Relevant stock tickers (if any).

Format the output as a JSON array of objects with the following structure:
{{
  "title": "Original news title",
  "link": "Original link",
  "summary": "3-line Korean summary here",
  "tickers": ["TICKER1", "TICKER2"]
}}

News items:
{news_items}
"""

# Greedy: first "[" through last "]", across lines
JSON_ARRAY_PATTERN = re.compile(r"\[[\s\S]*\]")


class SummarizerError(Exception):
    """Raised when summarization or response parsing fails."""
    pass


def _sanitize_error(error: Exception) -> str:
    """Remove API keys from error messages to prevent logging secrets."""
    return re.sub(r'(key)=[^&\s]+', r'\1=***', str(error), flags=re.IGNORECASE)


def build_prompt(items: list[NewsItem]) -> str:
    """Build the single summarization prompt with all items embedded as JSON."""
    news_items = json.dumps([item.to_dict() for item in items], ensure_ascii=False)
    return PROMPT_TEMPLATE.format(news_items=news_items)


def extract_json_array(text: str) -> list[Any]:
    """
    Parse the JSON array embedded in a model reply.

    Gemini sometimes wraps its JSON in commentary or markdown code fences,
    so the span from the first "[" to the last "]" is parsed. Elements are
    returned as-is.

    Raises:
        SummarizerError: If the text contains no bracketed span.
        json.JSONDecodeError: If the span is not valid JSON.
    """
    match = JSON_ARRAY_PATTERN.search(text)
    if not match:
        raise SummarizerError("Failed to parse Gemini response as JSON")

    return json.loads(match.group(0))


class GeminiClient:
    """Minimal client for the Gemini generateContent REST endpoint."""

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-1.5-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: int = 120,
    ):
        if not api_key:
            raise SummarizerError("Google API key is required")
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self.timeout = timeout

    def generate(self, prompt: str) -> str:
        """
        Send one prompt and return the reply text.

        Raises:
            SummarizerError: On transport/HTTP failure or an empty reply.
        """
        url = f"{self.base_url.rstrip('/')}/models/{self.model}:generateContent"
        payload = {
            "contents": [
                {"role": "user", "parts": [{"text": prompt}]},
            ],
        }

        start_time = datetime.now()

        try:
            response = requests.post(
                url,
                params={"key": self.api_key},
                json=payload,
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.Timeout as e:
            raise SummarizerError(f"Gemini request timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            raise SummarizerError(f"Gemini request failed: {_sanitize_error(e)}") from e
        except ValueError as e:
            raise SummarizerError(f"Gemini returned a non-JSON response: {e}") from e

        duration_ms = (datetime.now() - start_time).total_seconds() * 1000

        candidates = data.get("candidates") or []
        if not candidates:
            raise SummarizerError("No candidates returned from Gemini")

        parts = candidates[0].get("content", {}).get("parts", [])
        text = "".join(part.get("text", "") for part in parts)

        if not text:
            finish_reason = candidates[0].get("finishReason")
            raise SummarizerError(f"Empty response from Gemini (finishReason={finish_reason})")

        logger.info(f"Gemini {self.model} replied with {len(text)} chars in {duration_ms:.0f}ms")
        return text


def summarize_news(items: list[NewsItem], client: GeminiClient) -> list[Any]:
    """
    Summarize all items with a single model call.

    Returns:
        The parsed list of {title, link, summary, tickers} objects.

    Raises:
        SummarizerError: If the call fails or the reply has no JSON array.
        json.JSONDecodeError: If the embedded array is not valid JSON.
    """
    prompt = build_prompt(items)
    logger.info(f"Summarizing {len(items)} news items ({len(prompt)} char prompt)")

    text = client.generate(prompt)
    news = extract_json_array(text)

    logger.info(f"Parsed {len(news)} summarized items")
    return news

from __future__ import annotations

import logging
from typing import Optional

from backend.core.enums import Sentiment
from backend.core.ports.sentiment import SentimentClassifierPort
from backend.providers.gemini.client import GeminiAPIError, GeminiClient

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = (
    "Classify the sentiment of the following hotel guest feedback. "
    "Reply with exactly one word: Positive, Neutral or Negative.\n\n"
    "Feedback: {text}"
)


def parse_sentiment(reply: str) -> Optional[Sentiment]:
    lowered = (reply or "").lower()
    if "negative" in lowered:
        return Sentiment.NEGATIVE
    if "positive" in lowered:
        return Sentiment.POSITIVE
    if "neutral" in lowered:
        return Sentiment.NEUTRAL
    return None


class GeminiSentimentClassifier(SentimentClassifierPort):
    """Best-effort sentiment via a single-word generation prompt.

    ``client`` may be None when no API key is configured; every call then
    yields no verdict.
    """

    def __init__(self, client: Optional[GeminiClient]) -> None:
        self._client = client

    @property
    def enabled(self) -> bool:
        return self._client is not None

    def try_classify(self, text: str) -> Optional[Sentiment]:
        if self._client is None:
            logger.info("sentiment.skip reason=no_api_key")
            return None
        try:
            data = self._client.generate_content(
                [{"role": "user", "parts": [{"text": PROMPT_TEMPLATE.format(text=text)}]}],
                generation_config={"maxOutputTokens": 5, "temperature": 0.0},
            )
            reply = self._client.extract_text(data)
        except GeminiAPIError as exc:
            logger.warning("sentiment.failed status=%s error=%s", exc.status_code, exc)
            return None
        verdict = parse_sentiment(reply)
        if verdict is None:
            logger.warning("sentiment.unparseable reply=%r", reply[:40])
        return verdict

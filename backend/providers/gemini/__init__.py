from backend.providers.gemini.chat_model import GeminiChatModel
from backend.providers.gemini.client import GeminiAPIError, GeminiClient
from backend.providers.gemini.sentiment import GeminiSentimentClassifier, parse_sentiment

__all__ = [
    "GeminiAPIError",
    "GeminiChatModel",
    "GeminiClient",
    "GeminiSentimentClassifier",
    "parse_sentiment",
]

from abc import ABC, abstractmethod
from typing import Optional

from backend.core.enums import Sentiment


class SentimentClassifierPort(ABC):
    @abstractmethod
    def try_classify(self, text: str) -> Optional[Sentiment]:
        """Return None when no verdict could be obtained."""

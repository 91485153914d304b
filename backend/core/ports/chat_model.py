from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

# (role, text) pairs; role is "user" or "model"
Turn = Tuple[str, str]


class ChatModelPort(ABC):
    @abstractmethod
    def generate(self, prompt: str, history: Optional[List[Turn]] = None) -> str: ...

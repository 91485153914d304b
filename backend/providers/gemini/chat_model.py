from __future__ import annotations

from typing import Any, Dict, List, Optional

from backend.core.ports.chat_model import ChatModelPort, Turn
from backend.providers.gemini.client import SAFETY_SETTINGS, GeminiClient


class GeminiChatModel(ChatModelPort):
    def __init__(self, client: GeminiClient, *, max_output_tokens: int = 250, temperature: float = 0.7) -> None:
        self._client = client
        self._generation_config = {"maxOutputTokens": max_output_tokens, "temperature": temperature}

    def generate(self, prompt: str, history: Optional[List[Turn]] = None) -> str:
        contents: List[Dict[str, Any]] = [
            {"role": role, "parts": [{"text": text}]} for role, text in (history or [])
        ]
        contents.append({"role": "user", "parts": [{"text": prompt}]})
        data = self._client.generate_content(
            contents,
            generation_config=self._generation_config,
            safety_settings=SAFETY_SETTINGS,
        )
        return self._client.extract_text(data)

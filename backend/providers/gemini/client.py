from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

SAFETY_SETTINGS: List[Dict[str, str]] = [
    {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_SEXUALLY_EXPLICIT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_DANGEROUS_CONTENT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
]


class GeminiAPIError(RuntimeError):
    """Raised for transport failures, non-2xx replies and unexpected reply shapes.

    ``status_code`` is None when no HTTP response was received.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body or {}

    @property
    def is_safety_block(self) -> bool:
        error = self.body.get("error") if isinstance(self.body, dict) else None
        if not isinstance(error, dict):
            return False
        details = error.get("details") or []
        if any(isinstance(d, dict) and d.get("reason") == "SAFETY" for d in details):
            return True
        return "SAFETY" in str(error.get("message") or "")


class GeminiClient:
    """Thin wrapper over the ``generateContent`` REST endpoint."""

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-1.5-flash-latest",
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 15.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        if not api_key:
            raise ValueError("Gemini client requires an API key")
        self.model = model
        self._api_key = api_key
        self._url = f"{base_url.rstrip('/')}/models/{model}:generateContent"
        self._timeout = timeout
        self._session = session or requests.Session()

    def generate_content(
        self,
        contents: List[Dict[str, Any]],
        *,
        generation_config: Optional[Dict[str, Any]] = None,
        safety_settings: Optional[List[Dict[str, str]]] = None,
    ) -> Dict[str, Any]:
        body: Dict[str, Any] = {"contents": contents}
        if generation_config:
            body["generationConfig"] = generation_config
        if safety_settings:
            body["safetySettings"] = safety_settings

        try:
            response = self._session.post(
                self._url,
                json=body,
                headers={"Content-Type": "application/json", "x-goog-api-key": self._api_key},
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            logger.error("Gemini request failed: %s", exc.__class__.__name__)
            raise GeminiAPIError(f"Gemini request failed: {exc}") from exc

        if not response.ok:
            try:
                error_body = response.json()
            except ValueError:
                error_body = {}
            logger.error("Gemini API error %s | model=%s | body=%s", response.status_code, self.model, error_body)
            detail = (error_body.get("error") or {}).get("message") if isinstance(error_body, dict) else None
            raise GeminiAPIError(
                detail or response.reason or f"HTTP {response.status_code}",
                status_code=response.status_code,
                body=error_body if isinstance(error_body, dict) else {},
            )

        try:
            return response.json()
        except ValueError as exc:
            logger.error("Invalid JSON from Gemini: %s", exc)
            raise GeminiAPIError("Invalid JSON from Gemini") from exc

    @staticmethod
    def extract_text(data: Dict[str, Any]) -> str:
        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as exc:
            raise GeminiAPIError("Received an unexpected response format from the AI.") from exc
        if not isinstance(text, str):
            raise GeminiAPIError("Received an unexpected response format from the AI.")
        return text

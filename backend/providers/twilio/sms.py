from __future__ import annotations

import logging
from typing import Optional

import requests

from backend.core.ports.sms import SmsSenderPort

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://api.twilio.com/2010-04-01"


class SmsDeliveryError(RuntimeError):
    pass


class TwilioSmsClient(SmsSenderPort):
    """Sends SMS through the Twilio Messages REST resource."""

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        *,
        api_base: str = DEFAULT_API_BASE,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._account_sid = account_sid
        self._auth_token = auth_token
        self._url = f"{api_base.rstrip('/')}/Accounts/{account_sid}/Messages.json"
        self._timeout = timeout
        self._session = session or requests.Session()

    def send(self, body: str, *, to: str, from_: str) -> str:
        try:
            response = self._session.post(
                self._url,
                data={"To": to, "From": from_, "Body": body},
                auth=(self._account_sid, self._auth_token),
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            raise SmsDeliveryError(f"Twilio request failed: {exc}") from exc

        if not response.ok:
            logger.error("Twilio returned %s | body=%s", response.status_code, response.text[:500])
            raise SmsDeliveryError(f"Twilio error {response.status_code}")

        try:
            return str(response.json().get("sid") or "")
        except ValueError as exc:
            raise SmsDeliveryError("Invalid response from Twilio") from exc

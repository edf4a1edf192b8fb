import logging
from typing import Optional

import httpx

from config import Settings
from schemas import DeliveryResult, FormattedNotification

log = logging.getLogger(__name__)


class TelegramNotifier:
    """Relays formatted inquiries to a Telegram chat through the Bot API.

    One attempt per inquiry, bounded by ``settings.notify_timeout_s``. Every
    failure (transport error, timeout, non-200 reply) comes back as a failed
    DeliveryResult instead of an exception.
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self._transport = transport

    @property
    def url(self) -> str:
        base = self.settings.telegram_api_base.rstrip("/")
        return f"{base}/bot{self.settings.telegram_bot_token}/sendMessage"

    def payload(self, formatted: FormattedNotification) -> dict:
        return {
            "chat_id": self.settings.telegram_chat_id,
            "text": formatted.formatted_text,
            "parse_mode": "Markdown",
        }

    async def notify(self, formatted: FormattedNotification) -> DeliveryResult:
        try:
            async with httpx.AsyncClient(
                timeout=self.settings.notify_timeout_s, transport=self._transport
            ) as client:
                resp = await client.post(self.url, json=self.payload(formatted))
        except httpx.TimeoutException:
            log.warning("Telegram API timed out after %ss", self.settings.notify_timeout_s)
            return DeliveryResult.failed("timeout")
        except Exception as e:  # noqa: BLE001
            # The request URL embeds the bot token, so only the error type is logged.
            log.warning("Telegram API error: %s", type(e).__name__)
            return DeliveryResult.failed(f"exc={type(e).__name__}")

        if resp.status_code != 200:
            log.warning("Telegram API rejected message: status=%s", resp.status_code)
            return DeliveryResult.failed(f"status={resp.status_code}")
        return DeliveryResult.delivered()

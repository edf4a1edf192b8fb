"""
Runtime configuration for the inquiry relay.

Values come from the process environment (or a local .env file) and are read
once when the application is built. Collaborators receive the Settings object
explicitly instead of reading environment variables themselves.
"""

from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PLACEHOLDER_BOT_TOKEN = "YOUR_TELEGRAM_BOT_TOKEN"
PLACEHOLDER_CHAT_ID = "YOUR_TELEGRAM_CHAT_ID"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    telegram_bot_token: str = Field(PLACEHOLDER_BOT_TOKEN, description="Telegram bot token")
    telegram_chat_id: str = Field(PLACEHOLDER_CHAT_ID, description="Chat that receives inquiries")
    telegram_api_base: str = Field("https://api.telegram.org", description="Bot API base URL")
    notify_timeout_s: float = Field(10.0, gt=0)

    host: str = "0.0.0.0"
    port: int = 3000
    cors_origins: str = Field("*", description="Comma separated list of allowed origins")
    log_level: str = "INFO"

    # Confirmation email. SMTP is used only when smtp_host is set.
    confirmation_delay_s: float = Field(0.5, ge=0)
    smtp_host: Optional[str] = None
    smtp_port: int = 587
    smtp_user: Optional[str] = None
    smtp_pass: Optional[str] = None
    from_email: Optional[str] = None
    from_name: str = "Kumagaya Kids English"

    def cors_origin_list(self) -> List[str]:
        items = [part.strip() for part in self.cors_origins.split(",")]
        return [item for item in items if item] or ["*"]

    def sender_address(self) -> str:
        return self.from_email or self.smtp_user or "no-reply@kumagaya-kids.local"

    def warnings(self) -> List[str]:
        """Startup warnings for values still set to their placeholders."""
        out: List[str] = []
        if self.telegram_bot_token == PLACEHOLDER_BOT_TOKEN:
            out.append(
                "Telegram Bot Token not configured. Set TELEGRAM_BOT_TOKEN environment variable."
            )
        if self.telegram_chat_id == PLACEHOLDER_CHAT_ID:
            out.append(
                "Telegram Chat ID not configured. Set TELEGRAM_CHAT_ID environment variable."
            )
        return out

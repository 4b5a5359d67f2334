from datetime import datetime, timezone
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from recipepad.core.logging import get_logger
from recipepad.integrations.telegram import TelegramClient, TelegramNotConfigured

logger = get_logger(__name__)

ORDER_TEMPLATE = (
    "📦 НОВЫЙ ЗАКАЗ ИЗ RECIPEPAD!\n\n"
    "🍳 Блюдо: {title}\n"
    "⏰ Время: {time}\n"
    "📱 Отправлено с сайта"
)


def format_order_time(moment: datetime, tz_name: str) -> str:
    """Время в формате uk-UA: 05.03.2025, 14:07:09"""
    return moment.astimezone(ZoneInfo(tz_name)).strftime("%d.%m.%Y, %H:%M:%S")


def compose_order_message(title: str, moment: datetime, tz_name: str) -> str:
    return ORDER_TEMPLATE.format(title=title, time=format_order_time(moment, tz_name))


class OrderService:
    """Пересылка заказов в Telegram-чат"""

    def __init__(
        self,
        telegram: Optional[TelegramClient],
        timezone_name: str = "Europe/Kyiv",
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc)
    ):
        self.telegram = telegram
        self.timezone_name = timezone_name
        self._clock = clock

    @property
    def is_configured(self) -> bool:
        return self.telegram is not None and bool(self.telegram.chat_id)

    async def place_order(self, title: str) -> None:
        """Отправка уведомления о заказе"""
        if not self.is_configured:
            raise TelegramNotConfigured("TELEGRAM_BOT_TOKEN / TELEGRAM_CHAT_ID not set")

        text = compose_order_message(title, self._clock(), self.timezone_name)
        await self.telegram.send_message(text)
        logger.info("order_sent", title=title)

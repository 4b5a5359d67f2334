"""
Telegram Bot API client.

Every call is made with an explicit timeout. ``send_message`` retries with an
escalating timeout per attempt (8 s, 12 s, 15 s by default); a timeout, a
transport error, a non-2xx status or an ``"ok": false`` body all count as a
retryable failure.
"""

from typing import Any, Optional, Sequence, Tuple

import httpx

from recipepad.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUTS = (8.0, 12.0, 15.0)


class TelegramNotConfigured(RuntimeError):
    """Не заданы TELEGRAM_BOT_TOKEN / TELEGRAM_CHAT_ID"""


class TelegramDeliveryError(RuntimeError):
    """Все попытки отправки исчерпаны"""

    def __init__(self, message: str, attempts: int, last_error: Any = None):
        super().__init__(message)
        self.attempts = attempts
        self.last_error = last_error


def _read_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return {"raw": response.text}


class TelegramClient:
    """Клиент Bot API"""

    def __init__(
        self,
        bot_token: str,
        chat_id: Optional[str] = None,
        api_url: str = "https://api.telegram.org",
        timeouts: Sequence[float] = DEFAULT_TIMEOUTS,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        if not bot_token:
            raise TelegramNotConfigured("bot token is required")
        if not timeouts:
            raise ValueError("at least one attempt timeout is required")
        self.bot_token = bot_token
        self.chat_id = chat_id
        self.api_url = api_url.rstrip("/")
        self.timeouts = tuple(timeouts)
        self._transport = transport

    def _method_url(self, method: str) -> str:
        return f"{self.api_url}/bot{self.bot_token}/{method}"

    def _client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=timeout, transport=self._transport)

    async def send_message(self, text: str, chat_id: Optional[str] = None) -> Any:
        """Отправка сообщения с нарастающим таймаутом на каждую попытку"""
        chat_id = chat_id or self.chat_id
        if not chat_id:
            raise TelegramNotConfigured("chat id is required")

        last_error: Any = None
        for attempt, timeout in enumerate(self.timeouts, start=1):
            try:
                async with self._client(timeout) as client:
                    response = await client.post(
                        self._method_url("sendMessage"),
                        json={"chat_id": chat_id, "text": text},
                    )
                data = _read_json(response)
            except httpx.HTTPError as exc:
                last_error = f"{type(exc).__name__}: {exc}"
                logger.info("telegram_attempt_failed", attempt=attempt, timeout=timeout, error=last_error)
                continue

            ok_flag = data.get("ok") if isinstance(data, dict) else None
            if response.is_success and ok_flag is not False:
                if attempt > 1:
                    logger.info("telegram_retry_succeeded", attempt=attempt)
                return data

            last_error = {"http": response.status_code, "data": data}
            logger.info("telegram_attempt_failed", attempt=attempt, timeout=timeout, error=last_error)

        logger.warning("telegram_failed", attempts=len(self.timeouts), last_error=last_error)
        raise TelegramDeliveryError(
            f"sendMessage failed after {len(self.timeouts)} attempts",
            attempts=len(self.timeouts),
            last_error=last_error,
        )

    async def get_me(self) -> Tuple[int, Any]:
        """Быстрая проверка токена бота: (HTTP-статус, тело ответа).

        Тело не в JSON поднимает ``ValueError``.
        """
        async with self._client(self.timeouts[0]) as client:
            response = await client.get(self._method_url("getMe"))
        return response.status_code, response.json()

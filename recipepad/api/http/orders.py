from typing import Optional

import httpx
from fastapi import APIRouter, Body, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from recipepad.core.config import settings
from recipepad.domains.orders.schemas import OrderCreate, OrderResponse
from recipepad.domains.orders.services import OrderService
from recipepad.integrations.telegram import TelegramClient, TelegramDeliveryError

router = APIRouter(tags=["orders"])

NOT_CONFIGURED = "TELEGRAM_BOT_TOKEN / TELEGRAM_CHAT_ID not set"


def get_telegram_client() -> Optional[TelegramClient]:
    """Клиент бота или None, если токен не задан"""
    if not settings.telegram_bot_token:
        return None
    return TelegramClient(
        bot_token=settings.telegram_bot_token,
        chat_id=settings.telegram_chat_id,
        api_url=settings.telegram_api_url,
        timeouts=settings.telegram_timeouts
    )


def get_order_service(
    telegram: Optional[TelegramClient] = Depends(get_telegram_client)
) -> OrderService:
    """Без бота заказ не принимается, тело запроса даже не проверяется"""
    order_service = OrderService(telegram, timezone_name=settings.order_timezone)
    if not order_service.is_configured:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=NOT_CONFIGURED
        )
    return order_service


@router.post("/orders", response_model=OrderResponse)
async def create_order(
    order: Optional[OrderCreate] = Body(default=None),
    order_service: OrderService = Depends(get_order_service)
):
    """Отправка заказа в Telegram"""
    if order is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="title is required")

    try:
        await order_service.place_order(order.title)
    except TelegramDeliveryError:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="telegram_failed")

    return OrderResponse()


@router.get("/debug/tg")
async def debug_telegram(telegram: Optional[TelegramClient] = Depends(get_telegram_client)):
    """Быстрая проверка токена бота"""
    if telegram is None:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="no BOT token")

    # ответ не-JSON считается такой же ошибкой, как и сетевая
    try:
        http_status, body = await telegram.get_me()
    except (httpx.HTTPError, ValueError) as e:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "fetch_failed", "details": str(e)}
        )

    return {"http": http_status, "body": body}

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from recipepad.core.auth import get_current_owner
from recipepad.core.config import settings
from recipepad.core.db import get_db
from recipepad.domains.identity.schemas import OwnerResponse, TelegramLogin, Token
from recipepad.domains.identity.services import IdentityService, InvalidTelegramLogin
from recipepad.integrations.telegram import TelegramNotConfigured

router = APIRouter(prefix="/auth", tags=["authentication"])


def get_identity_service(db: AsyncSession = Depends(get_db)) -> IdentityService:
    return IdentityService(
        db,
        bot_token=settings.telegram_bot_token,
        max_age=settings.telegram_auth_max_age
    )


@router.post("/telegram", response_model=Token)
async def login_with_telegram(
    login_data: TelegramLogin,
    identity_service: IdentityService = Depends(get_identity_service)
):
    """Вход через Telegram Login Widget"""
    try:
        token, account = await identity_service.login_with_telegram(login_data)
    except TelegramNotConfigured:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="TELEGRAM_BOT_TOKEN not set"
        )
    except InvalidTelegramLogin as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )

    return Token(access_token=token, owner=account.owner)


@router.get("/me", response_model=OwnerResponse)
async def get_current_owner_info(owner: str = Depends(get_current_owner)):
    """Текущий владелец по токену"""
    return OwnerResponse(owner=owner)

from typing import Optional

from fastapi import Depends, Header, HTTPException, Query, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from recipepad.domains.identity.services import IdentityService

bearer_scheme = HTTPBearer(auto_error=False)


def _owner_from_credentials(credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    if credentials is None:
        return None

    owner = IdentityService.owner_from_token(credentials.credentials)
    if owner is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return owner


async def get_current_owner(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> str:
    """owner из обязательного Bearer-токена"""
    owner = _owner_from_credentials(credentials)
    if owner is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return owner


async def get_owner(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    x_owner_id: Optional[str] = Header(default=None),
    owner: Optional[str] = Query(default=None)
) -> str:
    """Владелец локальных рецептов: токен, затем X-Owner-Id, затем ?owner="""
    token_owner = _owner_from_credentials(credentials)
    if token_owner is not None:
        return token_owner

    resolved = (x_owner_id or owner or "").strip()
    if not resolved:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="owner required")
    return resolved

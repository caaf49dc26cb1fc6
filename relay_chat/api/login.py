"""PIN login endpoint."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from relay_chat.api.dependencies import get_user_directory
from relay_chat.auth.directory import UserDirectory
from relay_chat.models.schemas import LoginRequest, LoginResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["login"])


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: LoginRequest,
    directory: UserDirectory = Depends(get_user_directory),
) -> LoginResponse:
    """Exchange a PIN (and optional email) for the user's identity.

    Raises:
        401: Credentials do not match any configured user.
        422: Body is not JSON or the PIN is not a string.
    """
    user = directory.authenticate(credentials.pin, credentials.email)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid PIN",
        )

    logger.info(f"User {user.id} logged in")
    return LoginResponse(success=True, user=user)

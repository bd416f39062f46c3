from typing import Annotated, Optional

from fastapi import Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from backend.api.errors import APIError

# auto_error=False so a missing header gets our own 401 body
bearer_scheme = HTTPBearer(auto_error=False)

async def get_bearer_token(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
) -> str:
    """Discord access token from "Authorization: Bearer <token>". Never stored."""
    if credentials is None or not credentials.credentials:
        raise APIError(status.HTTP_401_UNAUTHORIZED, "Unauthorized")
    return credentials.credentials

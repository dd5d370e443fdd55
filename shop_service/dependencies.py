# shop_service/dependencies.py
from typing import Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from shop_service.auth_utils import TokenPayload, decode_access_token
from shop_service.config import Settings, get_settings
from shop_service.errors import ForbiddenError, UnauthorizedError

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> TokenPayload:
    """Resolve the bearer token of a protected request into its {id, email} payload."""
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Token is required")

    try:
        return decode_access_token(
            credentials.credentials,
            settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
        )
    except jwt.InvalidTokenError:
        raise ForbiddenError("Invalid token")

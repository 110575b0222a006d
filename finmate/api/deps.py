from fastapi import Header

from finmate.core.errors import UnauthorizedError
from finmate.core.security import decode_access_token


def get_current_user_id(authorization: str | None = Header(None)) -> int:
    if not authorization:
        raise UnauthorizedError("No token, authorization denied")

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise UnauthorizedError("Token format is incorrect, authorization denied")

    return decode_access_token(token.strip())

"""
FastAPI dependencies resolving the requesting user.
"""

from typing import Optional

from fastapi import HTTPException, Request, status

from realty_analytics.auth.jwt import decode_token


def get_token_from_request(request: Request) -> Optional[str]:
    """
    Extract the bearer token from a request.

    Checks the Authorization header first, then the access_token cookie.
    """
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header[7:]

    return request.cookies.get("access_token")


async def get_current_user_id(request: Request) -> str:
    """
    The authenticated user's id, taken from the token's 'sub' claim.

    Raises HTTPException 401 if the token is missing, invalid or expired.
    """
    token = get_token_from_request(request)
    payload = decode_token(token) if token else None

    user_id = None
    if payload and payload.get("type", "access") == "access":
        user_id = payload.get("sub")

    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return str(user_id)

"""
Request identity: bearer token verification.
"""

from realty_analytics.auth.jwt import create_access_token, decode_token
from realty_analytics.auth.dependencies import get_current_user_id, get_token_from_request

__all__ = [
    "create_access_token",
    "decode_token",
    "get_current_user_id",
    "get_token_from_request",
]

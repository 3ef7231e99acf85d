"""
Caller identity for the API.

Authentication itself is handled upstream by the hosted auth provider; the
gateway forwards the verified user id in the X-User-Id header.
"""
from typing import Optional

from fastapi import Header, HTTPException


async def get_current_user_id(
    x_user_id: Optional[str] = Header(None, description="Verified user ID forwarded by the gateway")
) -> str:
    """
    Extract current user ID from request headers.

    Raises:
        HTTPException 401: Missing X-User-Id header
    """
    if x_user_id and x_user_id.strip():
        return x_user_id.strip()

    raise HTTPException(
        status_code=401,
        detail="Missing X-User-Id header",
    )

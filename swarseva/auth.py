"""
Authenticated-user context asserted by the upstream gateway
"""
import logging
from typing import Optional
from fastapi import Depends, Header

from .errors import AuthenticationError, ForbiddenError
from .models.user import CurrentUser

logger = logging.getLogger(__name__)


async def get_current_user(
    x_user_id: Optional[str] = Header(None, description="Authenticated user id set by the gateway"),
    x_user_role: Optional[str] = Header(None, description="Role of the authenticated user")
) -> CurrentUser:
    """Build the caller from gateway headers; a missing id means unauthenticated"""
    if not x_user_id or not x_user_id.strip():
        raise AuthenticationError("Authentication required")
    role = (x_user_role or "user").strip().lower() or "user"
    return CurrentUser(id=x_user_id.strip(), role=role)


async def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not user.is_admin:
        logger.warning(f"User {user.id} with role {user.role} denied admin access")
        raise ForbiddenError("Access denied: Admin permission required")
    return user

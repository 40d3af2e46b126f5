from fastapi import Depends

from app.db import get_db
from app.services.auth_dependencies import (
    DIRECTOR,
    HR_HEAD,
    MANAGER,
    require_role,
    require_user_auth,
)

__all__ = ["get_db", "get_current_user", "require_hr", "require_manager"]


def get_current_user(auth=Depends(require_user_auth)):
    """Get current authenticated user info.

    Returns a dict with employee_id and roles.
    """
    return auth


require_manager = require_role(DIRECTOR, HR_HEAD, MANAGER)
require_hr = require_role(HR_HEAD, DIRECTOR)

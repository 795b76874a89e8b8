from fastapi import Depends, HTTPException
from storefront.constants.roles import ADMIN, STAFF_ROLES
from storefront.models.user import User
from storefront.utils.token import get_current_user

def require_admin(current_user: User = Depends(get_current_user)):
    if current_user.role != ADMIN:
        raise HTTPException(status_code=403, detail="Admin access required")
    return current_user


def require_staff(current_user: User = Depends(get_current_user)):
    if current_user.role not in STAFF_ROLES:
        raise HTTPException(status_code=403, detail="Admin or editor access required")
    return current_user

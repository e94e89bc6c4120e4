# user_routes.py
from fastapi import APIRouter, Depends
from typing import List

from models.enums import Capability
from models.user import User
from routes.auth_routes import get_current_user
from services.identity import capabilities_for

router = APIRouter(tags=["Users"])


# -------------------- Own profile -------------------- #
@router.get("/me", response_model=User)
def get_my_profile(current_user: User = Depends(get_current_user)):
    return current_user


# -------------------- Own capabilities -------------------- #
@router.get("/me/capabilities", response_model=List[Capability])
def get_my_capabilities(current_user: User = Depends(get_current_user)):
    """
    Lists what the authenticated user's role allows.
    The screens use it to decide which menus to show.
    """
    return sorted(capabilities_for(current_user.role), key=lambda c: c.value)

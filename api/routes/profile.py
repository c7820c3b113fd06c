"""
Profile Router

Information about the authenticated user.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from database.models import User
from api.auth.dependencies import get_current_active_user


router = APIRouter(prefix="/profile", tags=["Profile"])


class ProfileResponse(BaseModel):
    id: str
    email: str


@router.get("/me", response_model=ProfileResponse)
async def get_me(current_user: User = Depends(get_current_active_user)):
    """Return the id and email of the token holder."""
    return ProfileResponse(id=str(current_user.id), email=current_user.email)

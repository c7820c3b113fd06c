"""
Items Router

CRUD for a generic resource owned by the authenticated user.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from database.connection import get_db
from database.models import Item, User
from api.auth.dependencies import get_current_active_user
from api.middleware.error_handler import NotFoundError, ValidationError


router = APIRouter(prefix="/items", tags=["Items"])


# ============================================================================
# Request/Response Models
# ============================================================================

class ItemWrite(BaseModel):
    """Create/update item request. ``name`` is checked by the handlers."""
    name: Optional[str] = None
    description: Optional[str] = None


class ItemResponse(BaseModel):
    id: str
    owner_id: str
    name: str
    description: Optional[str]
    created_at: datetime
    updated_at: datetime


def _to_response(item: Item) -> ItemResponse:
    return ItemResponse(
        id=str(item.id),
        owner_id=str(item.owner_id),
        name=item.name,
        description=item.description,
        created_at=item.created_at,
        updated_at=item.updated_at
    )


async def _get_owned_item(db: AsyncSession, item_id: str, user: User, action: str) -> Item:
    message = f"Item not found or you are not authorized to {action} it."
    try:
        item_uuid = uuid.UUID(item_id)
    except ValueError:
        raise NotFoundError(message)

    result = await db.execute(
        select(Item).where(Item.id == item_uuid, Item.owner_id == user.id)
    )
    item = result.scalar_one_or_none()
    if item is None:
        raise NotFoundError(message)
    return item


# ============================================================================
# Item Endpoints
# ============================================================================

@router.post("", response_model=ItemResponse, status_code=status.HTTP_201_CREATED)
async def create_item(
    data: ItemWrite,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    if not data.name:
        raise ValidationError("Item name is required.")

    item = Item(owner_id=current_user.id, name=data.name, description=data.description or None)
    db.add(item)
    await db.commit()
    return _to_response(item)


@router.get("", response_model=List[ItemResponse])
async def list_items(
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Items of the current user, newest first."""
    result = await db.execute(
        select(Item)
        .where(Item.owner_id == current_user.id)
        .order_by(Item.created_at.desc())
    )
    return [_to_response(item) for item in result.scalars().all()]


@router.get("/{item_id}", response_model=ItemResponse)
async def get_item(
    item_id: str,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    item = await _get_owned_item(db, item_id, current_user, "view")
    return _to_response(item)


@router.put("/{item_id}", response_model=ItemResponse)
async def update_item(
    item_id: str,
    data: ItemWrite,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    if not data.name:
        raise ValidationError("Item name is required for update.")

    item = await _get_owned_item(db, item_id, current_user, "update")
    item.name = data.name
    item.description = data.description or None
    await db.commit()
    await db.refresh(item)
    return _to_response(item)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(
    item_id: str,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    item = await _get_owned_item(db, item_id, current_user, "delete")
    await db.delete(item)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)

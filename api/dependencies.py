"""
Shared Route Dependencies

Owner-scoped storage and tender lookups used by the tender routers.
"""

from fastapi import Depends, UploadFile

from config.settings import settings
from database.models import User
from schemas.tender import Tender
from api.auth.dependencies import get_current_active_user
from api.middleware.error_handler import NotFoundError, ValidationError
from services.tender_storage import TenderStorage, get_tender_storage


def get_owner_storage(
    current_user: User = Depends(get_current_active_user)
) -> TenderStorage:
    """Tender storage scoped to the current user's projects."""
    return get_tender_storage(str(current_user.id))


async def load_tender(
    tender_id: str,
    storage: TenderStorage = Depends(get_owner_storage)
) -> Tender:
    """Resolve the ``tender_id`` path parameter or fail with 404."""
    tender = await storage.get_tender_by_id(tender_id)
    if tender is None:
        raise NotFoundError("Tender not found")
    return tender


async def read_upload(file: UploadFile) -> bytes:
    """Read an uploaded file, enforcing name and size limits."""
    if not file.filename:
        raise ValidationError("No filename provided")

    content = await file.read()
    if not content:
        raise ValidationError("Uploaded file is empty")
    if len(content) > settings.max_upload_mb * 1024 * 1024:
        raise ValidationError(f"File exceeds the {settings.max_upload_mb} MB upload limit")
    return content

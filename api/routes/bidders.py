"""
Bidders Router

Bidders of a tender and the documents they submit per category.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Request, Response, UploadFile, status
from pydantic import BaseModel, Field

from config.logging_config import get_logger
from schemas.tender import Bidder, BidderDocument, Tender
from scoring.progress import BidderProgress, bidder_progress, submission_progress
from api.dependencies import get_owner_storage, load_tender, read_upload
from api.middleware.error_handler import NotFoundError, ValidationError
from api.middleware.rate_limit import limiter, LIMIT_UPLOAD
from services.file_storage import FileStorage, get_file_storage
from services.tender_storage import TenderStorage

logger = get_logger("api.bidders")

router = APIRouter(prefix="/tenders/{tender_id}/bidders", tags=["Bidders"])


# ============================================================================
# Request/Response Models
# ============================================================================

class BidderCreate(BaseModel):
    """Company and contact details of a bidder."""
    name: str = Field(..., min_length=1, max_length=255)
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    contact_person: Optional[str] = None
    contact_position: Optional[str] = None
    company_size: Optional[str] = None
    year_established: Optional[str] = None
    website: Optional[str] = None


class BidderSummary(BaseModel):
    bidder: Bidder
    submission_progress: int
    progress: BidderProgress


def find_bidder(tender: Tender, bidder_id: str) -> Bidder:
    bidder = tender.get_bidder(bidder_id)
    if bidder is None:
        raise NotFoundError("Bidder not found")
    return bidder


# ============================================================================
# Bidder Endpoints
# ============================================================================

@router.get("", response_model=List[BidderSummary])
async def list_bidders(tender: Tender = Depends(load_tender)):
    """Bidders with their submission and evaluation progress."""
    return [
        BidderSummary(
            bidder=bidder,
            submission_progress=submission_progress(tender, bidder),
            progress=bidder_progress(tender, bidder)
        )
        for bidder in tender.bidders
    ]


@router.post("", response_model=Bidder, status_code=status.HTTP_201_CREATED)
async def add_bidder(
    data: BidderCreate,
    tender: Tender = Depends(load_tender),
    storage: TenderStorage = Depends(get_owner_storage)
):
    return await storage.add_bidder(tender.id, **data.model_dump())


@router.get("/{bidder_id}", response_model=Bidder)
async def get_bidder(bidder_id: str, tender: Tender = Depends(load_tender)):
    return find_bidder(tender, bidder_id)


# ============================================================================
# Bidder Documents
# ============================================================================

@router.post(
    "/{bidder_id}/documents",
    response_model=BidderDocument,
    status_code=status.HTTP_201_CREATED
)
@limiter.limit(LIMIT_UPLOAD)
async def upload_bidder_document(
    request: Request,
    bidder_id: str,
    category_id: str = Form(...),
    name: Optional[str] = Form(None),
    file: UploadFile = File(...),
    tender: Tender = Depends(load_tender),
    storage: TenderStorage = Depends(get_owner_storage),
    files: FileStorage = Depends(get_file_storage)
):
    """Upload one document against a category of the bidder's tender."""
    bidder = find_bidder(tender, bidder_id)
    if tender.get_category(category_id) is None:
        raise ValidationError("Category does not belong to this tender")

    content = await read_upload(file)
    stored = files.save(content, file.filename, f"bidders/{bidder.id}")

    document = await storage.add_bidder_document(
        bidder.id,
        category_id=category_id,
        name=name or file.filename,
        url=stored.url,
        storage_path=stored.path
    )
    logger.info(f"Uploaded document {document.id} for bidder {bidder.id}")
    return document


@router.delete("/{bidder_id}/documents/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_bidder_document(
    bidder_id: str,
    document_id: str,
    tender: Tender = Depends(load_tender),
    storage: TenderStorage = Depends(get_owner_storage),
    files: FileStorage = Depends(get_file_storage)
):
    """Delete a document. Stored scores and evaluations are kept."""
    bidder = find_bidder(tender, bidder_id)
    removed = await storage.remove_bidder_document(bidder.id, document_id)
    if removed is None:
        raise NotFoundError("Document not found")

    files.delete(removed.storage_path)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

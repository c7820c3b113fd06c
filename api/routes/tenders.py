"""
Tenders Router

Tender details, document categories, the scoring matrix and the documents
issued by the tender owner.
"""

from typing import Annotated, Dict, List, Optional

from fastapi import APIRouter, Depends, File, Form, Request, Response, UploadFile, status
from pydantic import BaseModel, Field

from config.logging_config import get_logger
from schemas.tender import (
    DocumentCategory,
    ScoringMatrix,
    Tender,
    TenderDocument,
    TenderDocumentCategory,
)
from scoring.weights import effective_weights, validate_weights
from api.dependencies import get_owner_storage, load_tender, read_upload
from api.middleware.error_handler import NotFoundError
from api.middleware.rate_limit import limiter, LIMIT_UPLOAD
from services.file_storage import FileStorage, get_file_storage
from services.tender_storage import TenderStorage

logger = get_logger("api.tenders")

router = APIRouter(prefix="/tenders", tags=["Tenders"])


# ============================================================================
# Request/Response Models
# ============================================================================

class WeightsResponse(BaseModel):
    """Weight validator result for a tender."""
    balanced: bool
    total: int
    weights: Dict[str, int]
    message: Optional[str] = None


class TenderDetail(BaseModel):
    tender: Tender
    weights: WeightsResponse


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    weight: int = Field(..., gt=0, le=100)
    required: bool = True
    description: str = ""


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    weight: Optional[int] = Field(default=None, ge=0, le=100)
    required: Optional[bool] = None
    description: Optional[str] = None


class ScoringMatrixUpdate(BaseModel):
    criteria: Dict[str, Annotated[int, Field(ge=0, le=100)]] = Field(default_factory=dict)


def weights_for(tender: Tender) -> WeightsResponse:
    balance = validate_weights(effective_weights(tender.categories, tender.scoring_matrix))
    return WeightsResponse(
        balanced=balance.balanced,
        total=balance.total,
        weights=balance.weights,
        message=balance.message
    )


# ============================================================================
# Tender Endpoints
# ============================================================================

@router.get("/{tender_id}", response_model=TenderDetail)
async def get_tender(tender: Tender = Depends(load_tender)):
    """Tender with categories, matrix, bidders, documents and weight balance."""
    return TenderDetail(tender=tender, weights=weights_for(tender))


@router.get("/{tender_id}/weights", response_model=WeightsResponse)
async def get_weights(tender: Tender = Depends(load_tender)):
    """Whether the effective category weights sum to 100."""
    return weights_for(tender)


# ============================================================================
# Categories & Scoring Matrix
# ============================================================================

@router.post(
    "/{tender_id}/categories",
    response_model=DocumentCategory,
    status_code=status.HTTP_201_CREATED
)
async def add_category(
    data: CategoryCreate,
    tender: Tender = Depends(load_tender),
    storage: TenderStorage = Depends(get_owner_storage)
):
    """Add a category. Unbalanced totals are allowed while editing."""
    return await storage.add_category(
        tender.id,
        name=data.name,
        weight=data.weight,
        required=data.required,
        description=data.description
    )


@router.patch("/{tender_id}/categories/{category_id}", response_model=DocumentCategory)
async def update_category(
    category_id: str,
    data: CategoryUpdate,
    tender: Tender = Depends(load_tender),
    storage: TenderStorage = Depends(get_owner_storage)
):
    category = await storage.update_category(tender.id, category_id, **data.model_dump())
    if category is None:
        raise NotFoundError("Category not found")
    return category


@router.delete("/{tender_id}/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: str,
    tender: Tender = Depends(load_tender),
    storage: TenderStorage = Depends(get_owner_storage),
    files: FileStorage = Depends(get_file_storage)
):
    """Delete a category with its documents, scores and matrix entry."""
    stored_paths = [
        doc.storage_path
        for bidder in tender.bidders
        for doc in bidder.documents_for(category_id)
    ]
    if not await storage.delete_category(tender.id, category_id):
        raise NotFoundError("Category not found")

    for path in stored_paths:
        files.delete(path)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{tender_id}/scoring-matrix", response_model=ScoringMatrix)
async def update_scoring_matrix(
    data: ScoringMatrixUpdate,
    tender: Tender = Depends(load_tender),
    storage: TenderStorage = Depends(get_owner_storage)
):
    """
    Replace the tender's weight overrides.

    Unknown category ids or weights outside 0-100 are rejected; an
    unbalanced total is accepted and reported by ``/weights``.
    """
    matrix = ScoringMatrix(tender_id=tender.id, criteria=data.criteria)
    validate_weights(effective_weights(tender.categories, matrix))
    return await storage.set_scoring_matrix(tender.id, data.criteria)


# ============================================================================
# Tender Documents
# ============================================================================

@router.get("/{tender_id}/documents", response_model=List[TenderDocument])
async def list_tender_documents(tender: Tender = Depends(load_tender)):
    return tender.documents


@router.post(
    "/{tender_id}/documents",
    response_model=TenderDocument,
    status_code=status.HTTP_201_CREATED
)
@limiter.limit(LIMIT_UPLOAD)
async def upload_tender_document(
    request: Request,
    category: TenderDocumentCategory = Form(...),
    name: Optional[str] = Form(None),
    file: UploadFile = File(...),
    tender: Tender = Depends(load_tender),
    storage: TenderStorage = Depends(get_owner_storage),
    files: FileStorage = Depends(get_file_storage)
):
    content = await read_upload(file)
    stored = files.save(content, file.filename, f"tenders/{tender.id}")

    document = await storage.add_tender_document(
        tender.id,
        category=category.value,
        name=name or file.filename,
        url=stored.url,
        storage_path=stored.path
    )
    logger.info(f"Uploaded tender document {document.id} to tender {tender.id}")
    return document


@router.delete("/{tender_id}/documents/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_tender_document(
    document_id: str,
    tender: Tender = Depends(load_tender),
    storage: TenderStorage = Depends(get_owner_storage),
    files: FileStorage = Depends(get_file_storage)
):
    removed = await storage.remove_tender_document(tender.id, document_id)
    if removed is None:
        raise NotFoundError("Document not found")

    files.delete(removed.storage_path)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""
Tender Schemas

Immutable domain entities for projects, tenders, bidders and evaluations.
The data-access layer maps database rows onto these; the scoring core only
ever sees these models.
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr


class ProjectType(str, Enum):
    """Kind of construction project."""
    RESIDENTIAL = "residential"
    COMMERCIAL = "commercial"
    MIXED_USE = "mixed-use"
    HOSPITALITY = "hospitality"


class TenderStatus(str, Enum):
    """Lifecycle status of a tender."""
    DRAFT = "draft"
    OPEN = "open"
    CLOSED = "closed"
    AWARDED = "awarded"


class TenderDocumentCategory(str, Enum):
    """Section a tender-issued document belongs to."""
    ADMINISTRATIVE = "administrative"
    TECHNICAL = "technical"
    LEGAL = "legal"
    EVALUATION = "evaluation"
    SUBMISSION = "submission"


class Entity(BaseModel):
    """Base for all frozen domain entities."""
    model_config = ConfigDict(frozen=True)


class DocumentCategory(Entity):
    """A named, weighted bucket of documents a tender requires."""
    id: str = Field(..., description="Category identifier")
    tender_id: str = Field(..., description="Owning tender")
    name: str = Field(..., description="Category name, e.g. Technical")
    weight: int = Field(default=0, ge=0, le=100, description="Weight in percent")
    required: bool = Field(default=True, description="Must be scored before finalising")
    description: str = Field(default="", description="Guidance for bidders")


class ScoringMatrix(Entity):
    """Per-category weight overrides for a tender."""
    tender_id: str = Field(..., description="Owning tender")
    criteria: dict[str, int] = Field(
        default_factory=dict,
        description="Category id -> effective weight"
    )


class CategoryScore(Entity):
    """Evaluator result for one bidder in one category."""
    score: float = Field(..., ge=0, le=100, description="Score between 0 and 100")
    summary: str = Field(default="", description="Free-text summary")
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    risks: list[str] = Field(default_factory=list)


class BidderEvaluation(Entity):
    """Weighted overall outcome of a bidder's category scores."""
    bidder_id: str = Field(..., description="Evaluated bidder")
    category_scores: dict[str, CategoryScore] = Field(default_factory=dict)
    overall_score: int = Field(..., ge=0, le=100, description="Weighted aggregate, rounded")
    recommendation: str = Field(..., description="Templated recommendation sentence")
    evaluated_at: Optional[datetime] = Field(default=None, description="When it was stored")


class BidderDocument(Entity):
    """A file a bidder uploaded against one of the tender's categories."""
    id: str
    bidder_id: str
    category_id: str
    name: str
    url: str = Field(..., description="Opaque public storage URL")
    upload_date: Optional[datetime] = None
    storage_path: Optional[str] = Field(default=None, exclude=True)


class TenderDocument(Entity):
    """A file issued by the tender owner."""
    id: str
    tender_id: str
    category: TenderDocumentCategory
    name: str
    url: str
    upload_date: Optional[datetime] = None
    storage_path: Optional[str] = Field(default=None, exclude=True)


class Bidder(Entity):
    """A company submitting documents against a tender."""
    id: str
    tender_id: str
    name: str
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
    documents: list[BidderDocument] = Field(default_factory=list)
    category_scores: dict[str, CategoryScore] = Field(
        default_factory=dict,
        description="Stored category scores, finalised or not"
    )
    evaluation: Optional[BidderEvaluation] = None

    def documents_for(self, category_id: str) -> list[BidderDocument]:
        """Documents uploaded for a single category."""
        return [doc for doc in self.documents if doc.category_id == category_id]


class Tender(Entity):
    """A procurement process within a project."""
    id: str
    ref_no: str
    project_id: str
    name: str
    discipline: Optional[str] = None
    value: Optional[float] = None
    currency: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    description: Optional[str] = None
    status: TenderStatus = TenderStatus.DRAFT
    categories: list[DocumentCategory] = Field(default_factory=list)
    scoring_matrix: Optional[ScoringMatrix] = None
    bidders: list[Bidder] = Field(default_factory=list)
    documents: list[TenderDocument] = Field(default_factory=list)

    _categories_by_id: dict[str, DocumentCategory] = PrivateAttr(default_factory=dict)
    _bidders_by_id: dict[str, Bidder] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context) -> None:
        self._categories_by_id = {category.id: category for category in self.categories}
        self._bidders_by_id = {bidder.id: bidder for bidder in self.bidders}

    def get_category(self, category_id: str) -> Optional[DocumentCategory]:
        return self._categories_by_id.get(category_id)

    def get_bidder(self, bidder_id: str) -> Optional[Bidder]:
        return self._bidders_by_id.get(bidder_id)


class Project(Entity):
    """A construction project grouping one or more tenders."""
    id: str
    ref_no: str
    owner_id: str
    name: str
    description: Optional[str] = None
    area: Optional[float] = None
    type: Optional[ProjectType] = None
    location: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    tenders: list[Tender] = Field(default_factory=list)

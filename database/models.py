"""
Database Models

SQLAlchemy models for projects, tenders, bidders and their evaluations.
"""

import uuid
from datetime import datetime, date, timezone
from typing import Optional, List

from sqlalchemy import (
    JSON, String, Text, Integer, Float, Boolean, DateTime, Date, Uuid,
    ForeignKey, Index, UniqueConstraint
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


# ============================================================================
# USERS & ITEMS
# ============================================================================

class User(Base):
    """User model with authentication fields."""
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[Optional[str]] = mapped_column(String(255))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow
    )

    # Relationships
    items: Mapped[List["Item"]] = relationship(
        back_populates="owner",
        cascade="all, delete-orphan"
    )
    projects: Mapped[List["Project"]] = relationship(
        back_populates="owner",
        cascade="all, delete-orphan"
    )


class Item(Base):
    """Generic owner-scoped resource."""
    __tablename__ = "items"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow
    )

    owner: Mapped["User"] = relationship(back_populates="items")

    __table_args__ = (
        Index("idx_items_owner", "owner_id"),
    )


# ============================================================================
# PROJECTS & TENDERS
# ============================================================================

class Project(Base):
    """Construction project owned by a user."""
    __tablename__ = "projects"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False
    )
    ref_no: Mapped[str] = mapped_column(String(50), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    area: Mapped[Optional[float]] = mapped_column(Float)
    type: Mapped[Optional[str]] = mapped_column(String(50))
    location: Mapped[Optional[str]] = mapped_column(String(255))
    start_date: Mapped[Optional[date]] = mapped_column(Date)
    end_date: Mapped[Optional[date]] = mapped_column(Date)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    # Relationships
    owner: Mapped["User"] = relationship(back_populates="projects")
    tenders: Mapped[List["Tender"]] = relationship(
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="Tender.created_at"
    )

    __table_args__ = (
        Index("idx_projects_owner", "owner_id"),
    )


class Tender(Base):
    """Procurement process within a project."""
    __tablename__ = "tenders"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    project_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False
    )
    ref_no: Mapped[str] = mapped_column(String(80), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    discipline: Mapped[Optional[str]] = mapped_column(String(100))
    value: Mapped[Optional[float]] = mapped_column(Float)
    currency: Mapped[Optional[str]] = mapped_column(String(10))
    start_date: Mapped[Optional[date]] = mapped_column(Date)
    end_date: Mapped[Optional[date]] = mapped_column(Date)
    description: Mapped[Optional[str]] = mapped_column(Text)
    status: Mapped[str] = mapped_column(String(50), default="draft")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    # Relationships
    project: Mapped["Project"] = relationship(back_populates="tenders")
    categories: Mapped[List["DocumentCategory"]] = relationship(
        back_populates="tender",
        cascade="all, delete-orphan",
        order_by="DocumentCategory.position"
    )
    scoring_matrix: Mapped[Optional["ScoringMatrix"]] = relationship(
        back_populates="tender",
        uselist=False,
        cascade="all, delete-orphan"
    )
    bidders: Mapped[List["Bidder"]] = relationship(
        back_populates="tender",
        cascade="all, delete-orphan",
        order_by="Bidder.created_at"
    )
    documents: Mapped[List["TenderDocument"]] = relationship(
        back_populates="tender",
        cascade="all, delete-orphan",
        order_by="TenderDocument.upload_date"
    )

    __table_args__ = (
        Index("idx_tenders_project", "project_id"),
    )


class TenderDocument(Base):
    """File issued by the tender owner."""
    __tablename__ = "tender_documents"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    tender_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("tenders.id", ondelete="CASCADE"),
        nullable=False
    )
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    storage_path: Mapped[Optional[str]] = mapped_column(Text)
    upload_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    tender: Mapped["Tender"] = relationship(back_populates="documents")

    __table_args__ = (
        Index("idx_tender_documents_tender", "tender_id"),
    )


# ============================================================================
# CATEGORIES & WEIGHTS
# ============================================================================

class DocumentCategory(Base):
    """Weighted document category of a tender."""
    __tablename__ = "document_categories"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    tender_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("tenders.id", ondelete="CASCADE"),
        nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    weight: Mapped[int] = mapped_column(Integer, default=0)
    required: Mapped[bool] = mapped_column(Boolean, default=True)
    description: Mapped[str] = mapped_column(Text, default="")
    position: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    tender: Mapped["Tender"] = relationship(back_populates="categories")

    __table_args__ = (
        Index("idx_categories_tender", "tender_id"),
    )


class ScoringMatrix(Base):
    """Per-tender category weight overrides."""
    __tablename__ = "scoring_matrices"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    tender_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("tenders.id", ondelete="CASCADE"),
        unique=True,
        nullable=False
    )
    criteria: Mapped[dict] = mapped_column(JSONType, default=dict)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow
    )

    tender: Mapped["Tender"] = relationship(back_populates="scoring_matrix")


# ============================================================================
# BIDDERS & EVALUATIONS
# ============================================================================

class Bidder(Base):
    """Company bidding on a tender."""
    __tablename__ = "bidders"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    tender_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("tenders.id", ondelete="CASCADE"),
        nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255))
    phone: Mapped[Optional[str]] = mapped_column(String(50))
    address: Mapped[Optional[str]] = mapped_column(Text)
    city: Mapped[Optional[str]] = mapped_column(String(100))
    country: Mapped[Optional[str]] = mapped_column(String(100))
    contact_person: Mapped[Optional[str]] = mapped_column(String(255))
    contact_position: Mapped[Optional[str]] = mapped_column(String(255))
    company_size: Mapped[Optional[str]] = mapped_column(String(50))
    year_established: Mapped[Optional[str]] = mapped_column(String(10))
    website: Mapped[Optional[str]] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    # Relationships
    tender: Mapped["Tender"] = relationship(back_populates="bidders")
    documents: Mapped[List["BidderDocument"]] = relationship(
        back_populates="bidder",
        cascade="all, delete-orphan",
        order_by="BidderDocument.upload_date"
    )
    category_scores: Mapped[List["CategoryScore"]] = relationship(
        back_populates="bidder",
        cascade="all, delete-orphan"
    )
    evaluation: Mapped[Optional["BidderEvaluation"]] = relationship(
        back_populates="bidder",
        uselist=False,
        cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("idx_bidders_tender", "tender_id"),
    )


class BidderDocument(Base):
    """File a bidder uploaded for one category."""
    __tablename__ = "bidder_documents"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    bidder_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("bidders.id", ondelete="CASCADE"),
        nullable=False
    )
    category_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("document_categories.id", ondelete="CASCADE"),
        nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    storage_path: Mapped[Optional[str]] = mapped_column(Text)
    upload_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    bidder: Mapped["Bidder"] = relationship(back_populates="documents")

    __table_args__ = (
        Index("idx_bidder_documents_bidder", "bidder_id"),
        Index("idx_bidder_documents_category", "category_id"),
    )


class CategoryScore(Base):
    """Evaluator result for one (bidder, category) pair."""
    __tablename__ = "category_scores"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    bidder_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("bidders.id", ondelete="CASCADE"),
        nullable=False
    )
    category_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("document_categories.id", ondelete="CASCADE"),
        nullable=False
    )
    score: Mapped[float] = mapped_column(Float, nullable=False)
    summary: Mapped[str] = mapped_column(Text, default="")
    strengths: Mapped[list] = mapped_column(JSONType, default=list)
    weaknesses: Mapped[list] = mapped_column(JSONType, default=list)
    risks: Mapped[list] = mapped_column(JSONType, default=list)
    evaluated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow
    )

    bidder: Mapped["Bidder"] = relationship(back_populates="category_scores")

    __table_args__ = (
        UniqueConstraint("bidder_id", "category_id", name="uq_bidder_category_score"),
    )


class BidderEvaluation(Base):
    """
    Finalised evaluation of a bidder.

    ``category_scores`` is a snapshot of the scores the overall score was
    computed from, keyed by category id.
    """
    __tablename__ = "bidder_evaluations"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    bidder_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("bidders.id", ondelete="CASCADE"),
        unique=True,
        nullable=False
    )
    category_scores: Mapped[dict] = mapped_column(JSONType, default=dict)
    overall_score: Mapped[int] = mapped_column(Integer, nullable=False)
    recommendation: Mapped[str] = mapped_column(Text, nullable=False)
    evaluated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    bidder: Mapped["Bidder"] = relationship(back_populates="evaluation")

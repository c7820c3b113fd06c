"""
Database Package

SQLAlchemy models and connection management.
"""

from database.connection import (
    get_db,
    get_db_context,
    init_db,
    close_db,
    check_db,
    get_engine,
    get_session_factory,
)

from database.models import (
    Base,
    User,
    Item,
    Project,
    Tender,
    TenderDocument,
    DocumentCategory,
    ScoringMatrix,
    Bidder,
    BidderDocument,
    CategoryScore,
    BidderEvaluation,
)

__all__ = [
    # Connection
    "get_db",
    "get_db_context",
    "init_db",
    "close_db",
    "check_db",
    "get_engine",
    "get_session_factory",
    # Models
    "Base",
    "User",
    "Item",
    "Project",
    "Tender",
    "TenderDocument",
    "DocumentCategory",
    "ScoringMatrix",
    "Bidder",
    "BidderDocument",
    "CategoryScore",
    "BidderEvaluation",
]

"""
Tender Storage Service

Async data-access layer for projects, tenders, bidders and evaluations.
Rows are mapped onto the immutable entities in ``schemas.tender``; callers
never see ORM objects.
"""

import uuid
from datetime import datetime, timezone
from typing import Mapping, Optional, List

from sqlalchemy import select, delete, func
from sqlalchemy.orm import selectinload

from config.logging_config import get_logger
from database import models
from database.connection import get_db_context
from schemas.tender import (
    Bidder,
    BidderDocument,
    BidderEvaluation,
    CategoryScore,
    DocumentCategory,
    Project,
    ScoringMatrix,
    Tender,
    TenderDocument,
)

logger = get_logger("storage")


def _as_uuid(value) -> Optional[uuid.UUID]:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (ValueError, TypeError):
        return None


def project_ref_no(project_id: uuid.UUID, year: Optional[int] = None) -> str:
    year = year or datetime.now(timezone.utc).year
    return f"PRJ-{year}-{str(project_id)[:4].upper()}"


def tender_ref_no(project_ref: str, tender_id: uuid.UUID) -> str:
    return f"{project_ref}-TND-{str(tender_id)[:3].upper()}"


# ============================================================================
# Row -> entity mapping
# ============================================================================

def _category_entity(row: models.DocumentCategory) -> DocumentCategory:
    return DocumentCategory(
        id=str(row.id),
        tender_id=str(row.tender_id),
        name=row.name,
        weight=row.weight,
        required=row.required,
        description=row.description or "",
    )


def _score_entity(row: models.CategoryScore) -> CategoryScore:
    return CategoryScore(
        score=row.score,
        summary=row.summary or "",
        strengths=row.strengths or [],
        weaknesses=row.weaknesses or [],
        risks=row.risks or [],
    )


def _evaluation_entity(row: models.BidderEvaluation) -> BidderEvaluation:
    return BidderEvaluation(
        bidder_id=str(row.bidder_id),
        category_scores={
            category_id: CategoryScore(**score)
            for category_id, score in (row.category_scores or {}).items()
        },
        overall_score=row.overall_score,
        recommendation=row.recommendation,
        evaluated_at=row.evaluated_at,
    )


def _bidder_document_entity(row: models.BidderDocument) -> BidderDocument:
    return BidderDocument(
        id=str(row.id),
        bidder_id=str(row.bidder_id),
        category_id=str(row.category_id),
        name=row.name,
        url=row.url,
        upload_date=row.upload_date,
        storage_path=row.storage_path,
    )


def _tender_document_entity(row: models.TenderDocument) -> TenderDocument:
    return TenderDocument(
        id=str(row.id),
        tender_id=str(row.tender_id),
        category=row.category,
        name=row.name,
        url=row.url,
        upload_date=row.upload_date,
        storage_path=row.storage_path,
    )


def _bidder_entity(row: models.Bidder) -> Bidder:
    return Bidder(
        id=str(row.id),
        tender_id=str(row.tender_id),
        name=row.name,
        email=row.email,
        phone=row.phone,
        address=row.address,
        city=row.city,
        country=row.country,
        contact_person=row.contact_person,
        contact_position=row.contact_position,
        company_size=row.company_size,
        year_established=row.year_established,
        website=row.website,
        documents=[_bidder_document_entity(doc) for doc in row.documents],
        category_scores={
            str(score.category_id): _score_entity(score) for score in row.category_scores
        },
        evaluation=_evaluation_entity(row.evaluation) if row.evaluation else None,
    )


def _tender_entity(row: models.Tender) -> Tender:
    matrix = None
    if row.scoring_matrix is not None:
        matrix = ScoringMatrix(
            tender_id=str(row.id),
            criteria=row.scoring_matrix.criteria or {},
        )
    return Tender(
        id=str(row.id),
        ref_no=row.ref_no,
        project_id=str(row.project_id),
        name=row.name,
        discipline=row.discipline,
        value=row.value,
        currency=row.currency,
        start_date=row.start_date,
        end_date=row.end_date,
        description=row.description,
        status=row.status,
        categories=[_category_entity(category) for category in row.categories],
        scoring_matrix=matrix,
        bidders=[_bidder_entity(bidder) for bidder in row.bidders],
        documents=[_tender_document_entity(doc) for doc in row.documents],
    )


def _project_entity(row: models.Project) -> Project:
    return Project(
        id=str(row.id),
        ref_no=row.ref_no,
        owner_id=str(row.owner_id),
        name=row.name,
        description=row.description,
        area=row.area,
        type=row.type,
        location=row.location,
        start_date=row.start_date,
        end_date=row.end_date,
        tenders=[_tender_entity(tender) for tender in row.tenders],
    )


def _bidder_load_options(path):
    return [
        path.selectinload(models.Bidder.documents),
        path.selectinload(models.Bidder.category_scores),
        path.selectinload(models.Bidder.evaluation),
    ]


def _tender_load_options(path=None):
    """Eager-load everything a Tender entity carries."""
    def load(attribute):
        return path.selectinload(attribute) if path is not None else selectinload(attribute)

    bidders = load(models.Tender.bidders)
    return [
        load(models.Tender.categories),
        load(models.Tender.scoring_matrix),
        load(models.Tender.documents),
        *_bidder_load_options(bidders),
    ]


class TenderStorage:
    """
    Async storage for the tender graph.

    Reads are scoped to projects owned by ``owner_id``; with no owner
    (workers, scripts) nothing is filtered.
    """

    def __init__(self, owner_id: Optional[str] = None):
        self.owner_id = _as_uuid(owner_id) if owner_id else None

    def _owned(self, query):
        if self.owner_id:
            query = query.where(models.Project.owner_id == self.owner_id)
        return query

    # =========================================================================
    # Projects
    # =========================================================================

    async def create_project(self, **fields) -> Project:
        """Create a project owned by the storage owner."""
        project_id = uuid.uuid4()
        async with get_db_context() as db:
            project = models.Project(
                id=project_id,
                owner_id=self.owner_id,
                ref_no=project_ref_no(project_id),
                **fields
            )
            db.add(project)
            await db.commit()

        logger.info(f"Created project {project_id}")
        return await self.get_project_by_id(str(project_id))

    async def list_projects(self) -> List[Project]:
        async with get_db_context() as db:
            query = self._owned(
                select(models.Project)
                .options(*_tender_load_options(selectinload(models.Project.tenders)))
                .order_by(models.Project.created_at)
            )
            result = await db.execute(query)
            return [_project_entity(row) for row in result.scalars().all()]

    async def get_project_by_id(self, project_id: str) -> Optional[Project]:
        project_uuid = _as_uuid(project_id)
        if project_uuid is None:
            return None

        async with get_db_context() as db:
            query = self._owned(
                select(models.Project)
                .options(*_tender_load_options(selectinload(models.Project.tenders)))
                .where(models.Project.id == project_uuid)
            )
            result = await db.execute(query)
            row = result.scalar_one_or_none()
            return _project_entity(row) if row else None

    # =========================================================================
    # Tenders
    # =========================================================================

    async def create_tender(self, project_id: str, **fields) -> Optional[Tender]:
        """Create a tender under a project. Returns None if the project is unknown."""
        project = await self.get_project_by_id(project_id)
        if project is None:
            return None

        tender_id = uuid.uuid4()
        async with get_db_context() as db:
            tender = models.Tender(
                id=tender_id,
                project_id=uuid.UUID(project.id),
                ref_no=tender_ref_no(project.ref_no, tender_id),
                **fields
            )
            db.add(tender)
            await db.commit()

        logger.info(f"Created tender {tender_id} in project {project.id}")
        return await self.get_tender_by_id(str(tender_id))

    async def get_tender_by_id(self, tender_id: str) -> Optional[Tender]:
        """Load a tender with categories, matrix, documents and bidders."""
        tender_uuid = _as_uuid(tender_id)
        if tender_uuid is None:
            return None

        async with get_db_context() as db:
            query = self._owned(
                select(models.Tender)
                .join(models.Project)
                .options(*_tender_load_options())
                .where(models.Tender.id == tender_uuid)
            )
            result = await db.execute(query)
            row = result.scalar_one_or_none()
            return _tender_entity(row) if row else None

    async def get_tender_documents(self, tender_id: str) -> List[TenderDocument]:
        tender = await self.get_tender_by_id(tender_id)
        return list(tender.documents) if tender else []

    async def add_tender_document(
        self,
        tender_id: str,
        category: str,
        name: str,
        url: str,
        storage_path: Optional[str] = None
    ) -> TenderDocument:
        async with get_db_context() as db:
            document = models.TenderDocument(
                tender_id=uuid.UUID(tender_id),
                category=category,
                name=name,
                url=url,
                storage_path=storage_path,
            )
            db.add(document)
            await db.commit()
            return _tender_document_entity(document)

    async def remove_tender_document(
        self,
        tender_id: str,
        document_id: str
    ) -> Optional[TenderDocument]:
        """Delete a tender document, returning what was removed."""
        document_uuid = _as_uuid(document_id)
        if document_uuid is None:
            return None

        async with get_db_context() as db:
            result = await db.execute(
                select(models.TenderDocument).where(
                    models.TenderDocument.id == document_uuid,
                    models.TenderDocument.tender_id == uuid.UUID(tender_id)
                )
            )
            row = result.scalar_one_or_none()
            if row is None:
                return None

            removed = _tender_document_entity(row)
            await db.delete(row)
            await db.commit()
            return removed

    # =========================================================================
    # Categories & scoring matrix
    # =========================================================================

    async def add_category(
        self,
        tender_id: str,
        name: str,
        weight: int,
        required: bool = True,
        description: str = ""
    ) -> DocumentCategory:
        tender_uuid = uuid.UUID(tender_id)
        async with get_db_context() as db:
            count = await db.scalar(
                select(func.count(models.DocumentCategory.id))
                .where(models.DocumentCategory.tender_id == tender_uuid)
            )
            category = models.DocumentCategory(
                tender_id=tender_uuid,
                name=name,
                weight=weight,
                required=required,
                description=description or "",
                position=count or 0,
            )
            db.add(category)
            await db.commit()
            return _category_entity(category)

    async def update_category(
        self,
        tender_id: str,
        category_id: str,
        **changes
    ) -> Optional[DocumentCategory]:
        """Apply non-None field changes to a category."""
        category_uuid = _as_uuid(category_id)
        if category_uuid is None:
            return None

        async with get_db_context() as db:
            result = await db.execute(
                select(models.DocumentCategory).where(
                    models.DocumentCategory.id == category_uuid,
                    models.DocumentCategory.tender_id == uuid.UUID(tender_id)
                )
            )
            category = result.scalar_one_or_none()
            if category is None:
                return None

            for field_name, value in changes.items():
                if value is not None:
                    setattr(category, field_name, value)
            await db.commit()
            return _category_entity(category)

    async def delete_category(self, tender_id: str, category_id: str) -> bool:
        """
        Delete a category together with the documents and scores filed under
        it, and drop it from the tender's scoring matrix.
        """
        category_uuid = _as_uuid(category_id)
        if category_uuid is None:
            return False
        tender_uuid = uuid.UUID(tender_id)

        async with get_db_context() as db:
            result = await db.execute(
                select(models.DocumentCategory).where(
                    models.DocumentCategory.id == category_uuid,
                    models.DocumentCategory.tender_id == tender_uuid
                )
            )
            category = result.scalar_one_or_none()
            if category is None:
                return False

            await db.execute(
                delete(models.BidderDocument)
                .where(models.BidderDocument.category_id == category_uuid)
            )
            await db.execute(
                delete(models.CategoryScore)
                .where(models.CategoryScore.category_id == category_uuid)
            )

            matrix = await db.scalar(
                select(models.ScoringMatrix)
                .where(models.ScoringMatrix.tender_id == tender_uuid)
            )
            if matrix is not None and str(category_uuid) in (matrix.criteria or {}):
                matrix.criteria = {
                    key: weight for key, weight in matrix.criteria.items()
                    if key != str(category_uuid)
                }

            await db.delete(category)
            await db.commit()

        logger.info(f"Deleted category {category_id} from tender {tender_id}")
        return True

    async def set_scoring_matrix(
        self,
        tender_id: str,
        criteria: Mapping[str, int]
    ) -> ScoringMatrix:
        """Create or replace the tender's scoring matrix."""
        tender_uuid = uuid.UUID(tender_id)
        async with get_db_context() as db:
            matrix = await db.scalar(
                select(models.ScoringMatrix)
                .where(models.ScoringMatrix.tender_id == tender_uuid)
            )
            if matrix is None:
                matrix = models.ScoringMatrix(tender_id=tender_uuid, criteria=dict(criteria))
                db.add(matrix)
            else:
                matrix.criteria = dict(criteria)
            await db.commit()

        return ScoringMatrix(tender_id=tender_id, criteria=dict(criteria))

    # =========================================================================
    # Bidders & documents
    # =========================================================================

    async def add_bidder(self, tender_id: str, **fields) -> Bidder:
        bidder_id = uuid.uuid4()
        async with get_db_context() as db:
            db.add(models.Bidder(id=bidder_id, tender_id=uuid.UUID(tender_id), **fields))
            await db.commit()

        logger.info(f"Added bidder {bidder_id} to tender {tender_id}")
        return await self.get_bidder_by_id(str(bidder_id))

    async def get_bidder_by_id(self, bidder_id: str) -> Optional[Bidder]:
        bidder_uuid = _as_uuid(bidder_id)
        if bidder_uuid is None:
            return None

        async with get_db_context() as db:
            query = self._owned(
                select(models.Bidder)
                .join(models.Tender)
                .join(models.Project)
                .options(
                    selectinload(models.Bidder.documents),
                    selectinload(models.Bidder.category_scores),
                    selectinload(models.Bidder.evaluation),
                )
                .where(models.Bidder.id == bidder_uuid)
            )
            result = await db.execute(query)
            row = result.scalar_one_or_none()
            return _bidder_entity(row) if row else None

    async def add_bidder_document(
        self,
        bidder_id: str,
        category_id: str,
        name: str,
        url: str,
        storage_path: Optional[str] = None
    ) -> BidderDocument:
        async with get_db_context() as db:
            document = models.BidderDocument(
                bidder_id=uuid.UUID(bidder_id),
                category_id=uuid.UUID(category_id),
                name=name,
                url=url,
                storage_path=storage_path,
            )
            db.add(document)
            await db.commit()
            return _bidder_document_entity(document)

    async def remove_bidder_document(
        self,
        bidder_id: str,
        document_id: str
    ) -> Optional[BidderDocument]:
        """Delete a bidder document. Stored scores and evaluations are untouched."""
        document_uuid = _as_uuid(document_id)
        if document_uuid is None:
            return None

        async with get_db_context() as db:
            result = await db.execute(
                select(models.BidderDocument).where(
                    models.BidderDocument.id == document_uuid,
                    models.BidderDocument.bidder_id == uuid.UUID(bidder_id)
                )
            )
            row = result.scalar_one_or_none()
            if row is None:
                return None

            removed = _bidder_document_entity(row)
            await db.delete(row)
            await db.commit()
            return removed

    # =========================================================================
    # Scores & evaluations
    # =========================================================================

    async def save_category_scores(
        self,
        category_id: str,
        scores: Mapping[str, CategoryScore]
    ) -> None:
        """
        Upsert one category's scores for several bidders in one transaction.

        Args:
            category_id: Category the scores belong to
            scores: Bidder id -> score; existing rows are overwritten
        """
        category_uuid = uuid.UUID(category_id)
        async with get_db_context() as db:
            bidder_uuids = [uuid.UUID(bidder_id) for bidder_id in scores]
            result = await db.execute(
                select(models.CategoryScore).where(
                    models.CategoryScore.category_id == category_uuid,
                    models.CategoryScore.bidder_id.in_(bidder_uuids)
                )
            )
            existing = {row.bidder_id: row for row in result.scalars().all()}

            for bidder_id, score in scores.items():
                bidder_uuid = uuid.UUID(bidder_id)
                row = existing.get(bidder_uuid)
                if row is None:
                    row = models.CategoryScore(bidder_id=bidder_uuid, category_id=category_uuid)
                    db.add(row)
                row.score = score.score
                row.summary = score.summary
                row.strengths = list(score.strengths)
                row.weaknesses = list(score.weaknesses)
                row.risks = list(score.risks)
                row.evaluated_at = datetime.now(timezone.utc)

            await db.commit()

        logger.info(f"Stored {len(scores)} score(s) for category {category_id}")

    async def save_category_score(
        self,
        bidder_id: str,
        category_id: str,
        score: CategoryScore
    ) -> None:
        await self.save_category_scores(category_id, {bidder_id: score})

    async def replace_bidder_evaluation(self, evaluation: BidderEvaluation) -> BidderEvaluation:
        """Store ``evaluation`` in place of any earlier one for the bidder."""
        bidder_uuid = uuid.UUID(evaluation.bidder_id)
        async with get_db_context() as db:
            await db.execute(
                delete(models.BidderEvaluation)
                .where(models.BidderEvaluation.bidder_id == bidder_uuid)
            )
            row = models.BidderEvaluation(
                bidder_id=bidder_uuid,
                category_scores={
                    category_id: score.model_dump()
                    for category_id, score in evaluation.category_scores.items()
                },
                overall_score=evaluation.overall_score,
                recommendation=evaluation.recommendation,
                evaluated_at=evaluation.evaluated_at or datetime.now(timezone.utc),
            )
            db.add(row)
            await db.commit()
            stored = _evaluation_entity(row)

        logger.info(
            f"Stored evaluation for bidder {evaluation.bidder_id}: "
            f"{evaluation.overall_score}/100"
        )
        return stored

    async def get_bidder_evaluation(self, bidder_id: str) -> Optional[BidderEvaluation]:
        bidder = await self.get_bidder_by_id(bidder_id)
        return bidder.evaluation if bidder else None


# Factory function
def get_tender_storage(owner_id: Optional[str] = None) -> TenderStorage:
    """Get a tender storage instance scoped to an owner."""
    return TenderStorage(owner_id)

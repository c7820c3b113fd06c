"""
Projects Router

Projects owned by the current user and the tenders created under them.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field, model_validator

from schemas.tender import Project, ProjectType, Tender, TenderStatus
from api.dependencies import get_owner_storage
from api.middleware.error_handler import NotFoundError
from services.tender_storage import TenderStorage


router = APIRouter(prefix="/projects", tags=["Projects"])


# ============================================================================
# Request Models
# ============================================================================

class DateRange(BaseModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @model_validator(mode="after")
    def check_dates(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class ProjectCreate(DateRange):
    """Create project request."""
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    area: Optional[float] = Field(default=None, ge=0)
    type: Optional[ProjectType] = None
    location: Optional[str] = None


class TenderCreate(DateRange):
    """Create tender request."""
    name: str = Field(..., min_length=1, max_length=255)
    discipline: Optional[str] = None
    value: Optional[float] = Field(default=None, ge=0)
    currency: Optional[str] = Field(default=None, max_length=10)
    description: Optional[str] = None
    status: TenderStatus = TenderStatus.DRAFT


# ============================================================================
# Project Endpoints
# ============================================================================

@router.get("", response_model=List[Project])
async def list_projects(storage: TenderStorage = Depends(get_owner_storage)):
    """All projects of the current user with their tenders."""
    return await storage.list_projects()


@router.post("", response_model=Project, status_code=status.HTTP_201_CREATED)
async def create_project(
    data: ProjectCreate,
    storage: TenderStorage = Depends(get_owner_storage)
):
    fields = data.model_dump()
    if data.type is not None:
        fields["type"] = data.type.value
    return await storage.create_project(**fields)


@router.get("/{project_id}", response_model=Project)
async def get_project(
    project_id: str,
    storage: TenderStorage = Depends(get_owner_storage)
):
    project = await storage.get_project_by_id(project_id)
    if project is None:
        raise NotFoundError("Project not found")
    return project


@router.post("/{project_id}/tenders", response_model=Tender, status_code=status.HTTP_201_CREATED)
async def create_tender(
    project_id: str,
    data: TenderCreate,
    storage: TenderStorage = Depends(get_owner_storage)
):
    """Create a tender; its reference number derives from the project's."""
    fields = data.model_dump()
    fields["status"] = data.status.value
    tender = await storage.create_tender(project_id, **fields)
    if tender is None:
        raise NotFoundError("Project not found")
    return tender

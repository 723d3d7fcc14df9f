"""Job routes."""

from fastapi import APIRouter, Request, status

from app.core.dependencies import DbSession, RequireAdmin
from app.schemas.v1.common import ERROR_RESPONSES, DeletedResponse, parse_query_filters
from app.schemas.v1.jobs import (
    JobCreate,
    JobFilterQuery,
    JobListResponse,
    JobResponse,
    JobUpdate,
    JobWithCompanyResponse,
)
from app.services.job_service import JobService

router = APIRouter(prefix="/jobs", tags=["jobs"], responses=ERROR_RESPONSES)


@router.post("", response_model=JobResponse, status_code=status.HTTP_201_CREATED)
async def create_job(body: JobCreate, user: RequireAdmin, session: DbSession):
    """Create a job posting. Admin only."""
    service = JobService(session)
    job = await service.create(body.model_dump(by_alias=True))
    return JobResponse(job=job)


@router.get("", response_model=JobListResponse)
async def list_jobs(request: Request, session: DbSession):
    """List jobs, optionally filtered by title, minSalary and hasEquity."""
    filters = parse_query_filters(JobFilterQuery, request.query_params)
    service = JobService(session)
    jobs = await service.find_all(filters)
    return JobListResponse(jobs=jobs)


@router.get("/{job_id}", response_model=JobWithCompanyResponse)
async def get_job(job_id: int, session: DbSession):
    service = JobService(session)
    job = await service.get(job_id)
    return JobWithCompanyResponse(job=job)


@router.patch("/{job_id}", response_model=JobResponse)
async def update_job(job_id: int, body: JobUpdate, user: RequireAdmin, session: DbSession):
    """Partially update title, salary and/or equity. Admin only."""
    service = JobService(session)
    job = await service.update(job_id, body.model_dump(exclude_unset=True, by_alias=True))
    return JobResponse(job=job)


@router.delete("/{job_id}", response_model=DeletedResponse)
async def delete_job(job_id: int, user: RequireAdmin, session: DbSession):
    service = JobService(session)
    await service.remove(job_id)
    return DeletedResponse(deleted=job_id)

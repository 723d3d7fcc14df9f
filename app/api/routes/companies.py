"""Company routes."""

from fastapi import APIRouter, Request, status

from app.core.dependencies import DbSession, RequireAdmin
from app.schemas.v1.common import ERROR_RESPONSES, DeletedResponse, parse_query_filters
from app.schemas.v1.companies import (
    CompanyCreate,
    CompanyFilterQuery,
    CompanyListResponse,
    CompanyResponse,
    CompanyUpdate,
    CompanyWithJobsResponse,
)
from app.services.company_service import CompanyService

router = APIRouter(prefix="/companies", tags=["companies"], responses=ERROR_RESPONSES)


@router.post("", response_model=CompanyResponse, status_code=status.HTTP_201_CREATED)
async def create_company(body: CompanyCreate, user: RequireAdmin, session: DbSession):
    """Create a company. Admin only."""
    service = CompanyService(session)
    company = await service.create(body.model_dump(by_alias=True))
    return CompanyResponse(company=company)


@router.get("", response_model=CompanyListResponse)
async def list_companies(request: Request, session: DbSession):
    """List companies, optionally filtered by nameLike, minEmployees and maxEmployees."""
    filters = parse_query_filters(CompanyFilterQuery, request.query_params)
    service = CompanyService(session)
    companies = await service.find_all(filters)
    return CompanyListResponse(companies=companies)


@router.get("/{handle}", response_model=CompanyWithJobsResponse)
async def get_company(handle: str, session: DbSession):
    """Get a company and its jobs."""
    service = CompanyService(session)
    company = await service.get(handle)
    return CompanyWithJobsResponse(company=company)


@router.patch("/{handle}", response_model=CompanyResponse)
async def update_company(handle: str, body: CompanyUpdate, user: RequireAdmin, session: DbSession):
    """Partially update a company. Admin only."""
    service = CompanyService(session)
    company = await service.update(handle, body.model_dump(exclude_unset=True, by_alias=True))
    return CompanyResponse(company=company)


@router.delete("/{handle}", response_model=DeletedResponse)
async def delete_company(handle: str, user: RequireAdmin, session: DbSession):
    """Delete a company and, by cascade, its jobs. Admin only."""
    service = CompanyService(session)
    await service.remove(handle)
    return DeletedResponse(deleted=handle)

"""Job schemas."""

from decimal import Decimal

from pydantic import Field, field_validator

from app.schemas.v1.common import CamelModel, CamelQuery, CamelRequest
from app.schemas.v1.companies import CompanyDetail


class JobCreate(CamelRequest):
    title: str = Field(min_length=1)
    salary: int | None = Field(default=None, ge=0)
    equity: Decimal | None = Field(default=None, ge=0, le=1)
    company_handle: str = Field(min_length=1, max_length=25)


class JobUpdate(CamelRequest):
    """Partial update; id and company cannot be changed."""

    title: str | None = Field(default=None, min_length=1)
    salary: int | None = Field(default=None, ge=0)
    equity: Decimal | None = Field(default=None, ge=0, le=1)

    @field_validator("title")
    @classmethod
    def reject_null_title(cls, v: str | None) -> str:
        if v is None:
            raise ValueError("cannot be null")
        return v


class JobFilterQuery(CamelQuery):
    title: str | None = None
    min_salary: str | None = None
    has_equity: str | None = None


class JobDetail(CamelModel):
    """Job as returned by the API; the company key keeps its column name."""

    id: int
    title: str
    salary: int | None = None
    equity: Decimal | None = None
    company_handle: str = Field(alias="company_handle")


class JobListItem(JobDetail):
    company_name: str | None = None


class JobWithCompany(CamelModel):
    id: int
    title: str
    salary: int | None = None
    equity: Decimal | None = None
    company: CompanyDetail | None = None


class JobResponse(CamelModel):
    job: JobDetail


class JobWithCompanyResponse(CamelModel):
    job: JobWithCompany


class JobListResponse(CamelModel):
    jobs: list[JobListItem]

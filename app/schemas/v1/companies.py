"""Company schemas."""

from decimal import Decimal

from pydantic import Field, field_validator

from app.schemas.v1.common import CamelModel, CamelQuery, CamelRequest


class CompanyCreate(CamelRequest):
    handle: str = Field(min_length=1, max_length=25, pattern=r"^[a-z0-9_-]+$")
    name: str = Field(min_length=1)
    description: str
    num_employees: int | None = Field(default=None, ge=0)
    logo_url: str | None = Field(default=None, max_length=2048)


class CompanyUpdate(CamelRequest):
    """Partial update; handle cannot be changed."""

    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    num_employees: int | None = Field(default=None, ge=0)
    logo_url: str | None = Field(default=None, max_length=2048)

    @field_validator("name", "description")
    @classmethod
    def reject_null(cls, v: str | None) -> str:
        if v is None:
            raise ValueError("cannot be null")
        return v


class CompanyFilterQuery(CamelQuery):
    name_like: str | None = None
    min_employees: str | None = None
    max_employees: str | None = None


class CompanyDetail(CamelModel):
    handle: str
    name: str
    description: str
    num_employees: int | None = None
    logo_url: str | None = None


class CompanyJob(CamelModel):
    id: int
    title: str
    salary: int | None = None
    equity: Decimal | None = None


class CompanyWithJobs(CompanyDetail):
    jobs: list[CompanyJob] = Field(default_factory=list)


class CompanyResponse(CamelModel):
    company: CompanyDetail


class CompanyWithJobsResponse(CamelModel):
    company: CompanyWithJobs


class CompanyListResponse(CamelModel):
    companies: list[CompanyDetail]

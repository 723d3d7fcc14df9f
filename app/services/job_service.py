"""Job service - job CRUD and search."""

from collections.abc import Mapping
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ValidationError
from app.core.metrics import jobly_filter_rejections_total
from app.persistence.company_repository import CompanyRepository
from app.persistence.job_repository import JobRepository

logger = structlog.get_logger(__name__)


class JobService:
    """Service for managing job postings."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.job_repo = JobRepository(session)
        self.company_repo = CompanyRepository(session)

    async def create(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """Create a job for an existing company."""
        handle = data["companyHandle"]
        if not await self.company_repo.exists(handle):
            raise ValidationError(f"No company: {handle}")

        job = await self.job_repo.create(data)
        logger.info("Job created", job_id=job["id"], company_handle=handle)
        return job

    async def find_all(self, filters: Mapping[str, Any] | None = None) -> list[dict[str, Any]]:
        try:
            return await self.job_repo.find_all(filters or None)
        except ValidationError as exc:
            jobly_filter_rejections_total.labels(resource="jobs", reason=exc.code).inc()
            raise

    async def get(self, job_id: int) -> dict[str, Any]:
        return await self.job_repo.get(job_id)

    async def update(self, job_id: int, data: Mapping[str, Any]) -> dict[str, Any]:
        job = await self.job_repo.update(job_id, data)
        logger.info("Job updated", job_id=job_id, fields=sorted(data))
        return job

    async def remove(self, job_id: int) -> None:
        await self.job_repo.remove(job_id)
        logger.info("Job removed", job_id=job_id)

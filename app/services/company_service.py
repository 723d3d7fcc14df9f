"""Company service - company CRUD and search."""

from collections.abc import Mapping
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ValidationError
from app.core.metrics import jobly_filter_rejections_total
from app.persistence.company_repository import CompanyRepository

logger = structlog.get_logger(__name__)


class CompanyService:
    """Service for managing companies."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.company_repo = CompanyRepository(session)

    async def create(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """Create a company; handles must be unique."""
        handle = data["handle"]
        if await self.company_repo.exists(handle):
            raise ValidationError(f"Duplicate company: {handle}")

        company = await self.company_repo.create(data)
        logger.info("Company created", handle=handle)
        return company

    async def find_all(self, filters: Mapping[str, Any] | None = None) -> list[dict[str, Any]]:
        try:
            return await self.company_repo.find_all(filters or None)
        except ValidationError as exc:
            jobly_filter_rejections_total.labels(resource="companies", reason=exc.code).inc()
            raise

    async def get(self, handle: str) -> dict[str, Any]:
        return await self.company_repo.get(handle)

    async def update(self, handle: str, data: Mapping[str, Any]) -> dict[str, Any]:
        company = await self.company_repo.update(handle, data)
        logger.info("Company updated", handle=handle, fields=sorted(data))
        return company

    async def remove(self, handle: str) -> None:
        await self.company_repo.remove(handle)
        logger.info("Company removed", handle=handle)

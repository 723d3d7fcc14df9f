"""Job repository - CRUD for jobs."""

from collections.abc import Mapping
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFoundError
from app.persistence.base import fetch_named, fetch_positional
from app.persistence.company_repository import COMPANY_COLUMNS
from app.persistence.query_builder import build_job_filter, build_set_clause

JOB_COLUMNS = "id, title, salary, equity, company_handle"


class JobRepository:
    """CRUD operations for the jobs table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, data: Mapping[str, Any]) -> dict[str, Any]:
        rows = await fetch_named(
            self.session,
            "job_create",
            f"""
            INSERT INTO jobs (title, salary, equity, company_handle)
            VALUES (:title, :salary, :equity, :company_handle)
            RETURNING {JOB_COLUMNS}
            """,
            {
                "title": data["title"],
                "salary": data.get("salary"),
                "equity": data.get("equity"),
                "company_handle": data["companyHandle"],
            },
        )
        return rows[0]

    async def find_all(self, filters: Mapping[str, Any] | None = None) -> list[dict[str, Any]]:
        """List jobs with their company name, ordered by title.

        ``filters`` may hold ``title``, ``minSalary`` and ``hasEquity``. A
        ``hasEquity`` of false adds no constraint.
        """
        select = """
            SELECT j.id, j.title, j.salary, j.equity,
                   j.company_handle,
                   c.name AS "companyName"
            FROM jobs j
            LEFT JOIN companies AS c ON c.handle = j.company_handle
        """
        if not filters:
            return await fetch_named(self.session, "job_find_all", f"{select} ORDER BY title")

        clause = build_job_filter(filters)
        where = f"WHERE {clause.sql}" if clause.has_clauses else ""
        return await fetch_positional(
            self.session,
            "job_find_filtered",
            f"{select} {where} ORDER BY title",
            clause.values,
        )

    async def get(self, job_id: int) -> dict[str, Any]:
        """Return a job with its company embedded, or raise NotFoundError."""
        rows = await fetch_named(
            self.session,
            "job_get",
            f"SELECT {JOB_COLUMNS} FROM jobs WHERE id = :id",
            {"id": job_id},
        )
        if not rows:
            raise NotFoundError(f"No job: {job_id}")

        job = rows[0]
        companies = await fetch_named(
            self.session,
            "job_company",
            f"SELECT {COMPANY_COLUMNS} FROM companies WHERE handle = :handle",
            {"handle": job.pop("company_handle")},
        )
        job["company"] = companies[0] if companies else None
        return job

    async def update(self, job_id: int, data: Mapping[str, Any]) -> dict[str, Any]:
        """Apply a partial update of title, salary and/or equity."""
        clause = build_set_clause(data)
        rows = await fetch_positional(
            self.session,
            "job_update",
            f"""
            UPDATE jobs
            SET {clause.sql}
            WHERE id = ${clause.next_param}
            RETURNING {JOB_COLUMNS}
            """,
            [*clause.values, job_id],
        )
        if not rows:
            raise NotFoundError(f"No job: {job_id}")
        return rows[0]

    async def remove(self, job_id: int) -> None:
        rows = await fetch_named(
            self.session,
            "job_remove",
            "DELETE FROM jobs WHERE id = :id RETURNING id",
            {"id": job_id},
        )
        if not rows:
            raise NotFoundError(f"No job: {job_id}")

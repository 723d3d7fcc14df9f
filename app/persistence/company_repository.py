"""Company repository - CRUD for companies."""

from collections.abc import Mapping
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFoundError
from app.persistence.base import fetch_named, fetch_positional
from app.persistence.query_builder import build_company_filter, build_set_clause

COMPANY_COLUMNS = 'handle, name, description, num_employees AS "numEmployees", logo_url AS "logoUrl"'

# request field -> column, for partial updates
COMPANY_UPDATE_COLUMNS: dict[str, str] = {
    "numEmployees": "num_employees",
    "logoUrl": "logo_url",
}


class CompanyRepository:
    """CRUD operations for the companies table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def exists(self, handle: str) -> bool:
        rows = await fetch_named(
            self.session,
            "company_exists",
            "SELECT handle FROM companies WHERE handle = :handle",
            {"handle": handle},
        )
        return bool(rows)

    async def create(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """Insert a company. Expects camelCase keys as accepted by the API."""
        rows = await fetch_named(
            self.session,
            "company_create",
            f"""
            INSERT INTO companies (handle, name, description, num_employees, logo_url)
            VALUES (:handle, :name, :description, :num_employees, :logo_url)
            RETURNING {COMPANY_COLUMNS}
            """,
            {
                "handle": data["handle"],
                "name": data["name"],
                "description": data["description"],
                "num_employees": data.get("numEmployees"),
                "logo_url": data.get("logoUrl"),
            },
        )
        return rows[0]

    async def find_all(self, filters: Mapping[str, Any] | None = None) -> list[dict[str, Any]]:
        """List companies ordered by name, optionally filtered.

        ``filters`` may hold ``nameLike``, ``minEmployees`` and ``maxEmployees``.
        """
        if not filters:
            return await fetch_named(
                self.session,
                "company_find_all",
                f"SELECT {COMPANY_COLUMNS} FROM companies ORDER BY name",
            )

        clause = build_company_filter(filters)
        where = f"WHERE {clause.sql}" if clause.has_clauses else ""
        return await fetch_positional(
            self.session,
            "company_find_filtered",
            f"SELECT {COMPANY_COLUMNS} FROM companies {where} ORDER BY name",
            clause.values,
        )

    async def get(self, handle: str) -> dict[str, Any]:
        """Return a company with its jobs, or raise NotFoundError."""
        rows = await fetch_named(
            self.session,
            "company_get",
            f"SELECT {COMPANY_COLUMNS} FROM companies WHERE handle = :handle",
            {"handle": handle},
        )
        if not rows:
            raise NotFoundError(f"No company: {handle}")

        company = rows[0]
        company["jobs"] = await fetch_named(
            self.session,
            "company_jobs",
            """
            SELECT id, title, salary, equity
            FROM jobs
            WHERE company_handle = :handle
            ORDER BY id
            """,
            {"handle": handle},
        )
        return company

    async def update(self, handle: str, data: Mapping[str, Any]) -> dict[str, Any]:
        """Apply a partial update; fields absent from ``data`` are left alone."""
        clause = build_set_clause(data, COMPANY_UPDATE_COLUMNS)
        rows = await fetch_positional(
            self.session,
            "company_update",
            f"""
            UPDATE companies
            SET {clause.sql}
            WHERE handle = ${clause.next_param}
            RETURNING {COMPANY_COLUMNS}
            """,
            [*clause.values, handle],
        )
        if not rows:
            raise NotFoundError(f"No company: {handle}")
        return rows[0]

    async def remove(self, handle: str) -> None:
        rows = await fetch_named(
            self.session,
            "company_remove",
            "DELETE FROM companies WHERE handle = :handle RETURNING handle",
            {"handle": handle},
        )
        if not rows:
            raise NotFoundError(f"No company: {handle}")

"""Common schemas: camelCase base models, error responses, query parsing."""

from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from app.core.errors import ValidationError


class CamelModel(BaseModel):
    """Response model exposed with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CamelRequest(BaseModel):
    """Request body/query model: camelCase keys, unknown keys rejected."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class CamelQuery(BaseModel):
    """Query-string filters: only the camelCase names are accepted."""

    model_config = ConfigDict(alias_generator=to_camel, extra="forbid")


class ApiError(BaseModel):
    detail: str
    errors: dict[str, Any] | None = None


class DeletedResponse(BaseModel):
    deleted: str | int


ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ApiError},
    401: {"model": ApiError},
    404: {"model": ApiError},
}


QueryModelT = TypeVar("QueryModelT", bound=BaseModel)


def parse_query_filters(model: type[QueryModelT], params: Mapping[str, str]) -> dict[str, Any]:
    """Validate raw query params against ``model`` and return the filters present.

    Values stay as raw strings; coercion is done by the clause builders.
    """
    try:
        parsed = model.model_validate(dict(params))
    except PydanticValidationError as exc:
        raise ValidationError(
            "Invalid query parameters",
            details={".".join(str(part) for part in err["loc"]): err["msg"] for err in exc.errors()},
        ) from exc
    return parsed.model_dump(exclude_unset=True, by_alias=True)

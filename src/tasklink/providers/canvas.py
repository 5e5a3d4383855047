"""Canvas LMS REST client."""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from tasklink.contracts.exceptions import ProviderError
from tasklink.contracts.source import EnrollmentState, SourceAssignment, SourceClient, SourceCourse
from tasklink.providers._http import HttpApiClient

PER_PAGE = 50

M = TypeVar("M", bound=BaseModel)


class CanvasClient(HttpApiClient, SourceClient):
    """Reads courses and assignments from ``{base_url}/api/v1``.

    Collections are paged with ``page``/``per_page`` until a short or empty
    page comes back, rather than following ``Link`` headers.
    """

    service = "Canvas"

    async def __aenter__(self) -> CanvasClient:
        await super().__aenter__()
        return self

    async def list_courses(self, state: EnrollmentState) -> list[SourceCourse]:
        rows = await self._fetch_all_pages("/api/v1/courses", {"enrollment_state": state.value})
        return self._parse_rows(SourceCourse, rows)

    async def list_assignments(self, course_id: str) -> list[SourceAssignment]:
        rows = await self._fetch_all_pages(f"/api/v1/courses/{course_id}/assignments", {})
        return self._parse_rows(SourceAssignment, rows)

    async def _fetch_all_pages(self, path: str, params: dict[str, Any]) -> list[Any]:
        rows: list[Any] = []
        page = 1
        while True:
            data = await self._json("GET", path, params={**params, "per_page": PER_PAGE, "page": page})
            if data is None:
                break
            if not isinstance(data, list):
                raise ProviderError(f"Canvas GET {path} returned a non-list payload")
            if not data:
                break
            rows.extend(data)
            if len(data) < PER_PAGE:
                break
            page += 1
        return rows

    def _parse_rows(self, model: type[M], rows: list[Any]) -> list[M]:
        try:
            return [model.model_validate(row) for row in rows]
        except ValidationError as exc:
            raise ProviderError(f"Canvas returned malformed {model.__name__} data: {exc}") from exc

# classroom_app/schemas/pagination.py
"""Typed list-query configuration shared by list endpoints."""
from enum import Enum
from math import ceil
from typing import Literal, Optional, Union
from uuid import UUID

from pydantic import Field, field_validator

from .base import CamelModel
from ..core.config import settings


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class StudentSortField(str, Enum):
    NAME = "name"
    ROLL = "roll"
    CREATED_AT = "createdAt"


class TeacherSortField(str, Enum):
    NAME = "name"
    CREATED_AT = "createdAt"


class ListQuery(CamelModel):
    page: int = Field(1, ge=1)
    page_size: Union[int, Literal["all"]] = Field(default_factory=lambda: settings.default_page_limit)
    search: Optional[str] = Field(default=None, max_length=100)
    sort_dir: SortDirection = SortDirection.ASC

    @field_validator("page_size")
    @classmethod
    def validate_page_size(cls, v):
        if v == "all":
            return v
        if v < 1 or v > settings.max_page_limit:
            raise ValueError(f"page_size must be between 1 and {settings.max_page_limit}")
        return v

    @field_validator("search")
    @classmethod
    def blank_search_is_none(cls, v):
        if v is None:
            return None
        v = v.strip()
        return v or None

    @property
    def limit(self) -> Optional[int]:
        return None if self.page_size == "all" else self.page_size

    @property
    def offset(self) -> int:
        return 0 if self.limit is None else (self.page - 1) * self.limit

    def total_pages(self, total: int) -> int:
        if self.limit is None:
            return 1 if total else 0
        return ceil(total / self.limit)


class StudentListQuery(ListQuery):
    sort_field: StudentSortField = StudentSortField.NAME


class TeacherListQuery(ListQuery):
    sort_field: TeacherSortField = TeacherSortField.CREATED_AT
    sort_dir: SortDirection = SortDirection.DESC
    classroom_id: Optional[UUID] = None
    subject_id: Optional[UUID] = None


class StudentAttendanceQuery(StudentListQuery):
    subject_id: Optional[UUID] = None

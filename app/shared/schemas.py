# app/shared/schemas.py
"""
Shared response/request base schemas.
Wire format is camelCase; snake_case is still accepted on input.
"""
from typing import Generic, List, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PaginationMeta(CamelModel):
    total: int
    page: int
    limit: int
    total_pages: int
    has_next_page: bool
    has_previous_page: bool


class PaginatedResponse(CamelModel, Generic[T]):
    data: List[T]
    meta: PaginationMeta


class MessageResponse(BaseModel):
    message: str

# schoolhub/utils/pagination.py
"""Pagination utilities for consistent API responses."""
from typing import Dict
from pydantic import BaseModel, Field
from fastapi import Query
from math import ceil

class PaginationParams(BaseModel):
    """Standard pagination parameters."""
    page: int = Field(1, ge=1, description="Page number (starts from 1)")
    limit: int = Field(10, ge=1, le=100, description="Items per page")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

class PaginationMeta(BaseModel):
    """Pagination metadata."""
    page: int
    limit: int
    total: int
    pages: int

class Paginator:
    """Pagination utility class."""

    @staticmethod
    def get_pagination_params(
        page: int = Query(1, ge=1, description="Page number"),
        limit: int = Query(10, ge=1, le=100, description="Items per page")
    ) -> PaginationParams:
        """FastAPI dependency for pagination parameters."""
        return PaginationParams(page=page, limit=limit)

    @staticmethod
    def create_meta(params: PaginationParams, total: int) -> Dict[str, int]:
        """Create pagination metadata."""
        pages = ceil(total / params.limit) if params.limit > 0 else 0
        return PaginationMeta(page=params.page, limit=params.limit, total=total, pages=pages).model_dump()

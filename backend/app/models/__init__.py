"""SQLAlchemy models for the pgCompare repository schema.

This module exports all database models for use in the application.
"""
from app.models.base import Base
from app.models.project import DcProject, ProjectCreate, ProjectUpdate, ProjectResponse
from app.models.table import (
    DcTable,
    DcTableMap,
    DcTableColumn,
    DcTableColumnMap,
    TableUpdate,
    TableResponse,
    TableMapUpdate,
    TableMapResponse,
    TableColumnUpdate,
    TableColumnResponse,
    ColumnMapUpdate,
    ColumnMapResponse,
)
from app.models.result import DcResult, ResultResponse

__all__ = [
    "Base",
    "DcProject",
    "ProjectCreate",
    "ProjectUpdate",
    "ProjectResponse",
    "DcTable",
    "DcTableMap",
    "DcTableColumn",
    "DcTableColumnMap",
    "TableUpdate",
    "TableResponse",
    "TableMapUpdate",
    "TableMapResponse",
    "TableColumnUpdate",
    "TableColumnResponse",
    "ColumnMapUpdate",
    "ColumnMapResponse",
    "DcResult",
    "ResultResponse",
]

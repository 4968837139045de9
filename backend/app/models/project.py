"""Project model - a named group of tables compared together."""
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import BigInteger, Identity, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base


class DcProject(Base):
    """Database model for ``dc_project``.

    Attributes:
        pid: Project identifier (identity column).
        project_name: Display name of the project.
        project_config: Free-form JSON configuration used by pgCompare runs.
    """

    __tablename__ = "dc_project"

    pid: Mapped[int] = mapped_column(
        BigInteger,
        Identity(always=True),
        primary_key=True,
    )
    project_name: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="default",
    )
    project_config: Mapped[dict[str, Any] | None] = mapped_column(
        JSONB,
        nullable=True,
    )


# Pydantic schemas for API
class ProjectCreate(BaseModel):
    """Schema for creating a new project."""

    project_name: str | None = None


class ProjectUpdate(BaseModel):
    """Schema for updating a project; only provided fields are written."""

    project_name: str | None = None
    project_config: dict[str, Any] | None = None


class ProjectResponse(BaseModel):
    """Schema for project response."""

    model_config = ConfigDict(from_attributes=True)

    pid: int
    project_name: str
    project_config: dict[str, Any] | None = Field(default=None)

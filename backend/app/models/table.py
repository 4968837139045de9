"""Table models - compared tables, their source/target mappings and columns."""
from pydantic import BaseModel, ConfigDict
from sqlalchemy import BigInteger, Boolean, Identity, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base


class DcTable(Base):
    """Database model for ``dc_table``: one logical table compared by a project.

    Attributes:
        tid: Table identifier (identity column).
        pid: Owning project.
        table_alias: Name shared by the source and target sides.
        enabled: Whether the table takes part in compare runs.
        batch_nbr: Batch the table is assigned to.
        parallel_degree: Number of threads used to compare the table.
    """

    __tablename__ = "dc_table"

    tid: Mapped[int] = mapped_column(
        BigInteger,
        Identity(always=True),
        primary_key=True,
    )
    pid: Mapped[int] = mapped_column(BigInteger, nullable=False, default=1)
    table_alias: Mapped[str | None] = mapped_column(Text, nullable=True)
    enabled: Mapped[bool | None] = mapped_column(Boolean, nullable=True, default=True)
    batch_nbr: Mapped[int | None] = mapped_column(Integer, nullable=True, default=1)
    parallel_degree: Mapped[int | None] = mapped_column(Integer, nullable=True, default=1)


class DcTableMap(Base):
    """Database model for ``dc_table_map``: where each side of a table lives."""

    __tablename__ = "dc_table_map"

    tid: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    dest_type: Mapped[str] = mapped_column(String(20), primary_key=True, default="target")
    schema_name: Mapped[str] = mapped_column(Text, primary_key=True)
    table_name: Mapped[str] = mapped_column(Text, primary_key=True)
    mod_column: Mapped[str | None] = mapped_column(String(200), nullable=True)
    table_filter: Mapped[str | None] = mapped_column(String(200), nullable=True)
    schema_preserve_case: Mapped[bool | None] = mapped_column(Boolean, nullable=True, default=False)
    table_preserve_case: Mapped[bool | None] = mapped_column(Boolean, nullable=True, default=False)


class DcTableColumn(Base):
    """Database model for ``dc_table_column``: a logical column of a table."""

    __tablename__ = "dc_table_column"

    column_id: Mapped[int] = mapped_column(
        BigInteger,
        Identity(always=True),
        primary_key=True,
    )
    tid: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    column_alias: Mapped[str] = mapped_column(String(50), nullable=False)
    enabled: Mapped[bool | None] = mapped_column(Boolean, nullable=True, default=True)


class DcTableColumnMap(Base):
    """Database model for ``dc_table_column_map``.

    One row per physical column on the source or target side, keyed by
    ``(column_id, column_origin, column_name)``.
    """

    __tablename__ = "dc_table_column_map"

    tid: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    column_id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    column_origin: Mapped[str] = mapped_column(String(10), primary_key=True, default="source")
    column_name: Mapped[str] = mapped_column(String(50), primary_key=True)
    data_type: Mapped[str] = mapped_column(String(30), nullable=False)
    data_class: Mapped[str | None] = mapped_column(String(20), nullable=True, default="string")
    data_length: Mapped[int | None] = mapped_column(Integer, nullable=True)
    number_precision: Mapped[int | None] = mapped_column(Integer, nullable=True)
    number_scale: Mapped[int | None] = mapped_column(Integer, nullable=True)
    column_nullable: Mapped[bool | None] = mapped_column(Boolean, nullable=True, default=True)
    column_primarykey: Mapped[bool | None] = mapped_column(Boolean, nullable=True, default=False)
    map_expression: Mapped[str | None] = mapped_column(String(500), nullable=True)
    supported: Mapped[bool | None] = mapped_column(Boolean, nullable=True, default=True)
    preserve_case: Mapped[bool | None] = mapped_column(Boolean, nullable=True, default=False)
    map_type: Mapped[str] = mapped_column(String(15), nullable=False, default="column")


# Pydantic schemas for API
class TableUpdate(BaseModel):
    """Schema for updating a table's run settings."""

    enabled: bool | None = None
    batch_nbr: int | None = None
    parallel_degree: int | None = None


class TableResponse(BaseModel):
    """Schema for table response."""

    model_config = ConfigDict(from_attributes=True)

    tid: int
    pid: int
    table_alias: str | None = None
    enabled: bool | None = None
    batch_nbr: int | None = None
    parallel_degree: int | None = None


class TableMapUpdate(BaseModel):
    """Schema for updating a table map, addressed by its composite key."""

    tid: int
    dest_type: str
    schema_name: str
    table_name: str
    mod_column: str | None = None
    table_filter: str | None = None


class TableMapResponse(BaseModel):
    """Schema for table map response."""

    model_config = ConfigDict(from_attributes=True)

    tid: int
    dest_type: str
    schema_name: str
    table_name: str
    mod_column: str | None = None
    table_filter: str | None = None
    schema_preserve_case: bool | None = None
    table_preserve_case: bool | None = None


class TableColumnUpdate(BaseModel):
    """Schema for updating a table column."""

    column_id: int
    column_alias: str | None = None
    enabled: bool | None = None


class TableColumnResponse(BaseModel):
    """Schema for table column response."""

    model_config = ConfigDict(from_attributes=True)

    column_id: int
    tid: int
    column_alias: str
    enabled: bool | None = None


class ColumnMapUpdate(BaseModel):
    """Schema for updating a column map's expression."""

    column_id: int
    column_origin: str
    column_name: str
    map_expression: str | None = None


class ColumnMapResponse(BaseModel):
    """Schema for column map response."""

    model_config = ConfigDict(from_attributes=True)

    tid: int
    column_id: int
    column_origin: str
    column_name: str
    data_type: str
    data_class: str | None = None
    data_length: int | None = None
    number_precision: int | None = None
    number_scale: int | None = None
    column_nullable: bool | None = None
    column_primarykey: bool | None = None
    map_expression: str | None = None
    supported: bool | None = None
    preserve_case: bool | None = None
    map_type: str

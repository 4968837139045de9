"""Result model - per-table outcome of a compare run."""
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict
from sqlalchemy import BigInteger, DateTime, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base


class DcResult(Base):
    """Database model for ``dc_result``.

    A compare run (``rid``) writes one row per table it compares.

    Attributes:
        cid: Result identifier.
        rid: Run identifier shared by every table of one run.
        tid: Compared table.
        status: Run status reported by pgCompare (e.g. ``running``).
        compare_start: When the table's comparison started.
        compare_end: When it finished (None while running).
    """

    __tablename__ = "dc_result"

    cid: Mapped[int] = mapped_column(Integer, primary_key=True)
    rid: Mapped[Decimal | None] = mapped_column(Numeric, nullable=True)
    tid: Mapped[int | None] = mapped_column(BigInteger, nullable=True, index=True)
    table_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str | None] = mapped_column(String, nullable=True)
    compare_start: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    compare_end: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    equal_cnt: Mapped[int | None] = mapped_column(Integer, nullable=True)
    missing_source_cnt: Mapped[int | None] = mapped_column(Integer, nullable=True)
    missing_target_cnt: Mapped[int | None] = mapped_column(Integer, nullable=True)
    not_equal_cnt: Mapped[int | None] = mapped_column(Integer, nullable=True)
    source_cnt: Mapped[int | None] = mapped_column(Integer, nullable=True)
    target_cnt: Mapped[int | None] = mapped_column(Integer, nullable=True)


# Pydantic schemas for API
class ResultResponse(BaseModel):
    """Schema for result response."""

    model_config = ConfigDict(from_attributes=True)

    cid: int
    rid: Decimal | None = None
    tid: int | None = None
    table_name: str | None = None
    status: str | None = None
    compare_start: datetime | None = None
    compare_end: datetime | None = None
    equal_cnt: int | None = None
    missing_source_cnt: int | None = None
    missing_target_cnt: int | None = None
    not_equal_cnt: int | None = None
    source_cnt: int | None = None
    target_cnt: int | None = None

    def to_dict(self, *, rid_as_string: bool = False) -> dict:
        """Serialise for JSON; ``rid`` is a string or an integer."""
        data = self.model_dump(mode="json")
        if self.rid is None:
            data["rid"] = None
        elif rid_as_string:
            data["rid"] = str(self.rid)
        else:
            data["rid"] = int(self.rid)
        return data
